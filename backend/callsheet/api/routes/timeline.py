from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...models import Timeline, TimelineItem, TimelineType
from ...services import ScheduleService
from ...utils.timing import normalize_time
from .schedules import load_schedule_or_404

router = APIRouter(prefix="/schedules/{schedule_id}/timeline", tags=["timeline"])


# Typical shooting day, inserted in one click from the timeline editor
DEFAULT_TIMELINE_TEMPLATE: list[tuple[str, str, TimelineType]] = [
    ("06:30", "반출 인원 집합", TimelineType.GATHER),
    ("07:00", "장비 반출", TimelineType.OTHER),
    ("07:30", "전체 스태프 집합", TimelineType.GATHER),
    ("08:00", "아침식사", TimelineType.MEAL),
    ("12:00", "점심식사", TimelineType.MEAL),
    ("18:00", "저녁식사", TimelineType.MEAL),
    ("22:00", "바라시 (철수)", TimelineType.WRAP),
]


class TimelineItemRequest(BaseModel):
    time: str
    end_time: str | None = None
    title: str
    description: str | None = None
    type: TimelineType = TimelineType.OTHER


class UpdateTimelineItemRequest(BaseModel):
    order: int | None = None
    time: str | None = None
    end_time: str | None = None
    title: str | None = None
    description: str | None = None
    type: TimelineType | None = None


def _time_or_400(value: str) -> str:
    normalized = normalize_time(value)
    if not normalized:
        raise HTTPException(status_code=400, detail=f"Invalid time: {value!r}")
    return normalized


@router.get("", response_model=Timeline)
async def get_timeline(schedule_id: str) -> Timeline:
    load_schedule_or_404(schedule_id)
    return ScheduleService.load_timeline(schedule_id)


@router.post("", response_model=TimelineItem)
async def create_timeline_item(schedule_id: str, request: TimelineItemRequest) -> TimelineItem:
    """Append an entry to the day's timeline."""
    load_schedule_or_404(schedule_id)
    if not request.title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    with ScheduleService.lock(schedule_id):
        order = len(ScheduleService.load_timeline(schedule_id).items)
        item = TimelineItem(
            order=order,
            time=_time_or_400(request.time),
            end_time=normalize_time(request.end_time) or None,
            title=request.title,
            description=request.description,
            type=request.type,
        )
        return ScheduleService.add_timeline_item(schedule_id, item)


@router.post("/templates", response_model=Timeline)
async def add_default_template(schedule_id: str) -> Timeline:
    """Append the standard day template (gather, meals, wrap)."""
    load_schedule_or_404(schedule_id)
    with ScheduleService.lock(schedule_id):
        timeline = ScheduleService.load_timeline(schedule_id)
        for time, title, item_type in DEFAULT_TIMELINE_TEMPLATE:
            timeline.items.append(
                TimelineItem(
                    schedule_id=schedule_id,
                    order=len(timeline.items),
                    time=time,
                    title=title,
                    type=item_type,
                )
            )
        ScheduleService.save_timeline(schedule_id, timeline)
        return timeline


@router.patch("/{item_id}", response_model=TimelineItem)
async def update_timeline_item(schedule_id: str, item_id: str, request: UpdateTimelineItemRequest) -> TimelineItem:
    load_schedule_or_404(schedule_id)
    updates = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    if "time" in updates:
        updates["time"] = _time_or_400(updates["time"])
    if "end_time" in updates:
        updates["end_time"] = normalize_time(updates["end_time"]) or None

    with ScheduleService.lock(schedule_id):
        timeline = ScheduleService.load_timeline(schedule_id)
        for index, item in enumerate(timeline.items):
            if item.id == item_id:
                timeline.items[index] = item.model_copy(update=updates)
                break
        else:
            raise HTTPException(status_code=404, detail="Timeline item not found")
        timeline.items.sort(key=lambda t: t.order)
        ScheduleService.save_timeline(schedule_id, timeline)
        return next(t for t in timeline.items if t.id == item_id)


@router.delete("/{item_id}")
async def delete_timeline_item(schedule_id: str, item_id: str) -> dict:
    load_schedule_or_404(schedule_id)
    with ScheduleService.lock(schedule_id):
        timeline = ScheduleService.load_timeline(schedule_id)
        remaining = [t for t in timeline.items if t.id != item_id]
        if len(remaining) == len(timeline.items):
            raise HTTPException(status_code=404, detail="Timeline item not found")
        ScheduleService.save_timeline(schedule_id, Timeline(items=remaining))
    return {"status": "deleted"}
