from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...config import settings
from ...models import Schedule
from ...services import CascadeService, ScheduleEditorSession, ScheduleService
from ...utils.duration import format_duration, format_duration_short
from ...utils.timing import normalize_time
from .projects import load_project_or_404

router = APIRouter(tags=["schedules"])


class CreateScheduleRequest(BaseModel):
    shooting_date: str | None = None
    episode: int = 1
    gather_time: str | None = None
    shooting_location: str = ""
    shooting_location_name: str = ""
    gather_location: str = ""
    gather_location_name: str = ""
    weather_condition: str | None = None
    min_temp: float | None = None
    max_temp: float | None = None
    rain_probability: int | None = None
    sunrise: str | None = None
    sunset: str | None = None
    notes: str | None = None


class UpdateScheduleRequest(BaseModel):
    shooting_date: str | None = None
    episode: int | None = None
    gather_time: str | None = None
    shooting_location: str | None = None
    shooting_location_name: str | None = None
    gather_location: str | None = None
    gather_location_name: str | None = None
    weather_condition: str | None = None
    min_temp: float | None = None
    max_temp: float | None = None
    rain_probability: int | None = None
    sunrise: str | None = None
    sunset: str | None = None
    notes: str | None = None


class ScheduleSummaryResponse(BaseModel):
    schedule_id: str
    gather_time: str
    shooting_end_time: str
    scene_count: int
    cut_count: int
    total_duration: int
    total_duration_label: str
    total_duration_short: str
    times_current: bool  # stored times chain from the gather time


def load_schedule_or_404(schedule_id: str) -> Schedule:
    try:
        schedule = ScheduleService.load(schedule_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


def open_session_or_404(schedule_id: str) -> ScheduleEditorSession:
    load_schedule_or_404(schedule_id)
    session = ScheduleEditorSession.open(schedule_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return session


@router.post("/projects/{project_id}/schedules", response_model=Schedule)
async def create_schedule(project_id: str, request: CreateScheduleRequest) -> Schedule:
    """Create a shooting day for a project."""
    load_project_or_404(project_id)
    fields = request.model_dump()
    fields["gather_time"] = normalize_time(request.gather_time) or settings.default_gather_time
    for key in ("sunrise", "sunset"):
        if fields[key]:
            fields[key] = normalize_time(fields[key]) or None
    return ScheduleService.create(project_id, **fields)


@router.get("/projects/{project_id}/schedules", response_model=list[Schedule])
async def list_schedules(project_id: str) -> list[Schedule]:
    """List a project's shooting days, latest first."""
    load_project_or_404(project_id)
    return ScheduleService.list_for_project(project_id)


@router.get("/schedules/{schedule_id}", response_model=Schedule)
async def get_schedule(schedule_id: str) -> Schedule:
    return load_schedule_or_404(schedule_id)


@router.patch("/schedules/{schedule_id}", response_model=Schedule)
async def update_schedule(schedule_id: str, request: UpdateScheduleRequest) -> Schedule:
    """Update a schedule. A new gather time re-cascades every scene."""
    load_schedule_or_404(schedule_id)
    updates = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    gather_time = updates.pop("gather_time", None)
    if gather_time is not None and not normalize_time(gather_time):
        raise HTTPException(status_code=400, detail="Invalid gather time")

    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        if updates:
            for field, value in updates.items():
                setattr(session.schedule, field, value)
            ScheduleService.save(session.schedule)
        if gather_time is not None:
            session.set_gather_time(gather_time)
        return session.schedule


@router.delete("/schedules/{schedule_id}")
async def delete_schedule(schedule_id: str) -> dict:
    load_schedule_or_404(schedule_id)
    with ScheduleService.lock(schedule_id):
        ScheduleService.delete(schedule_id)
    return {"status": "deleted"}


@router.post("/schedules/{schedule_id}/recalculate", response_model=Schedule)
async def recalculate_schedule(schedule_id: str) -> Schedule:
    """Re-run the time cascade; nothing is written when times are already current."""
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        session.recalculate()
        return session.schedule


@router.get("/schedules/{schedule_id}/summary", response_model=ScheduleSummaryResponse)
async def get_schedule_summary(schedule_id: str) -> ScheduleSummaryResponse:
    """Totals shown in the schedule header and exports."""
    schedule = load_schedule_or_404(schedule_id)
    scene_list = ScheduleService.load_scenes(schedule_id)
    scenes = scene_list.scenes
    total = CascadeService.total_duration(scenes)
    return ScheduleSummaryResponse(
        schedule_id=schedule.id,
        gather_time=schedule.gather_time,
        shooting_end_time=schedule.shooting_end_time,
        scene_count=len(scenes),
        # A scene without cuts still counts as one setup
        cut_count=sum(len(s.cuts) or 1 for s in scenes),
        total_duration=total,
        total_duration_label=format_duration(total),
        total_duration_short=format_duration_short(total),
        times_current=scene_list.validate_continuity(schedule.gather_time),
    )
