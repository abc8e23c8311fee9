from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ...models import Cut, LocationType, Scene, SceneStatus, TimeOfDay
from ...services import ScheduleService
from ...utils.duration import format_duration_short, parse_duration
from .schedules import load_schedule_or_404, open_session_or_404

router = APIRouter(prefix="/schedules/{schedule_id}/scenes", tags=["scenes"])


class CutResponse(BaseModel):
    id: str
    cut_number: str
    description: str
    estimated_duration: int
    remarks: str


class SceneResponse(BaseModel):
    id: str
    schedule_id: str
    order: int
    scene_number: str
    time_of_day: TimeOfDay
    location_type: LocationType
    start_time: str
    end_time: str
    estimated_duration: int
    duration_label: str
    location: str
    description: str
    main_characters: list[str]
    remarks: str
    cuts: list[CutResponse]
    total_cut_duration: int
    status: SceneStatus


class ScenesResponse(BaseModel):
    scenes: list[SceneResponse]


class CreateSceneRequest(BaseModel):
    scene_number: str
    time_of_day: TimeOfDay = TimeOfDay.DAY
    location_type: LocationType = LocationType.INTERIOR
    # Minutes, or free text such as "1h30m" / "90분" / "1:30"
    estimated_duration: int | str = 30
    location: str = ""
    description: str = ""
    main_characters: list[str] = Field(default_factory=list)
    remarks: str = ""
    cuts: list[Cut] = Field(default_factory=list)
    status: SceneStatus = SceneStatus.PENDING


class UpdateSceneRequest(BaseModel):
    scene_number: str | None = None
    time_of_day: TimeOfDay | None = None
    location_type: LocationType | None = None
    estimated_duration: int | str | None = None
    location: str | None = None
    description: str | None = None
    main_characters: list[str] | None = None
    remarks: str | None = None
    status: SceneStatus | None = None


class ReorderRequest(BaseModel):
    from_index: int
    to_index: int


class UpdateCutRequest(BaseModel):
    cut_number: str | None = None
    description: str | None = None
    estimated_duration: int | str | None = None
    remarks: str | None = None


def to_response(scenes: list[Scene]) -> ScenesResponse:
    return ScenesResponse(
        scenes=[
            SceneResponse(
                id=s.id,
                schedule_id=s.schedule_id,
                order=s.order,
                scene_number=s.scene_number,
                time_of_day=s.time_of_day,
                location_type=s.location_type,
                start_time=s.start_time,
                end_time=s.end_time,
                estimated_duration=s.estimated_duration,
                duration_label=format_duration_short(s.estimated_duration),
                location=s.location,
                description=s.description,
                main_characters=s.main_characters,
                remarks=s.remarks,
                cuts=[CutResponse(**c.model_dump()) for c in s.cuts],
                total_cut_duration=s.total_cut_duration,
                status=s.status,
            )
            for s in scenes
        ]
    )


def _duration_or_400(value: int | str) -> int:
    minutes = parse_duration(value) if isinstance(value, str) else value
    if minutes <= 0:
        raise HTTPException(status_code=400, detail=f"Invalid duration: {value!r}")
    return minutes


def _cut_duration_or_400(value: int | str) -> int:
    # Cuts may be zero-length; only text that fails to parse is rejected
    if isinstance(value, str):
        return _duration_or_400(value)
    if value < 0:
        raise HTTPException(status_code=400, detail=f"Invalid duration: {value!r}")
    return value


@router.get("", response_model=ScenesResponse)
async def get_scenes(schedule_id: str) -> ScenesResponse:
    """Get all scenes of a schedule in shooting order."""
    load_schedule_or_404(schedule_id)
    return to_response(ScheduleService.load_scenes(schedule_id).scenes)


@router.post("", response_model=ScenesResponse)
async def create_scene(schedule_id: str, request: CreateSceneRequest) -> ScenesResponse:
    """Append a scene filled in from the scene form."""
    fields = request.model_dump()
    fields["estimated_duration"] = _duration_or_400(request.estimated_duration)
    fields["cuts"] = request.cuts
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        session.insert_scene(Scene(schedule_id=schedule_id, **fields))
        return to_response(session.scenes)


@router.post("/quick-add", response_model=ScenesResponse)
async def quick_add_scene(schedule_id: str) -> ScenesResponse:
    """Append a scene with defaults inherited from the last one."""
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        session.add_scene()
        return to_response(session.scenes)


@router.post("/reorder", response_model=ScenesResponse)
async def reorder_scenes(schedule_id: str, request: ReorderRequest) -> ScenesResponse:
    """Move one scene (drag-and-drop) and re-cascade times."""
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        session.move_scene(request.from_index, request.to_index)
        return to_response(session.scenes)


@router.patch("/{scene_id}", response_model=ScenesResponse)
async def update_scene(schedule_id: str, scene_id: str, request: UpdateSceneRequest) -> ScenesResponse:
    """Edit a scene. Duration edits shift every later scene."""
    updates = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    if "estimated_duration" in updates:
        updates["estimated_duration"] = _duration_or_400(updates["estimated_duration"])

    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        if session.find_scene(scene_id) is None:
            raise HTTPException(status_code=404, detail="Scene not found")
        if updates:
            session.update_scene(scene_id, **updates)
        return to_response(session.scenes)


@router.delete("/{scene_id}", response_model=ScenesResponse)
async def delete_scene(schedule_id: str, scene_id: str) -> ScenesResponse:
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        if not session.delete_scene(scene_id):
            raise HTTPException(status_code=404, detail="Scene not found")
        return to_response(session.scenes)


@router.post("/{scene_id}/cuts/quick-add", response_model=ScenesResponse)
async def quick_add_cut(schedule_id: str, scene_id: str) -> ScenesResponse:
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        if session.add_cut(scene_id) is None:
            raise HTTPException(status_code=404, detail="Scene not found")
        return to_response(session.scenes)


@router.post("/{scene_id}/cuts/reorder", response_model=ScenesResponse)
async def reorder_cuts(schedule_id: str, scene_id: str, request: ReorderRequest) -> ScenesResponse:
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        if session.find_scene(scene_id) is None:
            raise HTTPException(status_code=404, detail="Scene not found")
        session.move_cut(scene_id, request.from_index, request.to_index)
        return to_response(session.scenes)


@router.patch("/{scene_id}/cuts/{cut_id}", response_model=ScenesResponse)
async def update_cut(schedule_id: str, scene_id: str, cut_id: str, request: UpdateCutRequest) -> ScenesResponse:
    updates = {k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None}
    if "estimated_duration" in updates:
        updates["estimated_duration"] = _cut_duration_or_400(updates["estimated_duration"])

    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        scene = session.find_scene(scene_id)
        if scene is None or not any(c.id == cut_id for c in scene.cuts):
            raise HTTPException(status_code=404, detail="Cut not found")
        if updates:
            session.update_cut(scene_id, cut_id, **updates)
        return to_response(session.scenes)


@router.delete("/{scene_id}/cuts/{cut_id}", response_model=ScenesResponse)
async def delete_cut(schedule_id: str, scene_id: str, cut_id: str) -> ScenesResponse:
    with ScheduleService.lock(schedule_id):
        session = open_session_or_404(schedule_id)
        scene = session.find_scene(scene_id)
        if scene is None or not any(c.id == cut_id for c in scene.cuts):
            raise HTTPException(status_code=404, detail="Cut not found")
        session.delete_cut(scene_id, cut_id)
        return to_response(session.scenes)
