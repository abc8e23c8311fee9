import logging
import shutil
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Iterator

from pydantic import ValidationError

from ..config import settings
from ..models import Scene, SceneList, Schedule, Timeline, TimelineItem
from .project_service import validate_record_id

logger = logging.getLogger("uvicorn.error")


class ScheduleService:
    """File-backed storage for schedules, their scenes and their timeline.

    Layout under ``settings.schedules_dir``::

        <schedule_id>/schedule.json
        <schedule_id>/scenes.json
        <schedule_id>/timeline.json

    Writes that must observe a consistent snapshot (recompute-and-save)
    should run inside ``ScheduleService.lock(schedule_id)``.
    """

    _registry_lock = Lock()
    _locks: dict[str, Lock] = {}

    @classmethod
    @contextmanager
    def lock(cls, schedule_id: str) -> Iterator[None]:
        """Serialize read-modify-write cycles on one schedule."""
        with cls._registry_lock:
            schedule_lock = cls._locks.setdefault(schedule_id, Lock())
        with schedule_lock:
            yield

    @staticmethod
    def get_schedule_dir(schedule_id: str) -> Path:
        validate_record_id(schedule_id, "schedule")
        return settings.schedules_dir / schedule_id

    @classmethod
    def get_schedule_file(cls, schedule_id: str) -> Path:
        return cls.get_schedule_dir(schedule_id) / "schedule.json"

    @classmethod
    def get_scenes_file(cls, schedule_id: str) -> Path:
        return cls.get_schedule_dir(schedule_id) / "scenes.json"

    @classmethod
    def get_timeline_file(cls, schedule_id: str) -> Path:
        return cls.get_schedule_dir(schedule_id) / "timeline.json"

    # Schedules

    @classmethod
    def create(cls, project_id: str, **fields) -> Schedule:
        """Create a new schedule for a project."""
        validate_record_id(project_id, "project")
        schedule = Schedule(project_id=project_id, **fields)
        cls.get_schedule_dir(schedule.id).mkdir(parents=True, exist_ok=True)
        cls.save(schedule)
        logger.info("Created schedule %s for project %s", schedule.id, project_id)
        return schedule

    @classmethod
    def save(cls, schedule: Schedule) -> None:
        schedule.updated_at = datetime.now()
        schedule_file = cls.get_schedule_file(schedule.id)
        schedule_file.parent.mkdir(parents=True, exist_ok=True)
        schedule_file.write_text(schedule.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, schedule_id: str) -> Schedule | None:
        schedule_file = cls.get_schedule_file(schedule_id)
        if not schedule_file.exists():
            return None
        try:
            return Schedule.model_validate_json(schedule_file.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to parse schedule file %s", schedule_file)
            return None

    @classmethod
    def delete(cls, schedule_id: str) -> bool:
        schedule_dir = cls.get_schedule_dir(schedule_id)
        if not schedule_dir.exists():
            return False
        shutil.rmtree(schedule_dir)
        with cls._registry_lock:
            cls._locks.pop(schedule_id, None)
        logger.info("Deleted schedule %s", schedule_id)
        return True

    @classmethod
    def list_for_project(cls, project_id: str) -> list[Schedule]:
        """Schedules of a project, latest shooting date first."""
        schedules = []
        for schedule_dir in settings.schedules_dir.iterdir():
            if not schedule_dir.is_dir():
                continue
            try:
                schedule = cls.load(schedule_dir.name)
            except ValueError:
                continue
            if schedule and schedule.project_id == project_id:
                schedules.append(schedule)
        return sorted(
            schedules,
            key=lambda s: (s.shooting_date or "", s.episode),
            reverse=True,
        )

    # Scenes

    @classmethod
    def load_scenes(cls, schedule_id: str) -> SceneList:
        """Load scenes sorted by ``order``; empty when none are stored."""
        scenes_file = cls.get_scenes_file(schedule_id)
        if not scenes_file.exists():
            return SceneList()
        try:
            scene_list = SceneList.model_validate_json(scenes_file.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to parse scenes file %s", scenes_file)
            return SceneList()
        scene_list.sort()
        return scene_list

    @classmethod
    def replace_scenes(cls, schedule_id: str, scenes: SceneList) -> None:
        """Overwrite the stored scene list."""
        scenes_file = cls.get_scenes_file(schedule_id)
        scenes_file.parent.mkdir(parents=True, exist_ok=True)
        scenes_file.write_text(scenes.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def save_scenes(cls, schedule_id: str, scenes: list[Scene]) -> int:
        """Batch-update stored scenes by id. Returns how many were written."""
        if not scenes:
            return 0
        stored = cls.load_scenes(schedule_id)
        updates = {scene.id: scene for scene in scenes}
        now = datetime.now()
        merged = []
        written = 0
        for existing in stored.scenes:
            update = updates.pop(existing.id, None)
            if update is None:
                merged.append(existing)
                continue
            update = update.model_copy(deep=True)
            update.updated_at = now
            merged.append(update)
            written += 1
        if updates:
            logger.warning(
                "Ignoring %d update(s) for unknown scene(s) in schedule %s",
                len(updates),
                schedule_id,
            )
        cls.replace_scenes(schedule_id, SceneList(scenes=merged))
        logger.info("Saved %d scene(s) for schedule %s", written, schedule_id)
        return written

    @classmethod
    def create_scene(cls, schedule_id: str, scene: Scene) -> Scene:
        stored = cls.load_scenes(schedule_id)
        scene = scene.model_copy(deep=True)
        scene.schedule_id = schedule_id
        stored.scenes.append(scene)
        stored.sort()
        cls.replace_scenes(schedule_id, stored)
        return scene

    @classmethod
    def delete_scene(cls, schedule_id: str, scene_id: str) -> bool:
        stored = cls.load_scenes(schedule_id)
        remaining = [s for s in stored.scenes if s.id != scene_id]
        if len(remaining) == len(stored.scenes):
            return False
        cls.replace_scenes(schedule_id, SceneList(scenes=remaining))
        return True

    @classmethod
    def set_order(cls, schedule_id: str, scene_ids: list[str]) -> None:
        """Bulk-assign ``order`` by position in ``scene_ids``.

        Scenes missing from ``scene_ids`` keep their relative order after the
        listed ones.
        """
        stored = cls.load_scenes(schedule_id)
        position = {scene_id: index for index, scene_id in enumerate(scene_ids)}
        tail = len(position)
        stored.scenes.sort(key=lambda s: (position.get(s.id, tail), s.order))
        stored.renumber()
        cls.replace_scenes(schedule_id, stored)

    # Timeline

    @classmethod
    def load_timeline(cls, schedule_id: str) -> Timeline:
        timeline_file = cls.get_timeline_file(schedule_id)
        if not timeline_file.exists():
            return Timeline()
        try:
            timeline = Timeline.model_validate_json(timeline_file.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to parse timeline file %s", timeline_file)
            return Timeline()
        timeline.items.sort(key=lambda t: t.order)
        return timeline

    @classmethod
    def save_timeline(cls, schedule_id: str, timeline: Timeline) -> None:
        timeline_file = cls.get_timeline_file(schedule_id)
        timeline_file.parent.mkdir(parents=True, exist_ok=True)
        timeline_file.write_text(timeline.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def add_timeline_item(cls, schedule_id: str, item: TimelineItem) -> TimelineItem:
        timeline = cls.load_timeline(schedule_id)
        item = item.model_copy()
        item.schedule_id = schedule_id
        timeline.items.append(item)
        timeline.items.sort(key=lambda t: t.order)
        cls.save_timeline(schedule_id, timeline)
        return item
