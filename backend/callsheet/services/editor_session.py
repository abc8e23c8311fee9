from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from ..config import settings
from ..models import Cut, Scene, Schedule
from ..utils.duration import parse_duration
from ..utils.timing import normalize_time
from .cascade_service import CascadeService
from .ordering_service import OrderingService
from .schedule_service import ScheduleService

logger = logging.getLogger("uvicorn.error")

SceneObserver = Callable[[list[Scene]], None]

# Fields the cascade or the ordering pass own; plain edits may not set them.
_DERIVED_SCENE_FIELDS = {"id", "schedule_id", "order", "start_time", "end_time", "cuts", "created_at", "updated_at"}


class SchedulePersistence(Protocol):
    def save(self, schedule: Schedule) -> None: ...

    def save_scenes(self, schedule_id: str, scenes: list[Scene]) -> int: ...

    def create_scene(self, schedule_id: str, scene: Scene) -> Scene: ...

    def delete_scene(self, schedule_id: str, scene_id: str) -> bool: ...

    def set_order(self, schedule_id: str, scene_ids: list[str]) -> None: ...


def _content(scene: Scene) -> dict[str, Any]:
    return scene.model_dump(exclude={"updated_at"})


class ScheduleEditorSession:
    """Editing context for one open schedule.

    Holds the schedule and its ordered scenes, applies user actions through
    the ordering and cascade services, writes back only what changed (one
    batched ``save_scenes`` call per action) and notifies subscribers after
    every effective change.
    """

    def __init__(
        self,
        schedule: Schedule,
        scenes: list[Scene],
        persistence: SchedulePersistence,
        *,
        scene_duration: int | None = None,
        cut_duration: int | None = None,
    ):
        self.schedule = schedule
        self._scenes = sorted((s.model_copy(deep=True) for s in scenes), key=lambda s: s.order)
        self._persistence = persistence
        self._observers: list[SceneObserver] = []
        self.scene_duration = scene_duration or settings.default_scene_duration
        self.cut_duration = cut_duration or settings.default_cut_duration

    @classmethod
    def open(cls, schedule_id: str, persistence=ScheduleService) -> ScheduleEditorSession | None:
        """Load a schedule and its scenes from storage."""
        schedule = persistence.load(schedule_id)
        if schedule is None:
            return None
        return cls(schedule, persistence.load_scenes(schedule_id).scenes, persistence)

    @property
    def scenes(self) -> list[Scene]:
        return [s.model_copy(deep=True) for s in self._scenes]

    def find_scene(self, scene_id: str) -> Scene | None:
        for scene in self._scenes:
            if scene.id == scene_id:
                return scene.model_copy(deep=True)
        return None

    def subscribe(self, observer: SceneObserver) -> Callable[[], None]:
        """Register ``observer``; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    # Core cycle

    def _commit(self, candidate: list[Scene], persisted: list[Scene] | None = None) -> bool:
        """Cascade ``candidate``, persist the scenes that differ, notify observers.

        ``persisted`` lists scene states the caller already wrote (a new row,
        a bulk order update) so they are not written a second time.
        """
        gather_time = self.schedule.gather_time
        result = CascadeService.recalculate(gather_time, candidate)

        current = {s.id: _content(s) for s in self._scenes}
        baseline = dict(current)
        baseline.update({s.id: _content(s) for s in persisted or []})
        dirty = [s for s in result.scenes if baseline.get(s.id) != _content(s)]

        reshaped = [s.id for s in result.scenes] != [s.id for s in self._scenes] or any(
            current.get(s.id) != baseline[s.id] for s in persisted or []
        )
        if not dirty and not reshaped:
            # Scene times are current but the stored end time may still be stale
            return self._sync_end_time()

        self._scenes = result.scenes
        if dirty:
            self._persistence.save_scenes(self.schedule.id, dirty)
        self._sync_end_time()
        self._notify()
        return True

    def _sync_end_time(self) -> bool:
        end_time = CascadeService.shooting_end_time(self.schedule.gather_time, self._scenes)
        if end_time == self.schedule.shooting_end_time:
            return False
        self.schedule.shooting_end_time = end_time
        self._persistence.save(self.schedule)
        return True

    def _notify(self) -> None:
        snapshot = self.scenes
        for observer in list(self._observers):
            observer(snapshot)

    def recalculate(self) -> bool:
        """Re-run the cascade on the current state. No write when nothing moved."""
        return self._commit(self.scenes)

    # Schedule-level edits

    def set_gather_time(self, raw: str) -> bool:
        """Change the gather time from keystroke input; blank input is ignored."""
        gather_time = normalize_time(raw)
        if not gather_time or gather_time == self.schedule.gather_time:
            return False
        self.schedule.gather_time = gather_time
        self._persistence.save(self.schedule)
        logger.info("Schedule %s gather time set to %s", self.schedule.id, gather_time)
        self._commit(self.scenes)
        return True

    # Scene edits

    def update_scene_duration(self, scene_id: str, duration: str | int) -> bool:
        """Set a scene's estimated duration.

        Text goes through ``parse_duration``; an unparsed result (0) leaves the
        previous value in place. Integers are taken as given.
        """
        minutes = parse_duration(duration) if isinstance(duration, str) else int(duration)
        if isinstance(duration, str) and minutes == 0:
            logger.info("Ignoring unparsed duration %r for scene %s", duration, scene_id)
            return False
        return self.update_scene(scene_id, estimated_duration=minutes)

    def update_scene(self, scene_id: str, **fields: Any) -> bool:
        """Apply plain field edits to one scene, then cascade."""
        fields = {k: v for k, v in fields.items() if k not in _DERIVED_SCENE_FIELDS}
        candidate = self.scenes
        for index, scene in enumerate(candidate):
            if scene.id == scene_id:
                candidate[index] = scene.model_copy(update=fields)
                break
        else:
            return False
        return self._commit(candidate)

    def add_scene(self) -> Scene:
        """Append a scene seeded from the last one."""
        scene = OrderingService.quick_add_scene(
            self._scenes,
            self.schedule.gather_time,
            schedule_id=self.schedule.id,
            default_duration=self.scene_duration,
        )
        return self.insert_scene(scene)

    def insert_scene(self, scene: Scene) -> Scene:
        """Append a fully specified scene at the end of the sequence."""
        scene = scene.model_copy(update={"schedule_id": self.schedule.id, "order": len(self._scenes)})
        created = self._persistence.create_scene(self.schedule.id, scene)
        self._commit([*self.scenes, created], persisted=[created])
        return self.find_scene(created.id) or created

    def delete_scene(self, scene_id: str, *, renumber: bool = True) -> bool:
        """Remove a scene. With ``renumber`` the remaining order is closed up."""
        if self.find_scene(scene_id) is None:
            return False
        self._persistence.delete_scene(self.schedule.id, scene_id)
        candidate = OrderingService.remove_scene(self._scenes, scene_id)
        if renumber:
            candidate = OrderingService.renumber(candidate)
            self._persistence.set_order(self.schedule.id, [s.id for s in candidate])
        self._commit(candidate, persisted=candidate)
        return True

    def move_scene(self, from_index: int, to_index: int) -> bool:
        """Drag-and-drop move; order is renumbered and times re-cascaded."""
        if not self._scenes:
            return False
        candidate = OrderingService.reorder(self._scenes, from_index, to_index)
        if [s.id for s in candidate] == [s.id for s in self._scenes] and all(
            s.order == i for i, s in enumerate(self._scenes)
        ):
            return False
        self._persistence.set_order(self.schedule.id, [s.id for s in candidate])
        return self._commit(candidate, persisted=candidate)

    # Cut edits

    def _replace_cuts(self, scene_id: str, transform: Callable[[list[Cut]], list[Cut]]) -> bool:
        candidate = self.scenes
        for scene in candidate:
            if scene.id == scene_id:
                scene.cuts = transform(scene.cuts)
                break
        else:
            return False
        return self._commit(candidate)

    def add_cut(self, scene_id: str) -> Cut | None:
        scene = self.find_scene(scene_id)
        if scene is None:
            return None
        cut = OrderingService.quick_add_cut(scene.cuts, default_duration=self.cut_duration)
        self._replace_cuts(scene_id, lambda cuts: [*cuts, cut])
        return cut

    def update_cut(self, scene_id: str, cut_id: str, **fields: Any) -> bool:
        fields.pop("id", None)
        if "estimated_duration" in fields:
            duration = fields["estimated_duration"]
            minutes = parse_duration(duration) if isinstance(duration, str) else max(int(duration), 0)
            if isinstance(duration, str) and minutes == 0:
                fields.pop("estimated_duration")
            else:
                fields["estimated_duration"] = minutes
        return self._replace_cuts(
            scene_id,
            lambda cuts: [c.model_copy(update=fields) if c.id == cut_id else c for c in cuts],
        )

    def delete_cut(self, scene_id: str, cut_id: str) -> bool:
        return self._replace_cuts(scene_id, lambda cuts: OrderingService.remove_cut(cuts, cut_id))

    def move_cut(self, scene_id: str, from_index: int, to_index: int) -> bool:
        return self._replace_cuts(
            scene_id, lambda cuts: OrderingService.move_cut(cuts, from_index, to_index)
        )
