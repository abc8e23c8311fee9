from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..models import Scene
from ..utils.timing import calculate_time_from_duration, normalize_time


logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of one cascade pass.

    ``scenes`` are fresh copies in ascending ``order``; ``changed_ids`` lists
    the scenes whose (start_time, end_time) pair moved. Callers persist only
    when ``changed`` is true.
    """

    scenes: list[Scene]
    changed_ids: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changed_ids)

    @property
    def changed_scenes(self) -> list[Scene]:
        wanted = set(self.changed_ids)
        return [s for s in self.scenes if s.id in wanted]


class CascadeService:
    """Derives each scene's time window by chaining durations from the gather time."""

    @staticmethod
    def compute_windows(gather_time: str, durations: list[int]) -> list[tuple[str, str]]:
        """Pure cascade over a snapshot of ordered durations."""
        windows: list[tuple[str, str]] = []
        cursor = gather_time
        for duration in durations:
            end = calculate_time_from_duration(cursor, duration)
            windows.append((cursor, end))
            cursor = end
        return windows

    @classmethod
    def recalculate(cls, gather_time: str, scenes: list[Scene]) -> CascadeResult:
        """Recompute start/end for every scene; input scenes are not mutated."""
        ordered = sorted(scenes, key=lambda s: s.order)
        if not ordered:
            return CascadeResult(scenes=[])

        anchor = normalize_time(gather_time)
        if not anchor:
            # Nothing to chain from; leave times as they are.
            logger.warning("Skipping cascade: unusable gather time %r", gather_time)
            return CascadeResult(scenes=[s.model_copy(deep=True) for s in ordered])

        windows = cls.compute_windows(anchor, [s.estimated_duration for s in ordered])

        result: list[Scene] = []
        changed: list[str] = []
        for scene, (start, end) in zip(ordered, windows):
            copy = scene.model_copy(deep=True)
            if (copy.start_time, copy.end_time) != (start, end):
                copy.start_time = start
                copy.end_time = end
                changed.append(copy.id)
            result.append(copy)

        if changed:
            logger.info("Cascade from %s moved %d of %d scene(s)", anchor, len(changed), len(result))
        return CascadeResult(scenes=result, changed_ids=changed)

    @staticmethod
    def total_duration(scenes: list[Scene]) -> int:
        return sum(s.estimated_duration for s in scenes)

    @classmethod
    def shooting_end_time(cls, gather_time: str, scenes: list[Scene]) -> str:
        """End of the last scene in the cascade, or "" when there are no scenes."""
        anchor = normalize_time(gather_time)
        if not scenes or not anchor:
            return ""
        return calculate_time_from_duration(anchor, cls.total_duration(scenes))
