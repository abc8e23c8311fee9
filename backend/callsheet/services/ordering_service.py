from __future__ import annotations

import re

from ..models import Cut, LocationType, Scene, TimeOfDay
from ..utils.timing import calculate_time_from_duration, normalize_time


DEFAULT_SCENE_DURATION = 30
DEFAULT_CUT_DURATION = 10

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def _clamp_index(index: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(int(index), length - 1))


def _next_scene_number(last_scene_number: str, count: int) -> str:
    match = _LEADING_INT_RE.match(last_scene_number or "")
    if match:
        return str(int(match.group(1)) + 1)
    return str(count + 1)


class OrderingService:
    """List operations that keep scene ``order`` contiguous and seed new rows.

    Everything here works on in-memory lists and returns copies; storage is
    the caller's concern.
    """

    @staticmethod
    def renumber(scenes: list[Scene]) -> list[Scene]:
        """Assign ``order = index`` to copies of ``scenes`` in list order."""
        result = []
        for index, scene in enumerate(scenes):
            copy = scene.model_copy(deep=True)
            copy.order = index
            result.append(copy)
        return result

    @classmethod
    def reorder(cls, scenes: list[Scene], from_index: int, to_index: int) -> list[Scene]:
        """Move the scene at ``from_index`` to ``to_index`` and renumber everything.

        Indexes outside the list are clamped. The full renumbering also heals
        gaps or duplicates that were already present in the input.
        """
        items = list(scenes)
        if not items:
            return []
        source = _clamp_index(from_index, len(items))
        target = _clamp_index(to_index, len(items))
        moved = items.pop(source)
        items.insert(target, moved)
        return cls.renumber(items)

    @staticmethod
    def move_cut(cuts: list[Cut], from_index: int, to_index: int) -> list[Cut]:
        """Splice a cut to a new position. List position is the cut order."""
        items = [c.model_copy() for c in cuts]
        if not items:
            return []
        source = _clamp_index(from_index, len(items))
        target = _clamp_index(to_index, len(items))
        items.insert(target, items.pop(source))
        return items

    @staticmethod
    def quick_add_scene(
        existing_scenes: list[Scene],
        gather_time: str,
        *,
        schedule_id: str = "",
        default_duration: int = DEFAULT_SCENE_DURATION,
    ) -> Scene:
        """Build the next scene with defaults inherited from the last one."""
        ordered = sorted(existing_scenes, key=lambda s: s.order)
        last = ordered[-1] if ordered else None

        start_time = (normalize_time(last.end_time) if last else "") or normalize_time(gather_time)
        end_time = calculate_time_from_duration(start_time, default_duration) if start_time else ""

        return Scene(
            schedule_id=schedule_id,
            order=len(ordered),
            scene_number=_next_scene_number(last.scene_number, len(ordered)) if last else "1",
            time_of_day=last.time_of_day if last else TimeOfDay.DAY,
            location_type=last.location_type if last else LocationType.INTERIOR,
            start_time=start_time,
            end_time=end_time,
            estimated_duration=default_duration,
            cuts=[Cut(cut_number="1", estimated_duration=0)],
        )

    @staticmethod
    def quick_add_cut(existing_cuts: list[Cut], *, default_duration: int = DEFAULT_CUT_DURATION) -> Cut:
        return Cut(
            cut_number=str(len(existing_cuts) + 1),
            estimated_duration=default_duration,
            description="",
            remarks="",
        )

    @staticmethod
    def remove_scene(scenes: list[Scene], scene_id: str) -> list[Scene]:
        """Drop a scene by id; remaining ``order`` values are left as they are."""
        return [s.model_copy(deep=True) for s in scenes if s.id != scene_id]

    @staticmethod
    def remove_cut(cuts: list[Cut], cut_id: str) -> list[Cut]:
        return [c.model_copy() for c in cuts if c.id != cut_id]
