from datetime import datetime
from enum import Enum
import uuid

from pydantic import BaseModel, Field


class TimeOfDay(str, Enum):
    """Story time of day for a scene (M/D/E/N)."""

    MORNING = "M"
    DAY = "D"
    EVENING = "E"
    NIGHT = "N"


class LocationType(str, Enum):
    """Interior or exterior setup."""

    INTERIOR = "I"
    EXTERIOR = "E"


class SceneStatus(str, Enum):
    """Shooting status of a scene on the day."""

    PENDING = "PENDING"
    SHOOTING = "SHOOTING"
    OK = "OK"
    NG = "NG"
    SKIP = "SKIP"


class Cut(BaseModel):
    """A camera setup inside a scene. Owned by exactly one scene."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    cut_number: str = "1"  # free-form label, not guaranteed numeric or unique
    description: str = ""
    estimated_duration: int = 0  # minutes
    remarks: str = ""


class Scene(BaseModel):
    """A scene in a day's shooting schedule."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    schedule_id: str = ""

    order: int = 0  # zero-based position within the schedule
    scene_number: str = "1"

    time_of_day: TimeOfDay = TimeOfDay.DAY
    location_type: LocationType = LocationType.INTERIOR

    # Derived by the cascade, never authoritative
    start_time: str = ""
    end_time: str = ""
    estimated_duration: int = 30  # minutes

    location: str = ""
    description: str = ""
    main_characters: list[str] = Field(default_factory=list)
    remarks: str = ""

    cuts: list[Cut] = Field(default_factory=list)

    status: SceneStatus = SceneStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_cut_duration(self) -> int:
        return sum(cut.estimated_duration for cut in self.cuts)


class SceneList(BaseModel):
    """Ordered scenes of one schedule."""

    scenes: list[Scene] = Field(default_factory=list)

    def renumber(self) -> None:
        """Renumber scenes sequentially after modifications."""
        for i, scene in enumerate(self.scenes):
            scene.order = i

    def sort(self) -> None:
        self.scenes.sort(key=lambda s: s.order)

    def validate_continuity(self, gather_time: str | None = None) -> bool:
        """Check that each scene starts where the previous one ended.

        With ``gather_time`` the first scene must also start at it.
        """
        if not self.scenes:
            return True

        if gather_time is not None and self.scenes[0].start_time != gather_time:
            return False
        for i in range(1, len(self.scenes)):
            if self.scenes[i].start_time != self.scenes[i - 1].end_time:
                return False
        return True
