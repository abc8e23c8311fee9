from datetime import datetime
from enum import Enum
import uuid

from pydantic import BaseModel, Field


class TimelineType(str, Enum):
    """Kind of entry on the day's overall timeline."""

    GATHER = "GATHER"
    MEAL = "MEAL"
    SHOOTING = "SHOOTING"
    BREAK = "BREAK"
    WRAP = "WRAP"
    OTHER = "OTHER"


class Schedule(BaseModel):
    """One shooting day (daily call sheet)."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    project_id: str

    shooting_date: str | None = None  # YYYY-MM-DD
    episode: int = 1  # shooting day number

    gather_time: str = "07:00"  # HH:MM
    shooting_end_time: str = ""  # HH:MM, last computed cascade end

    shooting_location: str = ""
    shooting_location_name: str = ""
    gather_location: str = ""  # empty means same as shooting location
    gather_location_name: str = ""

    # Weather
    weather_condition: str | None = None
    min_temp: float | None = None
    max_temp: float | None = None
    rain_probability: int | None = None  # percent
    sunrise: str | None = None
    sunset: str | None = None

    notes: str | None = None

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class TimelineItem(BaseModel):
    """An entry on the day's overall timeline (gather, meals, wrap...)."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    schedule_id: str = ""

    order: int = 0
    time: str  # HH:MM
    end_time: str | None = None
    title: str
    description: str | None = None
    type: TimelineType = TimelineType.OTHER


class Timeline(BaseModel):
    """Ordered timeline entries of one schedule."""

    items: list[TimelineItem] = Field(default_factory=list)
