from enum import Enum
from datetime import datetime
from pydantic import BaseModel, Field
import uuid


class ProjectStatus(str, Enum):
    """Production phase of a film/TV project."""

    PREP = "PREP"
    SHOOTING = "SHOOTING"
    POST = "POST"
    COMPLETED = "COMPLETED"


class Project(BaseModel):
    """A film or TV production."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    title: str
    director: str = ""
    producer: str = ""
    assistant_director: str = ""
    description: str | None = None
    start_date: str | None = None  # planned first shooting day
    end_date: str | None = None
    status: ProjectStatus = ProjectStatus.PREP
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
