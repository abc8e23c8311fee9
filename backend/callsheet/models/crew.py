from datetime import datetime
from enum import Enum
import uuid

from pydantic import BaseModel, Field


class DepartmentType(str, Enum):
    """Crew departments, in call-sheet order."""

    DIRECTING = "DIRECTING"
    CAMERA = "CAMERA"
    LIGHTING = "LIGHTING"
    SOUND = "SOUND"
    ART = "ART"
    PRODUCTION = "PRODUCTION"
    MAKEUP = "MAKEUP"
    COSTUME = "COSTUME"
    OTHER = "OTHER"


DEPARTMENT_LABELS: dict[DepartmentType, str] = {
    DepartmentType.DIRECTING: "연출부",
    DepartmentType.CAMERA: "촬영부",
    DepartmentType.LIGHTING: "조명부",
    DepartmentType.SOUND: "음향부",
    DepartmentType.ART: "미술부",
    DepartmentType.PRODUCTION: "제작부",
    DepartmentType.MAKEUP: "분장부",
    DepartmentType.COSTUME: "의상부",
    DepartmentType.OTHER: "기타",
}


class Staff(BaseModel):
    """A crew member attached to a project."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    project_id: str = ""
    name: str
    department: DepartmentType = DepartmentType.OTHER
    position: str = ""
    phone: str = ""
    email: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Cast(BaseModel):
    """An actor and the role they play."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    project_id: str = ""
    role: str
    actor_name: str = ""
    phone: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
