from .project import Project, ProjectStatus
from .crew import Cast, DEPARTMENT_LABELS, DepartmentType, Staff
from .scene import Cut, LocationType, Scene, SceneList, SceneStatus, TimeOfDay
from .schedule import Schedule, Timeline, TimelineItem, TimelineType

__all__ = [
    "Project", "ProjectStatus",
    "Cast", "DEPARTMENT_LABELS", "DepartmentType", "Staff",
    "Cut", "Scene", "SceneList", "SceneStatus", "TimeOfDay", "LocationType",
    "Schedule", "Timeline", "TimelineItem", "TimelineType",
]
