from .project_service import ProjectService
from .schedule_service import ScheduleService
from .crew_service import CastService, StaffService
from .cascade_service import CascadeService, CascadeResult
from .ordering_service import OrderingService
from .editor_session import ScheduleEditorSession

__all__ = [
    "ProjectService", "ScheduleService",
    "CastService", "StaffService",
    "CascadeService", "CascadeResult",
    "OrderingService",
    "ScheduleEditorSession",
]
