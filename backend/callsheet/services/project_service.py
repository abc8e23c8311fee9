import logging
import re
import shutil
from pathlib import Path
from datetime import datetime

from pydantic import ValidationError

from ..config import settings
from ..models import Project

_RECORD_ID_RE = re.compile(r"[a-zA-Z0-9_-]+$")

logger = logging.getLogger("uvicorn.error")


def validate_record_id(record_id: str, kind: str = "record") -> None:
    """Reject ids that could escape the data directory."""
    if not record_id or not _RECORD_ID_RE.fullmatch(record_id):
        raise ValueError(
            f"Invalid {kind} id: must be non-empty alphanumeric/hyphen/underscore, got {record_id!r}"
        )


class ProjectService:
    """Service for managing projects."""

    @staticmethod
    def get_project_dir(project_id: str) -> Path:
        """Get the directory for a project."""
        validate_record_id(project_id, "project")
        return settings.projects_dir / project_id

    @staticmethod
    def get_project_file(project_id: str) -> Path:
        """Get the project.json file path."""
        return ProjectService.get_project_dir(project_id) / "project.json"

    @classmethod
    def create(cls, title: str, **fields) -> Project:
        """Create a new project."""
        project = Project(title=title, **fields)
        cls.get_project_dir(project.id).mkdir(parents=True, exist_ok=True)
        cls.save(project)
        logger.info("Created project %s (%s)", project.id, project.title)
        return project

    @classmethod
    def save(cls, project: Project) -> None:
        """Save a project to disk."""
        project.updated_at = datetime.now()
        project_file = cls.get_project_file(project.id)
        project_file.parent.mkdir(parents=True, exist_ok=True)
        project_file.write_text(project.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, project_id: str) -> Project | None:
        """Load a project from disk."""
        project_file = cls.get_project_file(project_id)
        if not project_file.exists():
            return None
        try:
            return Project.model_validate_json(project_file.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to parse project file %s", project_file)
            return None

    @classmethod
    def delete(cls, project_id: str) -> bool:
        """Delete a project together with its schedules, staff and cast."""
        from .crew_service import CastService, StaffService
        from .schedule_service import ScheduleService

        project_dir = cls.get_project_dir(project_id)
        if not project_dir.exists():
            return False

        for schedule in ScheduleService.list_for_project(project_id):
            ScheduleService.delete(schedule.id)
        StaffService.delete_for_project(project_id)
        CastService.delete_for_project(project_id)
        shutil.rmtree(project_dir)
        logger.info("Deleted project %s", project_id)
        return True

    @classmethod
    def list_all(cls) -> list[Project]:
        """List all projects, newest first."""
        projects = []
        for project_dir in settings.projects_dir.iterdir():
            if project_dir.is_dir() and _RECORD_ID_RE.fullmatch(project_dir.name):
                project = cls.load(project_dir.name)
                if project:
                    projects.append(project)
        return sorted(projects, key=lambda p: p.created_at, reverse=True)
