import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ValidationError

from ..config import settings
from ..models import Cast, DepartmentType, Staff
from .project_service import validate_record_id

logger = logging.getLogger("uvicorn.error")

_DEPARTMENT_RANK = {department: rank for rank, department in enumerate(DepartmentType)}


class _ProjectRecordService:
    """One JSON file per record, each carrying its ``project_id``."""

    model: type[BaseModel]
    kind: str

    @classmethod
    def get_dir(cls) -> Path:
        raise NotImplementedError

    @classmethod
    def get_file(cls, record_id: str) -> Path:
        validate_record_id(record_id, cls.kind)
        return cls.get_dir() / f"{record_id}.json"

    @classmethod
    def create(cls, project_id: str, **fields):
        validate_record_id(project_id, "project")
        record = cls.model(project_id=project_id, **fields)
        cls.save(record)
        logger.info("Created %s %s for project %s", cls.kind, record.id, project_id)
        return record

    @classmethod
    def save(cls, record) -> None:
        record.updated_at = datetime.now()
        record_file = cls.get_file(record.id)
        record_file.parent.mkdir(parents=True, exist_ok=True)
        record_file.write_text(record.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, record_id: str):
        record_file = cls.get_file(record_id)
        if not record_file.exists():
            return None
        try:
            return cls.model.model_validate_json(record_file.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to parse %s file %s", cls.kind, record_file)
            return None

    @classmethod
    def delete(cls, record_id: str) -> bool:
        record_file = cls.get_file(record_id)
        if not record_file.exists():
            return False
        record_file.unlink()
        logger.info("Deleted %s %s", cls.kind, record_id)
        return True

    @classmethod
    def list_for_project(cls, project_id: str) -> list:
        records = []
        record_dir = cls.get_dir()
        if not record_dir.exists():
            return records
        for record_file in record_dir.glob("*.json"):
            try:
                record = cls.load(record_file.stem)
            except ValueError:
                continue
            if record and record.project_id == project_id:
                records.append(record)
        return cls.sort(records)

    @classmethod
    def delete_for_project(cls, project_id: str) -> int:
        records = cls.list_for_project(project_id)
        for record in records:
            cls.delete(record.id)
        return len(records)

    @staticmethod
    def sort(records: list) -> list:
        return records


class StaffService(_ProjectRecordService):
    """Crew members, listed by department then position."""

    model = Staff
    kind = "staff"

    @classmethod
    def get_dir(cls) -> Path:
        return settings.staff_dir

    @staticmethod
    def sort(records: list[Staff]) -> list[Staff]:
        return sorted(records, key=lambda s: (_DEPARTMENT_RANK[s.department], s.position, s.name))


class CastService(_ProjectRecordService):
    """Cast members, listed by role."""

    model = Cast
    kind = "cast"

    @classmethod
    def get_dir(cls) -> Path:
        return settings.casts_dir

    @staticmethod
    def sort(records: list[Cast]) -> list[Cast]:
        return sorted(records, key=lambda c: c.role)
