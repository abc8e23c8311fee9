"""Shared pytest fixtures"""

import pytest

from callsheet.config import settings
from callsheet.models import Schedule


# ============================================================
# Storage
# ============================================================

@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point all file storage at a fresh temporary directory"""
    projects_dir = tmp_path / "projects"
    schedules_dir = tmp_path / "schedules"
    staff_dir = tmp_path / "staff"
    casts_dir = tmp_path / "casts"
    projects_dir.mkdir()
    schedules_dir.mkdir()
    staff_dir.mkdir()
    casts_dir.mkdir()
    monkeypatch.setattr(settings, "data_dir", tmp_path)
    monkeypatch.setattr(settings, "projects_dir", projects_dir)
    monkeypatch.setattr(settings, "schedules_dir", schedules_dir)
    monkeypatch.setattr(settings, "staff_dir", staff_dir)
    monkeypatch.setattr(settings, "casts_dir", casts_dir)
    return tmp_path


# ============================================================
# Test Data Fixtures
# ============================================================

@pytest.fixture
def schedule():
    """Schedule gathering at 07:00"""
    return Schedule(id="sched1", project_id="proj1", gather_time="07:00")
