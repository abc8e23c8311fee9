from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CALLSHEET_",
        env_file=(PROJECT_ROOT / ".env", BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    # Paths
    data_dir: Path = BACKEND_ROOT / "data"
    projects_dir: Path = BACKEND_ROOT / "data" / "projects"
    schedules_dir: Path = BACKEND_ROOT / "data" / "schedules"
    staff_dir: Path = BACKEND_ROOT / "data" / "staff"
    casts_dir: Path = BACKEND_ROOT / "data" / "casts"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Scheduling defaults
    default_gather_time: str = "07:00"
    default_scene_duration: int = 30  # minutes
    default_cut_duration: int = 10  # minutes

    log_level: str = "INFO"


settings = Settings()

# Ensure directories exist
settings.projects_dir.mkdir(parents=True, exist_ok=True)
settings.schedules_dir.mkdir(parents=True, exist_ok=True)
settings.staff_dir.mkdir(parents=True, exist_ok=True)
settings.casts_dir.mkdir(parents=True, exist_ok=True)
