from functools import lru_cache
import json
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _split_list(value: str) -> list[str]:
    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="TIMEGRID_",
    )

    project_name: str = "Timegrid API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    catalog_base_url: str = "http://localhost:5173"
    catalog_resources: dict[str, str] = {
        "majors": "/schedules-majors.json",
        "liberal-arts": "/schedules-liberal-arts.json",
    }
    catalog_timeout_seconds: float = 10.0
    search_page_size: int = 100

    cell_width: int = 80
    cell_height: int = 30
    header_column_width: int = 120
    header_row_height: int = 40

    seed_table_ids: Annotated[list[str], NoDecode] = ["schedule-1"]

    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:4173",
        "http://127.0.0.1:4173",
    ]

    @field_validator("cors_origins", "seed_table_ids", mode="before")
    @classmethod
    def split_list_values(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return _split_list(value)
        return value

    @field_validator("seed_table_ids")
    @classmethod
    def require_seed_table(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("At least one seed table id is required")
        if len(set(value)) != len(value):
            raise ValueError("Seed table ids must be unique")
        return value

    @field_validator("search_page_size", "cell_width", "cell_height")
    @classmethod
    def require_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be positive")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
