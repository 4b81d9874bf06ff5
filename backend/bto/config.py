"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - Every record file name is configurable; defaults match infrastructure/record_files

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - BTO_ prefix: settings live beside other services' env vars without clashes
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bto.core.domain_types import MAX_OFFICER_SLOTS, RecordKind


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BTO_", case_sensitive=False)

    # Record files
    data_dir: Path = Path("data")
    applicants_file: str = "applicants.csv"
    officers_file: str = "officers.csv"
    managers_file: str = "managers.csv"
    projects_file: str = "projects.csv"
    applications_file: str = "applications.csv"
    enquiries_file: str = "enquiries.csv"

    # Write all record files back after every successful mutation
    autosave: bool = True

    # Officer slots for a new project when the request omits them
    default_officer_slots: int = Field(MAX_OFFICER_SLOTS, ge=1, le=MAX_OFFICER_SLOTS)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def file_names(self) -> dict[RecordKind, str]:
        return {
            RecordKind.APPLICANT: self.applicants_file,
            RecordKind.OFFICER: self.officers_file,
            RecordKind.MANAGER: self.managers_file,
            RecordKind.PROJECT: self.projects_file,
            RecordKind.APPLICATION: self.applications_file,
            RecordKind.ENQUIRY: self.enquiries_file,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
