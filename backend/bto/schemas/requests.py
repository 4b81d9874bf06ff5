"""Request Schemas — Pydantic models with field-level validation for API input.

Invariants:
    - Free text (names, enquiry messages, replies) stripped and non-empty
    - Dates accepted as DD-MM-YYYY (record file format) or ISO
    - Flat maps keyed by FlatType; unit counts and prices non-negative
    - Cross-entity rules (window clash, slot counts) are not checked here

Design Decisions:
    - field_validator for side-effect-free transforms (strip, date parsing)
    - ProjectEdit fields all optional: None means "leave unchanged"
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from bto.core.domain_types import (
    ApplicationStatus, FlatType, MaritalStatus, MAX_OFFICER_SLOTS,
)
from bto.core.record_format import DATE_FORMAT


def _strip_non_empty(v: str, name: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{name} cannot be empty or whitespace")
    return v


def _parse_date(v: object) -> object:
    if isinstance(v, str):
        try:
            return datetime.strptime(v, DATE_FORMAT).date()
        except ValueError:
            return v  # fall through to pydantic ISO parsing
    return v


def _check_flat_map(v: dict[FlatType, int] | None) -> dict[FlatType, int] | None:
    if v is not None and any(n < 0 for n in v.values()):
        raise ValueError("flat counts and prices must be non-negative")
    return v


# --- Auth ---------------------------------------------------------------------

class LoginRequest(BaseModel):
    nric: str = Field(min_length=9, max_length=9)
    password: str = Field(min_length=1)


class PasswordChange(BaseModel):
    old_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1, max_length=128)

    @field_validator("new_password")
    @classmethod
    def strip_password(cls, v: str) -> str:
        return _strip_non_empty(v, "new_password")


# --- Applications -------------------------------------------------------------

class ApplyRequest(BaseModel):
    """BTO application. flat_type None = smallest eligible type."""
    project_id: str = Field(min_length=1)
    flat_type: FlatType | None = None


class RegisterRequest(BaseModel):
    project_id: str = Field(min_length=1)


class StatusUpdate(BaseModel):
    status: ApplicationStatus


# --- Projects -----------------------------------------------------------------

class ProjectCreate(BaseModel):
    """Project creation: validates text, maps and window order."""
    name: str = Field(min_length=1, max_length=200)
    neighborhood: str = Field(min_length=1, max_length=200)
    flat_units: dict[FlatType, int]
    flat_prices: dict[FlatType, int] = Field(default_factory=dict)
    open_date: date
    close_date: date
    officer_slots: int | None = Field(None, ge=1, le=MAX_OFFICER_SLOTS)
    visible: bool = True

    @field_validator("name", "neighborhood")
    @classmethod
    def strip_text(cls, v: str, info) -> str:
        return _strip_non_empty(v, info.field_name)

    @field_validator("open_date", "close_date", mode="before")
    @classmethod
    def parse_dates(cls, v: object) -> object:
        return _parse_date(v)

    @field_validator("flat_units", "flat_prices")
    @classmethod
    def check_maps(cls, v: dict[FlatType, int]) -> dict[FlatType, int]:
        return _check_flat_map(v)

    @model_validator(mode="after")
    def check_window(self) -> "ProjectCreate":
        if self.close_date < self.open_date:
            raise ValueError("close_date must not be before open_date")
        return self


class ProjectEdit(BaseModel):
    """Partial project update. Window order re-checked against the stored project."""
    name: str | None = Field(None, min_length=1, max_length=200)
    neighborhood: str | None = Field(None, min_length=1, max_length=200)
    flat_units: dict[FlatType, int] | None = None
    flat_prices: dict[FlatType, int] | None = None
    open_date: date | None = None
    close_date: date | None = None
    officer_slots: int | None = Field(None, ge=1, le=MAX_OFFICER_SLOTS)

    @field_validator("name", "neighborhood")
    @classmethod
    def strip_text(cls, v: str | None, info) -> str | None:
        return None if v is None else _strip_non_empty(v, info.field_name)

    @field_validator("open_date", "close_date", mode="before")
    @classmethod
    def parse_dates(cls, v: object) -> object:
        return _parse_date(v)

    @field_validator("flat_units", "flat_prices")
    @classmethod
    def check_maps(cls, v: dict[FlatType, int] | None) -> dict[FlatType, int] | None:
        return _check_flat_map(v)


class VisibilityUpdate(BaseModel):
    visible: bool


# --- Enquiries ----------------------------------------------------------------

class EnquiryCreate(BaseModel):
    project_id: str = Field(min_length=1)
    message: str = Field(min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return _strip_non_empty(v, "message")


class EnquiryEdit(BaseModel):
    message: str = Field(min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return _strip_non_empty(v, "message")


class EnquiryReply(BaseModel):
    reply: str = Field(min_length=1, max_length=2000)

    @field_validator("reply")
    @classmethod
    def strip_reply(cls, v: str) -> str:
        return _strip_non_empty(v, "reply")


# --- Reports ------------------------------------------------------------------

class BookingReportQuery(BaseModel):
    project_id: str | None = None
    flat_type: FlatType | None = None
    marital_status: MaritalStatus | None = None
    min_age: int | None = Field(None, ge=0)
    max_age: int | None = Field(None, ge=0)
