"""Record Format — column layout and field codecs for the flat record files.

Invariants:
    - Every record kind has a fixed, ordered column tuple (the CSV header)
    - Empty string <=> None for optional fields
    - ID lists are ';'-joined; flat maps are 'TYPE=N' pairs ';'-joined
    - Dates are DD-MM-YYYY; booleans are 'true'/'false'
    - parse_* raises RecordFormatError naming the column; format_* never raises
    - format_x(parse_x(s)) == s for every canonical value (lossless round-trip)

Design Decisions:
    - Codecs kept out of hydrate/serialize so both directions share one definition
"""

from datetime import date, datetime
from enum import Enum
from typing import TypeVar

from bto.core.domain_types import FlatType, RecordKind
from bto.core.errors import RecordFormatError

E = TypeVar("E", bound=Enum)

DATE_FORMAT = "%d-%m-%Y"
LIST_SEPARATOR = ";"
PAIR_SEPARATOR = "="

_USER_COLUMNS = ("id", "name", "nric", "age", "marital_status", "password")
_APPLICANT_STATE_COLUMNS = (
    "can_apply", "is_withdrawing", "is_receipt_ready",
    "applied_project", "project_application", "withdrawal_application",
)
_OFFICER_STATE_COLUMNS = ("joined_projects", "registered_projects", "project_registrations")

COLUMNS: dict[RecordKind, tuple[str, ...]] = {
    RecordKind.APPLICANT: _USER_COLUMNS + _APPLICANT_STATE_COLUMNS,
    RecordKind.OFFICER: _USER_COLUMNS + _APPLICANT_STATE_COLUMNS + _OFFICER_STATE_COLUMNS,
    RecordKind.MANAGER: _USER_COLUMNS,
    RecordKind.PROJECT: (
        "id", "name", "neighborhood", "flat_units", "flat_prices",
        "open_date", "close_date", "manager", "officers", "officer_slots", "visible",
    ),
    RecordKind.APPLICATION: (
        "id", "kind", "user", "project", "status", "sequence", "flat_type", "target",
    ),
    RecordKind.ENQUIRY: ("id", "user", "project", "message", "reply", "replied_by"),
}


# --- Parsing ------------------------------------------------------------------

def field_value(record: dict, column: str) -> str:
    """Raw stripped value; missing column reads as empty."""
    return (record.get(column) or "").strip()


def parse_required(record: dict, column: str) -> str:
    value = field_value(record, column)
    if not value:
        raise RecordFormatError(f"Column '{column}' is empty", column)
    return value


def parse_optional(record: dict, column: str) -> str | None:
    return field_value(record, column) or None


def parse_int(record: dict, column: str) -> int:
    raw = parse_required(record, column)
    try:
        return int(raw)
    except ValueError:
        raise RecordFormatError(f"Column '{column}' is not an integer: {raw!r}", column)


def parse_bool(record: dict, column: str, default: bool = False) -> bool:
    raw = field_value(record, column).lower()
    if not raw:
        return default
    if raw in ("true", "false"):
        return raw == "true"
    raise RecordFormatError(f"Column '{column}' is not a boolean: {raw!r}", column)


def parse_date(record: dict, column: str) -> date:
    raw = parse_required(record, column)
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise RecordFormatError(f"Column '{column}' is not a DD-MM-YYYY date: {raw!r}", column)


def parse_enum(record: dict, column: str, enum_cls: type[E]) -> E:
    raw = parse_required(record, column)
    try:
        return enum_cls(raw)
    except ValueError:
        raise RecordFormatError(
            f"Column '{column}' has unknown {enum_cls.__name__}: {raw!r}", column,
        )


def parse_id_list(record: dict, column: str) -> list[str]:
    """';'-joined ids, blanks skipped, duplicates collapsed (order kept)."""
    raw = field_value(record, column)
    ids = [part.strip() for part in raw.split(LIST_SEPARATOR) if part.strip()]
    return list(dict.fromkeys(ids))


def parse_flat_map(record: dict, column: str) -> dict[FlatType, int]:
    raw = field_value(record, column)
    result: dict[FlatType, int] = {}
    for pair in filter(None, (p.strip() for p in raw.split(LIST_SEPARATOR))):
        key, sep, value = pair.partition(PAIR_SEPARATOR)
        try:
            if not sep:
                raise ValueError(pair)
            result[FlatType(key.strip())] = int(value)
        except ValueError:
            raise RecordFormatError(f"Column '{column}' has a bad entry: {pair!r}", column)
    return result


# --- Formatting ---------------------------------------------------------------

def format_optional(value: str | None) -> str:
    return value or ""


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_id_list(ids: list[str]) -> str:
    return LIST_SEPARATOR.join(ids)


def format_flat_map(mapping: dict[FlatType, int]) -> str:
    return LIST_SEPARATOR.join(
        f"{flat_type.value}{PAIR_SEPARATOR}{count}" for flat_type, count in mapping.items()
    )
