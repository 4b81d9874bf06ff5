"""Request Schemas — tests for API input validation.

Tests cover:
    - Dates accepted as DD-MM-YYYY and ISO
    - Reversed windows and negative unit counts rejected
    - Free text stripped, whitespace-only rejected
    - ProjectEdit leaves unset fields as None
"""

from datetime import date

import pytest
from pydantic import ValidationError

from bto.core.domain_types import FlatType
from bto.schemas.requests import EnquiryCreate, ProjectCreate, ProjectEdit


def _project(**overrides) -> dict:
    body = {
        "name": "Maple Grove", "neighborhood": "Clementi",
        "flat_units": {"2-Room": 4}, "open_date": "01-06-2025", "close_date": "2025-06-30",
    }
    body.update(overrides)
    return body


def test_project_dates_in_both_formats():
    project = ProjectCreate(**_project())
    assert project.open_date == date(2025, 6, 1)
    assert project.close_date == date(2025, 6, 30)
    assert project.flat_units == {FlatType.TWO_ROOM: 4}
    assert project.officer_slots is None


def test_reversed_window_rejected():
    with pytest.raises(ValidationError):
        ProjectCreate(**_project(open_date="01-07-2025"))


def test_negative_units_rejected():
    with pytest.raises(ValidationError):
        ProjectCreate(**_project(flat_units={"2-Room": -1}))


def test_unknown_flat_type_rejected():
    with pytest.raises(ValidationError):
        ProjectCreate(**_project(flat_units={"5-Room": 1}))


def test_enquiry_message_stripped():
    assert EnquiryCreate(project_id="P1", message="  hello ").message == "hello"
    with pytest.raises(ValidationError):
        EnquiryCreate(project_id="P1", message="   ")


def test_project_edit_partial():
    edit = ProjectEdit(close_date="15-02-2025")
    assert edit.model_dump(exclude_none=True) == {"close_date": date(2025, 2, 15)}
