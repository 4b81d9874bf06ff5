"""Root conftest — shared record fixtures for the housing graph.

Invariants:
    - Every test gets fresh rows and a freshly loaded graph
    - Rows are sparse dicts: an absent column reads as empty

Sample data:
    - M1 manages P1 (Jan 2025, 2-Room=2, 3-Room=3); M2 manages P2 (Mar 2025,
      2-Room=1, no 3-Room units)
    - U1 Single 35 (2-Room only), U2 Married 40 (all types), U3 Single 30 (none)
    - O1 Single 36 and O2 Married 28: officers with no projects yet
"""

import pytest

from bto.core.domain_types import RecordKind
from bto.core.load_pipeline import load_graph
from bto.core.repository_protocols import InMemoryRecordSource


def _user(user_id: str, name: str, nric: str, age: int, marital_status: str) -> dict:
    return {
        "id": user_id, "name": name, "nric": nric,
        "age": str(age), "marital_status": marital_status,
    }


@pytest.fixture
def sample_rows() -> dict[RecordKind, list[dict[str, str]]]:
    return {
        RecordKind.APPLICANT: [
            _user("U1", "John", "S1234567A", 35, "Single"),
            _user("U2", "Sarah", "T7654321B", 40, "Married"),
            _user("U3", "Grace", "S9876543C", 30, "Single"),
        ],
        RecordKind.OFFICER: [
            _user("O1", "Daniel", "T2109876H", 36, "Single"),
            _user("O2", "Emily", "S6543210I", 28, "Married"),
        ],
        RecordKind.MANAGER: [
            _user("M1", "Michael", "T8765432F", 36, "Single"),
            _user("M2", "Jessica", "S5678901G", 26, "Married"),
        ],
        RecordKind.PROJECT: [
            {
                "id": "P1", "name": "Acacia Breeze", "neighborhood": "Yishun",
                "flat_units": "2-Room=2;3-Room=3",
                "flat_prices": "2-Room=350000;3-Room=450000",
                "open_date": "01-01-2025", "close_date": "31-01-2025",
                "manager": "M1", "officer_slots": "3", "visible": "true",
            },
            {
                "id": "P2", "name": "Sunrise Heights", "neighborhood": "Tampines",
                "flat_units": "2-Room=1;3-Room=0",
                "flat_prices": "2-Room=300000;3-Room=420000",
                "open_date": "01-03-2025", "close_date": "31-03-2025",
                "manager": "M2", "visible": "true",
            },
        ],
        RecordKind.APPLICATION: [],
        RecordKind.ENQUIRY: [],
    }


@pytest.fixture
def load():
    """Load a graph from row dicts through the full two-phase pipeline."""
    def _load(rows: dict[RecordKind, list[dict[str, str]]]):
        return load_graph(InMemoryRecordSource(rows))
    return _load


@pytest.fixture
def graph(sample_rows, load):
    return load(sample_rows)
