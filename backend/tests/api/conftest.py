"""API test fixtures — FastAPI test client over a freshly loaded graph.

Invariants:
    - Every test gets its own graph on app.state; the lifespan is not run
    - Autosave writes to a per-test tmp_path, never to the real data directory
"""

import pytest
from httpx import ASGITransport, AsyncClient

from bto.infrastructure.record_files import CsvRecordFiles
from bto.main import app


@pytest.fixture
async def client(graph, tmp_path):
    app.state.graph = graph
    app.state.record_files = CsvRecordFiles(tmp_path)
    app.state.autosave = True
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
