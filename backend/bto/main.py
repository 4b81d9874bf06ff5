"""BTO Portal API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BtoError → structured JSON responses
    - The housing graph is loaded once on startup (hydrate → resolve) via lifespan
      and lives on app.state for the life of the process

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Graph state is in-memory and single-process: every route is async with no
      await inside a mutation, so mutations run one at a time on the event loop
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bto.api.error_handlers import register_error_handlers
from bto.api.routes import applications, auth, enquiries, health, projects, reports
from bto.config import get_settings
from bto.core.load_pipeline import load_graph
from bto.infrastructure.observability import setup_logging
from bto.infrastructure.record_files import CsvRecordFiles

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    record_files = CsvRecordFiles(settings.data_dir, settings.file_names)
    graph = load_graph(record_files)
    app.state.graph = graph
    app.state.record_files = record_files
    app.state.autosave = settings.autosave
    logger.info(
        f"BTO Portal API started: {len(graph.users)} users, {len(graph.projects)} projects, "
        f"{len(graph.diagnostics)} load diagnostics",
    )
    yield
    logger.info("BTO Portal API shutting down")


app = FastAPI(title="BTO Portal API", version="1.0.0", lifespan=lifespan)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(applications.router)
app.include_router(enquiries.router)
app.include_router(reports.router)

register_error_handlers(app)
