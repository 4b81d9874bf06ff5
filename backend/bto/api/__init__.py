"""HTTP API — FastAPI routers, dependencies and global error handlers."""
