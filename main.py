# type: ignore
# pyright: reportGeneralTypeIssues=false
"""
Items API
=========
Minimal REST API over a single ``items`` table: create / read / update /
delete plus a database status check. The storage backend (pooled SQL,
hosted PostgREST or in-memory) is selected with DB_BACKEND; a background
monitor checks the database on a fixed cadence and exits the process after
too many consecutive failures.

Port: 3000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from items_api import __version__
from items_api.controllers import item_controller, system_controller
from items_api.core.config import settings
from items_api.core.dependencies import get_connection_monitor, get_item_repo
from items_api.core.logging import get_logger
from items_api.middleware import MetricsMiddleware, RequestIDMiddleware
from items_api.schemas import ErrorResponse

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Start the connection monitor; stop it and release the pool on shutdown."""
    repo = get_item_repo()
    monitor = get_connection_monitor()
    logger.info("Starting %s", settings.SERVICE_NAME,
                extra={"backend": settings.DB_BACKEND, "target": repo.describe()})
    if settings.MONITOR_ENABLED:
        monitor.start()
    yield
    await monitor.stop()
    repo.dispose()
    logger.info("Shutting down — database connections released")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Items API",
    description="CRUD for items with a database connection-health check.",
    version=__version__,
    lifespan=lifespan,
    responses={500: {"model": ErrorResponse, "description": "Internal server error"}},
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error envelope ────────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception", extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(system_controller.router)
app.include_router(item_controller.router)


def run():
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level="info")


if __name__ == "__main__":
    run()
