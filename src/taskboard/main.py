from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import NotFoundError, StoreError, TaskboardError
from .repositories import get_store
from .routers import categories as categories_router
from .routers import tasks as tasks_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "CRUD operations for tasks."},
    {"name": "categories", "description": "Create, list and delete task categories."},
]


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    """
    Map domain errors to their HTTP status with a consistent JSON body.

    Response format:
        {"error": "NotFoundError", "message": "Task not found"}
    """
    message = exc.message
    if isinstance(exc, StoreError):
        # Details are in the log; clients get a generic message.
        message = "Something went wrong while accessing the data store"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.name, "message": message},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for malformed request bodies.

    Response format:
        {
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": [... pydantic/fastapi error details ...]
        }
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Wrap framework-level HTTP errors (unknown route, method not allowed) in the
    same JSON body as domain errors.

    Response format:
        {"error": "NotFoundError", "message": "Not Found"}
    """
    error = "NotFoundError" if exc.status_code == 404 else "HTTPError"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error, "message": str(exc.detail)},
        headers=exc.headers,
    )


def _mount_static_ui(app: FastAPI, static_dir: str) -> None:
    """
    Serve the built UI from `static_dir`, falling back to index.html for
    client-side routes. Paths under /api are never answered with the UI.
    """
    root = os.path.abspath(static_dir)
    index = os.path.join(root, "index.html")

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_ui(full_path: str) -> FileResponse:
        if full_path == "api" or full_path.startswith("api/"):
            raise NotFoundError("Not found")
        candidate = os.path.abspath(os.path.join(root, full_path))
        if candidate.startswith(root + os.sep) and os.path.isfile(candidate):
            return FileResponse(candidate)
        if not os.path.isfile(index):
            raise NotFoundError("Not found")
        return FileResponse(index)


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application with its own document store.

    Each call creates a fresh store, so tests can build isolated apps.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Taskboard",
        description="Personal task manager API: tasks with priorities, due dates and categories.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.store = get_store(settings)

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskboardError, taskboard_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]

    # PUBLIC_INTERFACE
    @app.get("/health", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the active store backend.
        """
        return {"message": "Healthy", "backend": app.state.store.backend}

    app.include_router(tasks_router.router)
    app.include_router(categories_router.router)

    if settings.is_production:
        if os.path.isdir(settings.static_dir):
            _mount_static_ui(app, settings.static_dir)
        else:
            logger.warning("APP_ENV=production but STATIC_DIR %s does not exist; UI not served", settings.static_dir)

    logger.info("Application created (backend=%s, env=%s)", app.state.store.backend, settings.app_env)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """
    Run the API server with uvicorn on HOST:PORT.

    The app and its store are built here; importing this module opens no
    database.
    """
    import uvicorn

    from .logging_setup import setup_logging

    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting server on %s:%s (backend=%s)", settings.host, settings.port, settings.persistence_backend)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
