import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import CORS_ORIGINS, LOG_DIR, LOG_LEVEL, STORAGE_KEY
from .database import KeyValueStorage
from .errors import TaskNotFoundError, TaskValidationError
from .logging_setup import setup_logging
from .routers import tasks
from .store import TaskStore

logger = logging.getLogger(__name__)


def create_app(task_store: Optional[TaskStore] = None) -> FastAPI:
    """Build the API application.

    When ``task_store`` is omitted the store is constructed on startup from
    the configured storage slot.
    """
    app = FastAPI(
        title="Task Board API",
        description="Task board with validated create/update and snapshot persistence",
        version="1.0.0",
    )
    app.state.task_store = task_store

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tasks.router, prefix="/api", tags=["tasks"])

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(TaskValidationError)
    async def validation_error(request: Request, exc: TaskValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation failed",
                "details": [error.model_dump() for error in exc.errors],
            },
        )

    @app.exception_handler(TaskNotFoundError)
    async def not_found(request: Request, exc: TaskNotFoundError):
        return JSONResponse(status_code=404, content={"error": "Task not found"})

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    # Build the store on startup
    @app.on_event("startup")
    def on_startup():
        setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)
        if app.state.task_store is None:
            app.state.task_store = TaskStore(KeyValueStorage(), STORAGE_KEY)

    @app.get("/")
    def read_root():
        return {"message": "Task Board API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
