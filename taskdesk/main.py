"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from taskdesk.api.router import api_router
from taskdesk.core.errors import TaskError
from taskdesk.core.logging import setup_logging
from taskdesk.core.settings import Settings, get_settings
from taskdesk.db.base import create_db_engine, create_session_factory
from taskdesk.db.init_db import init_db

logger = logging.getLogger(__name__)

# Origins the desktop front end is served from during development
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
    "wails://wails",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, release connections on shutdown."""
    settings = app.state.settings
    logger.info(f"Starting {settings.project_name}")
    try:
        init_db(app.state.engine)
    except SQLAlchemyError as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    yield

    logger.info(f"Shutting down {settings.project_name}")
    app.state.engine.dispose()


async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"Task operation failed: {exc}")
    else:
        logger.info(f"Rejected request: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "code": "DATABASE_ERROR"},
    )


def create_application(settings: Settings | None = None) -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    engine = create_db_engine(settings.database_url)
    application.state.settings = settings
    application.state.engine = engine
    application.state.session_factory = create_session_factory(engine)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(TaskError, task_error_handler)
    application.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)

    application.include_router(api_router, prefix=settings.api_prefix)

    return application
