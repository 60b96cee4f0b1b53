"""InfraFlow — infrastructure knowledge engine API.

Serves topology analysis over HTTP. The knowledge backend is chosen once at
startup and shared by every request through the data-source factory.
"""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from infraflow import __version__
from infraflow.api.router import api_router
from infraflow.config import get_settings
from infraflow.knowledge.antipatterns import ANTI_PATTERNS
from infraflow.knowledge.datasource import get_knowledge_source
from infraflow.knowledge.loader import KnowledgeDataError
from infraflow.knowledge.relationships import RELATIONSHIPS

settings = get_settings()

# Structured logging: console in DEBUG, JSON lines otherwise
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.LOG_LEVEL.upper())
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Pick the knowledge backend on startup, release it on shutdown."""
    source = get_knowledge_source()
    if source.name == "db":
        from infraflow.knowledge.datasource.database import init_schema

        await init_schema(source.session_factory)

    app.state.knowledge_source = source
    logger.info(
        "app_started",
        version=__version__,
        backend=source.name,
        relationships=len(RELATIONSHIPS),
        antipatterns=len(ANTI_PATTERNS),
    )

    yield

    await source.close()
    logger.info("app_stopped", backend=source.name)


# ── Create Application ──

app = FastAPI(
    title="InfraFlow Knowledge Engine",
    description=(
        "Analyzes infrastructure topologies against a curated, source-attributed "
        "knowledge base: missing dependencies, conflicts, anti-patterns, failure "
        "risks and capacity bottlenecks."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ── Error Handlers ──

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Bad input that passed schema validation (e.g. an unknown traffic tier)."""
    return JSONResponse(
        status_code=422,
        content={"error": "invalid_request", "message": str(exc)},
    )


@app.exception_handler(KnowledgeDataError)
async def knowledge_data_error_handler(request: Request, exc: KnowledgeDataError):
    logger.error("knowledge_data_invalid", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"error": "knowledge_data_invalid", "message": "The knowledge base failed to load."},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "message": "Topology analysis failed unexpectedly."},
    )


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Service info and entry points."""
    return {
        "name": "InfraFlow Knowledge Engine",
        "version": __version__,
        "knowledge_source": settings.KNOWLEDGE_SOURCE,
        "health": "/api/v1/health",
        "analyze": "/api/v1/analyze",
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "infraflow.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )
