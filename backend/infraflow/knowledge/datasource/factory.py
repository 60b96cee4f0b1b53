"""Knowledge source factory — picks the backend named by KNOWLEDGE_SOURCE, once.

    static (default)  bundled in-memory tables
    db                relational store at DATABASE_URL

Unrecognized values fall back to static. The database module (and its
driver) is only imported when the db backend is selected.
"""

from typing import Optional

import structlog

from infraflow.config import get_settings
from infraflow.knowledge.datasource.base import KnowledgeDataSource
from infraflow.knowledge.datasource.static import StaticDataSource

logger = structlog.get_logger()

_source: Optional[KnowledgeDataSource] = None


def get_knowledge_source() -> KnowledgeDataSource:
    """Return the configured knowledge source, creating it on first use."""
    global _source
    if _source is not None:
        return _source

    settings = get_settings()
    backend = settings.KNOWLEDGE_SOURCE.strip().lower()

    if backend == "db":
        from infraflow.knowledge.datasource.database import DatabaseDataSource

        _source = DatabaseDataSource.from_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    else:
        if backend != "static":
            logger.warning("knowledge_source_unknown", requested=settings.KNOWLEDGE_SOURCE, fallback="static")
        _source = StaticDataSource()

    logger.info("knowledge_source_selected", backend=_source.name)
    return _source


def set_knowledge_source(source: KnowledgeDataSource) -> None:
    """Override the memoized source (tests, or callers wiring their own session factory)."""
    global _source
    _source = source


def reset_knowledge_source() -> None:
    """Forget the memoized source; the next call re-reads settings."""
    global _source
    _source = None
