"""Health check endpoint."""

import time

from fastapi import APIRouter, Depends

from infraflow import __version__
from infraflow.knowledge.datasource import KnowledgeDataSource, get_knowledge_source
from infraflow.models.responses import HealthDependency, HealthResponse

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(source: KnowledgeDataSource = Depends(get_knowledge_source)):
    """System health check with knowledge backend status."""
    dependencies = {}

    try:
        start = time.time()
        await source.get_antipatterns()
        latency = (time.time() - start) * 1000
        dependencies["knowledge_source"] = HealthDependency(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        dependencies["knowledge_source"] = HealthDependency(status="unhealthy", message=str(e))

    status = "healthy" if all(d.status == "healthy" for d in dependencies.values()) else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
        knowledge_source=source.name,
        dependencies=dependencies,
    )
