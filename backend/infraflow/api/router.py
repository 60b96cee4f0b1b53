"""Main API router — combines all endpoint routers."""

from fastapi import APIRouter

from infraflow.api.analysis import router as analysis_router
from infraflow.api.health import router as health_router
from infraflow.api.knowledge import router as knowledge_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Knowledge browsing
api_router.include_router(knowledge_router, tags=["Knowledge"])

# Topology analysis and capacity
api_router.include_router(analysis_router, tags=["Analysis"])
