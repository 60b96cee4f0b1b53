"""Knowledge API — browse the knowledge base one category at a time."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from infraflow.knowledge.datasource import KnowledgeDataSource, KnowledgeFilter, get_knowledge_source
from infraflow.models.responses import KnowledgeListResponse

logger = structlog.get_logger()

router = APIRouter()

# URL category -> data-source getter name
CATEGORIES: dict[str, str] = {
    "relationships": "get_relationships",
    "patterns": "get_patterns",
    "antipatterns": "get_antipatterns",
    "failures": "get_failures",
    "performance": "get_performance_profiles",
    "vulnerabilities": "get_vulnerabilities",
    "cloud-services": "get_cloud_services",
}


@router.get("/knowledge/{category}", response_model=KnowledgeListResponse)
async def list_knowledge(
    category: str,
    search: Optional[str] = Query(default=None, max_length=200),
    tags: Optional[list[str]] = Query(default=None),
    component: Optional[str] = Query(default=None),
    source: KnowledgeDataSource = Depends(get_knowledge_source),
):
    """List entries of one knowledge category, optionally filtered."""
    getter = CATEGORIES.get(category)
    if getter is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown knowledge category '{category}'. Expected one of: {', '.join(CATEGORIES)}",
        )

    filters = KnowledgeFilter(search=search, tags=tags, component=component)
    records = await getattr(source, getter)(filters)

    logger.info("knowledge_listed", category=category, count=len(records), backend=source.name)

    return KnowledgeListResponse(
        category=category,
        count=len(records),
        entries=[r.model_dump(mode="json") for r in records],
    )
