"""Analysis API — topology enrichment, pattern detection, capacity and compliance."""

import structlog
from fastapi import APIRouter, Depends

from infraflow.config import get_settings
from infraflow.knowledge.capacity import estimate_capacity, recommend_sizing
from infraflow.knowledge.cloud_catalog import deprecation_warnings
from infraflow.knowledge.datasource import KnowledgeDataSource, get_knowledge_source
from infraflow.knowledge.enricher import build_knowledge_prompt_section, enrich_context
from infraflow.knowledge.industry_presets import check_compliance, get_industry_antipatterns
from infraflow.knowledge.patterns import detect_patterns
from infraflow.models.requests import AnalyzeRequest, CapacityRequest, ComplianceRequest
from infraflow.models.responses import (
    AnalyzeResponse,
    CapacityResponse,
    ComplianceResponse,
    ViolationResponse,
)

logger = structlog.get_logger()

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_topology(
    request: AnalyzeRequest,
    source: KnowledgeDataSource = Depends(get_knowledge_source),
):
    """Analyze a topology against the knowledge base.

    Returns relationships, missing-component suggestions, anti-pattern violations,
    failure risks, recognized patterns, deprecated services, the capacity estimate
    and the rendered prompt section.
    """
    topology = request.topology
    min_confidence = request.min_confidence
    if min_confidence is None:
        min_confidence = get_settings().MIN_CONFIDENCE

    enriched = enrich_context(
        topology,
        await source.get_relationships(),
        antipatterns=await source.get_antipatterns(),
        failures=await source.get_failures(),
    )

    logger.info(
        "topology_analyzed",
        nodes=len(topology.nodes),
        connections=len(topology.connections),
        violations=len(enriched.violations),
        backend=source.name,
    )

    return AnalyzeResponse(
        relationships=enriched.relationships,
        suggestions=enriched.suggestions,
        violations=[ViolationResponse.from_antipattern(ap) for ap in enriched.violations],
        risks=enriched.risks,
        patterns=detect_patterns(topology),
        deprecations=deprecation_warnings(topology),
        capacity=estimate_capacity(topology),
        prompt_section=build_knowledge_prompt_section(enriched, min_confidence),
    )


@router.post("/capacity", response_model=CapacityResponse)
async def estimate_topology_capacity(request: CapacityRequest):
    """Capacity estimate, plus sizing guidance when a target tier is given."""
    sizing = []
    if request.target_tier is not None:
        sizing = recommend_sizing(request.topology, request.target_tier)

    return CapacityResponse(
        estimate=estimate_capacity(request.topology),
        sizing=sizing,
    )


@router.post("/compliance", response_model=ComplianceResponse)
async def check_topology_compliance(request: ComplianceRequest):
    """Check which of an industry's compliance rules the topology satisfies."""
    result = check_compliance(request.topology, request.industry)

    return ComplianceResponse(
        industry=result.industry,
        is_compliant=result.is_compliant,
        passed=result.passed,
        failed=result.failed,
        missing_components=result.missing_components,
        antipatterns=list(get_industry_antipatterns(request.industry)),
    )
