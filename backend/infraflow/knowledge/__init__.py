"""Infrastructure knowledge engine — detection, enrichment and capacity estimation.

Usage:
    from infraflow.knowledge import enrich_context, build_knowledge_prompt_section

    enriched = enrich_context(topology, RELATIONSHIPS, ANTI_PATTERNS, FAILURE_SCENARIOS)
    prompt_section = build_knowledge_prompt_section(enriched)
"""

from infraflow.knowledge.antipatterns import ANTI_PATTERNS, detect_antipatterns
from infraflow.knowledge.capacity import (
    SIZING_MATRIX,
    TRAFFIC_PROFILES,
    estimate_capacity,
    find_bottlenecks,
    recommend_sizing,
)
from infraflow.knowledge.cloud_catalog import CLOUD_SERVICES, deprecation_warnings
from infraflow.knowledge.enricher import build_knowledge_prompt_section, enrich_context
from infraflow.knowledge.evaluator import detect_violations
from infraflow.knowledge.failures import FAILURE_SCENARIOS
from infraflow.knowledge.industry_presets import INDUSTRY_PRESETS, check_compliance
from infraflow.knowledge.loader import KnowledgeDataError
from infraflow.knowledge.models import EnrichedKnowledge
from infraflow.knowledge.patterns import ARCHITECTURE_PATTERNS, detect_patterns
from infraflow.knowledge.performance import PERFORMANCE_PROFILES
from infraflow.knowledge.registry import DetectionRegistry, detection_registry
from infraflow.knowledge.relationships import RELATIONSHIPS
from infraflow.knowledge.source_validator import validate_all_sources
from infraflow.knowledge.vulnerabilities import VULNERABILITIES

__all__ = [
    "ANTI_PATTERNS",
    "ARCHITECTURE_PATTERNS",
    "CLOUD_SERVICES",
    "FAILURE_SCENARIOS",
    "INDUSTRY_PRESETS",
    "PERFORMANCE_PROFILES",
    "RELATIONSHIPS",
    "SIZING_MATRIX",
    "TRAFFIC_PROFILES",
    "VULNERABILITIES",
    "DetectionRegistry",
    "EnrichedKnowledge",
    "KnowledgeDataError",
    "build_knowledge_prompt_section",
    "check_compliance",
    "detect_antipatterns",
    "detect_patterns",
    "detect_violations",
    "deprecation_warnings",
    "detection_registry",
    "enrich_context",
    "estimate_capacity",
    "find_bottlenecks",
    "recommend_sizing",
    "validate_all_sources",
]
