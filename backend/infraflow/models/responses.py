"""API response models."""

from typing import Any, Literal, Optional

from pydantic import BaseModel

from infraflow.knowledge.models import (
    AntiPattern,
    ArchitecturePattern,
    CapacityEstimate,
    ComplianceRule,
    ComponentRelationship,
    DeprecationNotice,
    FailureScenario,
    IndustryAntiPattern,
    SizingRecommendation,
)


class HealthDependency(BaseModel):
    """Status of a single dependency."""

    status: Literal["healthy", "unhealthy"]
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """System health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    uptime_seconds: float
    knowledge_source: str
    dependencies: dict[str, HealthDependency] = {}


class ViolationResponse(BaseModel):
    """An anti-pattern hit, without its detection predicate."""

    id: str
    name: str
    name_ko: str
    severity: str
    detection_description_ko: str
    problem_ko: str
    impact_ko: str
    solution_ko: str
    confidence: float

    @classmethod
    def from_antipattern(cls, ap: AntiPattern) -> "ViolationResponse":
        return cls(
            id=ap.id,
            name=ap.name,
            name_ko=ap.name_ko,
            severity=ap.severity,
            detection_description_ko=ap.detection_description_ko,
            problem_ko=ap.problem_ko,
            impact_ko=ap.impact_ko,
            solution_ko=ap.solution_ko,
            confidence=ap.confidence,
        )


class AnalyzeResponse(BaseModel):
    """Everything the knowledge base has to say about one topology."""

    relationships: list[ComponentRelationship] = []
    suggestions: list[ComponentRelationship] = []
    violations: list[ViolationResponse] = []
    risks: list[FailureScenario] = []
    patterns: list[ArchitecturePattern] = []
    deprecations: list[DeprecationNotice] = []
    capacity: CapacityEstimate
    prompt_section: str = ""


class CapacityResponse(BaseModel):
    estimate: CapacityEstimate
    sizing: list[SizingRecommendation] = []


class KnowledgeListResponse(BaseModel):
    """Entries of one knowledge category."""

    category: str
    count: int
    entries: list[dict[str, Any]]


class ComplianceResponse(BaseModel):
    """Compliance rules split by outcome, with the industry's advisories."""

    industry: str
    is_compliant: bool
    passed: list[ComplianceRule] = []
    failed: list[ComplianceRule] = []
    missing_components: list[str] = []
    antipatterns: list[IndustryAntiPattern] = []
