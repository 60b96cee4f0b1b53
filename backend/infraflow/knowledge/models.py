"""Knowledge models — trust metadata, knowledge entries, and enrichment output.

Every knowledge entry carries source attribution and trust metadata so that
anything surfaced to a user or injected into a prompt is traceable. Entries
are frozen: the engine reads them, it never mutates them.
"""

from typing import Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from infraflow.models.topology import Topology


SourceType = Literal[
    "rfc",              # IETF RFC documents
    "nist",             # NIST Special Publications
    "cis",              # CIS Benchmarks / Controls
    "owasp",            # OWASP guidelines
    "vendor",           # Vendor official docs (AWS, Azure, etc.)
    "academic",         # Academic papers, textbooks
    "industry",         # Industry guides (SANS, Gartner, etc.)
    "user_verified",    # Admin-verified user contribution
    "user_unverified",  # Unverified user contribution
]

# Base confidence by source type
BASE_CONFIDENCE: dict[str, float] = {
    "rfc": 1.0,
    "nist": 0.95,
    "cis": 0.95,
    "owasp": 0.9,
    "vendor": 0.85,
    "academic": 0.8,
    "industry": 0.7,
    "user_verified": 0.55,
    "user_unverified": 0.3,
}

RelationshipType = Literal["requires", "recommends", "conflicts", "enhances", "protects"]
RelationshipStrength = Literal["mandatory", "strong", "weak", "optional"]
RelationshipDirection = Literal["upstream", "downstream", "bidirectional"]
AntiPatternSeverity = Literal["critical", "high", "medium"]
FailureImpact = Literal["service-down", "degraded", "data-loss", "security-breach"]
Likelihood = Literal["high", "medium", "low"]
ScalingStrategy = Literal["horizontal", "vertical", "both"]

Detection = Callable[[Topology], bool]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ──────────────────────────────────────────────────────────────────────
# SOURCE & TRUST
# ──────────────────────────────────────────────────────────────────────

class KnowledgeSource(_Frozen):
    """A single citation backing a knowledge entry."""

    type: SourceType
    title: str                        # e.g. "NIST SP 800-41 Rev.1: ..."
    url: Optional[str] = None
    section: Optional[str] = None     # e.g. "Section 4.1 - Firewall Policy"
    published_date: Optional[str] = None
    accessed_date: str = "2026-02-09"


class ModificationRecord(_Frozen):
    """Lightweight provenance entry."""

    action: Literal["created", "updated", "reviewed", "voted"]
    by: str
    at: str
    reason: Optional[str] = None


class TrustMetadata(_Frozen):
    """Trust metadata attached to every knowledge entry.

    Confidence is authored per entry, not computed. It is the only signal
    used for ranking and tiering.
    """

    confidence: float = Field(gt=0.0, le=1.0)
    sources: tuple[KnowledgeSource, ...] = Field(min_length=1)
    last_reviewed_at: str
    upvotes: int = 0
    downvotes: int = 0
    contributed_by: Optional[str] = None
    verified_by: Optional[str] = None
    derived_from: tuple[str, ...] = ()
    last_modified_by: Optional[str] = None
    modification_history: tuple[ModificationRecord, ...] = ()

    @property
    def primary_source_title(self) -> str:
        return self.sources[0].title


# ──────────────────────────────────────────────────────────────────────
# KNOWLEDGE ENTRIES
# ──────────────────────────────────────────────────────────────────────

class KnowledgeEntry(_Frozen):
    """Base shape shared by every rule/fact record."""

    id: str                   # e.g. "AP-SEC-001", category-prefixed
    tags: tuple[str, ...] = Field(min_length=1)
    trust: TrustMetadata

    @property
    def confidence(self) -> float:
        return self.trust.confidence


class ComponentRelationship(KnowledgeEntry):
    """Directed relationship between two component types."""

    type: Literal["relationship"] = "relationship"
    source: str
    target: str
    relationship_type: RelationshipType
    strength: RelationshipStrength
    direction: RelationshipDirection
    reason: str
    reason_ko: str


class AntiPattern(KnowledgeEntry):
    """A named, detectable architectural flaw.

    `detection` is a pure predicate over a topology. It is excluded from
    serialization: stores persist only the id and re-attach the predicate
    through the detection registry on read.
    """

    type: Literal["antipattern"] = "antipattern"
    name: str
    name_ko: str
    severity: AntiPatternSeverity
    detection: Detection = Field(exclude=True, repr=False)
    detection_description_ko: str
    problem_ko: str
    impact_ko: str
    solution_ko: str


class FailureScenario(KnowledgeEntry):
    """A known way a component fails, with prevention and mitigation playbooks."""

    type: Literal["failure"] = "failure"
    component: str
    title_ko: str
    scenario_ko: str
    impact: FailureImpact
    likelihood: Likelihood
    affected_components: tuple[str, ...] = ()
    prevention_ko: tuple[str, ...] = ()
    mitigation_ko: tuple[str, ...] = ()
    estimated_mttr: str


class LatencyRange(_Frozen):
    min: float
    max: float
    unit: Literal["ms", "us"]

    @model_validator(mode="after")
    def _check_order(self) -> "LatencyRange":
        if self.min >= self.max:
            raise ValueError(f"latency min ({self.min}) must be below max ({self.max})")
        return self


class ThroughputRange(_Frozen):
    typical: str
    max: str


class PerformanceProfile(KnowledgeEntry):
    """Latency/throughput envelope and scaling guidance for one component type."""

    type: Literal["performance"] = "performance"
    component: str
    name_ko: str
    latency_range: LatencyRange
    throughput_range: ThroughputRange
    scaling_strategy: ScalingStrategy
    bottleneck_indicators: tuple[str, ...] = ()
    bottleneck_indicators_ko: tuple[str, ...] = ()
    optimization_tips_ko: tuple[str, ...] = ()


class RequiredComponent(_Frozen):
    type: str
    min_count: int = Field(default=1, ge=1)


class OptionalComponent(_Frozen):
    type: str
    benefit: str
    benefit_ko: str


class ArchitecturePattern(KnowledgeEntry):
    """A recognizable reference architecture."""

    type: Literal["pattern"] = "pattern"
    name: str
    name_ko: str
    description: str
    description_ko: str
    required_components: tuple[RequiredComponent, ...]
    optional_components: tuple[OptionalComponent, ...] = ()
    scalability: Literal["low", "medium", "high", "auto"]
    complexity: int = Field(ge=1, le=5)
    evolves_to: tuple[str, ...] = ()
    evolves_from: tuple[str, ...] = ()


class VulnerabilityEntry(_Frozen):
    """A published vulnerability affecting one or more component types."""

    id: str
    cve_id: Optional[str] = None
    affected_components: tuple[str, ...]
    severity: Literal["critical", "high", "medium", "low"]
    cvss_score: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    title: str
    title_ko: str
    description: str
    description_ko: str
    mitigation: str
    mitigation_ko: str
    published_date: str
    references: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    trust: TrustMetadata


class CloudService(_Frozen):
    """Managed cloud offering mapped to an abstract component type."""

    id: str
    provider: Literal["aws", "azure", "gcp"]
    component_type: str
    service_name: str
    service_name_ko: str
    status: Literal["active", "deprecated", "preview", "end-of-life"]
    successor: Optional[str] = None
    successor_ko: Optional[str] = None
    features: tuple[str, ...] = ()
    features_ko: tuple[str, ...] = ()
    pricing_tier: Literal["free", "low", "medium", "high", "enterprise"]
    trust: TrustMetadata


class DeprecationNotice(_Frozen):
    """A deprecated or retired cloud service whose component type is in use."""

    service: CloudService
    urgency: Literal["critical", "high", "medium"]
    message_ko: str


class RelatedComponent(_Frozen):
    """The far side of a relationship, seen from one component type."""

    component: str
    relationship: RelationshipType
    reason: str


# ──────────────────────────────────────────────────────────────────────
# SOURCE VALIDATION
# ──────────────────────────────────────────────────────────────────────

IssueSeverity = Literal["error", "warning", "info"]


class SourceIssue(BaseModel):
    severity: IssueSeverity
    code: str                 # e.g. "MISSING_URL", "STALE_SOURCE"
    message: str
    message_ko: str


class SourceValidationResult(BaseModel):
    """Structural check of one citation. Valid means no error-level issue."""

    source_title: str
    url: Optional[str] = None
    is_valid: bool
    issues: list[SourceIssue] = Field(default_factory=list)


class SourceIssueLocation(BaseModel):
    entry_id: str
    entry_type: str
    source: SourceValidationResult


class ValidationReport(BaseModel):
    total_sources: int
    valid_count: int
    warning_count: int
    error_count: int
    issues: list[SourceIssueLocation] = Field(default_factory=list)
    generated_at: str


class StaleEntry(BaseModel):
    entry_id: str
    last_reviewed: str
    days_since_review: int


# ──────────────────────────────────────────────────────────────────────
# INDUSTRY PRESETS
# ──────────────────────────────────────────────────────────────────────

IndustryType = Literal["financial", "healthcare", "government", "ecommerce"]


class ComplianceRule(_Frozen):
    """One control of a framework. Satisfied when every required component is present."""

    id: str                   # e.g. "PCI-6.6"
    description_ko: str
    required_components: tuple[str, ...] = Field(min_length=1)
    severity: AntiPatternSeverity


class ComplianceFramework(_Frozen):
    framework: str            # e.g. "PCI-DSS"
    framework_ko: str
    version: str
    requirements: tuple[ComplianceRule, ...]


class IndustryRelationship(_Frozen):
    source: str
    target: str
    relationship_type: Literal["requires", "recommends", "conflicts"]
    reason_ko: str
    compliance_ref: Optional[str] = None


class IndustryAntiPattern(_Frozen):
    """Advisory only: carries a detection hint, not a predicate."""

    id: str
    name_ko: str
    severity_ko: str
    detection_hint_ko: str
    compliance_ref: Optional[str] = None


class IndustryPreset(_Frozen):
    id: IndustryType
    name_ko: str
    description_ko: str
    compliance: tuple[ComplianceFramework, ...]
    required_components: tuple[str, ...]
    recommended_components: tuple[str, ...] = ()
    additional_relationships: tuple[IndustryRelationship, ...] = ()
    antipatterns: tuple[IndustryAntiPattern, ...] = ()
    best_practices_ko: tuple[str, ...] = ()


class ComplianceResult(BaseModel):
    """Compliance rules of one industry split by whether the topology satisfies them."""

    industry: IndustryType
    passed: list[ComplianceRule] = Field(default_factory=list)
    failed: list[ComplianceRule] = Field(default_factory=list)
    missing_components: list[str] = Field(default_factory=list)

    @property
    def is_compliant(self) -> bool:
        return not self.failed


# ──────────────────────────────────────────────────────────────────────
# CAPACITY & SIZING
# ──────────────────────────────────────────────────────────────────────

TrafficTier = Literal["small", "medium", "large", "enterprise"]

TRAFFIC_TIERS: tuple[str, ...] = ("small", "medium", "large", "enterprise")


class InstanceSpec(_Frozen):
    instance_count: int = Field(ge=1)
    spec: str
    spec_ko: str


class SizingEntry(_Frozen):
    """Sizing guidance for one component type at one traffic tier."""

    component_type: str
    tier: TrafficTier
    recommended: InstanceSpec
    minimum: InstanceSpec
    scaling_notes: str
    scaling_notes_ko: str
    estimated_monthly_cost: Optional[int] = None   # USD
    max_rps: int = Field(gt=0)                     # single-instance ceiling


class NumericRange(_Frozen):
    min: int
    max: int


class TrafficProfile(_Frozen):
    tier: TrafficTier
    name: str
    name_ko: str
    description: str
    description_ko: str
    requests_per_second: NumericRange
    concurrent_users: NumericRange


class SizingRecommendation(BaseModel):
    component_type: str
    recommended: InstanceSpec
    minimum: InstanceSpec
    scaling_notes: str
    scaling_notes_ko: str
    estimated_monthly_cost: Optional[int] = None


class Bottleneck(BaseModel):
    component_type: str
    reason: str
    reason_ko: str
    max_rps: int
    recommendation: str
    recommendation_ko: str


class CapacityEstimate(BaseModel):
    """Architecture-wide throughput ceiling and the components that bound it."""

    current_tier: TrafficTier
    max_rps: int
    bottlenecks: list[Bottleneck] = Field(default_factory=list)
    can_handle: dict[str, bool] = Field(default_factory=dict)


# ──────────────────────────────────────────────────────────────────────
# ENRICHMENT OUTPUT
# ──────────────────────────────────────────────────────────────────────

class EnrichedKnowledge(BaseModel):
    """Knowledge relevant to one topology. Input to the prompt renderer and the UI."""

    relationships: list[ComponentRelationship] = Field(default_factory=list)
    violations: list[AntiPattern] = Field(default_factory=list)
    suggestions: list[ComponentRelationship] = Field(default_factory=list)
    risks: list[FailureScenario] = Field(default_factory=list)
