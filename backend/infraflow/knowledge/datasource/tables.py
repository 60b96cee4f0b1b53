"""Relational schema for the database knowledge backend.

One table per knowledge category. List-valued fields and trust metadata are
stored as JSON. Enum values containing hyphens are stored with underscores
("service_down", "end_of_life") and mapped back on read.
"""

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class _KnowledgeRow:
    """Columns shared by every knowledge table."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    trust_metadata: Mapped[dict[str, Any]] = mapped_column(JSON)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)


class RelationshipRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_relationships"

    knowledge_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)  # "REL-SEC-001"
    source_component: Mapped[str] = mapped_column(String(50), index=True)
    target_component: Mapped[str] = mapped_column(String(50), index=True)
    relationship_type: Mapped[str] = mapped_column(String(20))
    strength: Mapped[str] = mapped_column(String(20))
    direction: Mapped[str] = mapped_column(String(20))
    reason: Mapped[str] = mapped_column(Text)
    reason_ko: Mapped[str] = mapped_column(Text)


class PatternRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_patterns"

    pattern_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    name_ko: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    description_ko: Mapped[str] = mapped_column(Text)
    required_components: Mapped[list[dict[str, Any]]] = mapped_column(JSON)
    optional_components: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    scalability: Mapped[str] = mapped_column(String(20))
    complexity: Mapped[int] = mapped_column(Integer)
    evolves_to: Mapped[list[str]] = mapped_column(JSON, default=list)
    evolves_from: Mapped[list[str]] = mapped_column(JSON, default=list)


class AntiPatternRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_antipatterns"

    antipattern_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    name_ko: Mapped[str] = mapped_column(String(200))
    severity: Mapped[str] = mapped_column(String(20))
    # Predicates are code: rows keep the registry key only
    detection_rule_id: Mapped[str] = mapped_column(String(50))
    detection_description_ko: Mapped[str] = mapped_column(Text)
    problem_ko: Mapped[str] = mapped_column(Text)
    impact_ko: Mapped[str] = mapped_column(Text)
    solution_ko: Mapped[str] = mapped_column(Text)


class FailureRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_failures"

    failure_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    component: Mapped[str] = mapped_column(String(50), index=True)
    title_ko: Mapped[str] = mapped_column(String(300))
    scenario_ko: Mapped[str] = mapped_column(Text)
    impact: Mapped[str] = mapped_column(String(20))       # service_down, data_loss, ...
    likelihood: Mapped[str] = mapped_column(String(20))
    affected_components: Mapped[list[str]] = mapped_column(JSON, default=list)
    prevention_ko: Mapped[list[str]] = mapped_column(JSON, default=list)
    mitigation_ko: Mapped[list[str]] = mapped_column(JSON, default=list)
    estimated_mttr: Mapped[str] = mapped_column(String(50))


class PerformanceRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_performance"

    performance_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    component: Mapped[str] = mapped_column(String(50), index=True)
    name_ko: Mapped[str] = mapped_column(String(200))
    latency_range: Mapped[dict[str, Any]] = mapped_column(JSON)
    throughput_range: Mapped[dict[str, Any]] = mapped_column(JSON)
    scaling_strategy: Mapped[str] = mapped_column(String(20))
    bottleneck_indicators: Mapped[list[str]] = mapped_column(JSON, default=list)
    bottleneck_indicators_ko: Mapped[list[str]] = mapped_column(JSON, default=list)
    optimization_tips_ko: Mapped[list[str]] = mapped_column(JSON, default=list)


class VulnerabilityRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_vulnerabilities"

    vuln_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    cve_id: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    affected_components: Mapped[list[str]] = mapped_column(JSON)
    severity: Mapped[str] = mapped_column(String(20))
    cvss_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    title: Mapped[str] = mapped_column(String(300))
    title_ko: Mapped[str] = mapped_column(String(300))
    description: Mapped[str] = mapped_column(Text)
    description_ko: Mapped[str] = mapped_column(Text)
    mitigation: Mapped[str] = mapped_column(Text)
    mitigation_ko: Mapped[str] = mapped_column(Text)
    published_date: Mapped[str] = mapped_column(String(20))
    references: Mapped[list[str]] = mapped_column(JSON, default=list)


class CloudServiceRow(_KnowledgeRow, Base):
    __tablename__ = "knowledge_cloud_services"

    service_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    provider: Mapped[str] = mapped_column(String(10), index=True)
    component_type: Mapped[str] = mapped_column(String(50), index=True)
    service_name: Mapped[str] = mapped_column(String(200))
    service_name_ko: Mapped[str] = mapped_column(String(200))
    status: Mapped[str] = mapped_column(String(20))       # active, deprecated, preview, end_of_life
    successor: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    successor_ko: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    features: Mapped[list[str]] = mapped_column(JSON, default=list)
    features_ko: Mapped[list[str]] = mapped_column(JSON, default=list)
    pricing_tier: Mapped[str] = mapped_column(String(20))
