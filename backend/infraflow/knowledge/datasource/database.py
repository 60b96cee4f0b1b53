"""Database data source — knowledge tables in a relational store (SQLAlchemy async).

Rows are mapped back to the same frozen models the static tables hold.
Anti-pattern rows only carry a detection rule id; the predicate is re-attached
from the detection registry, degrading to an always-false predicate when the
id is unknown.

Usage:
    source = DatabaseDataSource.from_url(settings.DATABASE_URL)
    await init_schema(source.session_factory)
    await seed_from_static(source.session_factory)
"""

from typing import Any, Iterable, Optional, Sequence

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from infraflow.knowledge.datasource.base import KnowledgeDataSource, KnowledgeFilter
from infraflow.knowledge.datasource.static import StaticDataSource, matches_tags
from infraflow.knowledge.datasource.tables import (
    AntiPatternRow,
    Base,
    CloudServiceRow,
    FailureRow,
    PatternRow,
    PerformanceRow,
    RelationshipRow,
    VulnerabilityRow,
)
from infraflow.knowledge.models import (
    AntiPattern,
    ArchitecturePattern,
    CloudService,
    ComponentRelationship,
    FailureScenario,
    PerformanceProfile,
    VulnerabilityEntry,
)
from infraflow.knowledge.registry import detection_registry

logger = structlog.get_logger()


async def init_schema(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Create the knowledge_* tables if they do not exist."""
    async with session_factory() as session:
        conn = await session.connection()
        await conn.run_sync(Base.metadata.create_all)
        await session.commit()


# ── Enum storage mapping ──

def _to_db_enum(value: str) -> str:
    return value.replace("-", "_")


def _from_db_enum(value: str) -> str:
    return value.replace("_", "-")


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so search text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ──────────────────────────────────────────────────────────────────────
# DATA SOURCE
# ──────────────────────────────────────────────────────────────────────

class DatabaseDataSource(KnowledgeDataSource):
    """Knowledge backend reading the knowledge_* tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], engine: Optional[AsyncEngine] = None):
        self.session_factory = session_factory
        self.engine = engine

    @property
    def name(self) -> str:
        return "db"

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("database_disconnected")

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "DatabaseDataSource":
        engine = create_async_engine(database_url, echo=echo)
        return cls(async_sessionmaker(engine, expire_on_commit=False), engine=engine)

    async def _query(
        self,
        table: type,
        filters: Optional[KnowledgeFilter],
        search_columns: Sequence[Any],
        component_columns: Sequence[Any] = (),
    ) -> list:
        """Fetch rows matching the filter's active flag, search text and component."""
        filters = filters or KnowledgeFilter()

        stmt = select(table).where(table.is_active == filters.is_active)
        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            stmt = stmt.where(or_(*(col.ilike(pattern, escape="\\") for col in search_columns)))
        if filters.component and component_columns:
            stmt = stmt.where(or_(*(col == filters.component for col in component_columns)))
        stmt = stmt.order_by(table.id)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = list(result.scalars().all())

        # tags are JSON arrays; filtered after the fetch
        return [r for r in rows if matches_tags(r.tags, filters.tags)]

    async def get_relationships(self, filters: Optional[KnowledgeFilter] = None) -> list[ComponentRelationship]:
        t = RelationshipRow
        rows = await self._query(
            t, filters,
            search_columns=(t.reason, t.reason_ko, t.source_component, t.target_component),
            component_columns=(t.source_component, t.target_component),
        )
        return [_relationship_from_row(r) for r in rows]

    async def get_patterns(self, filters: Optional[KnowledgeFilter] = None) -> list[ArchitecturePattern]:
        t = PatternRow
        rows = await self._query(t, filters, search_columns=(t.name, t.name_ko, t.description, t.description_ko))
        patterns = [_pattern_from_row(r) for r in rows]
        if filters and filters.component:
            patterns = [
                p for p in patterns
                if any(req.type == filters.component for req in p.required_components)
            ]
        return patterns

    async def get_antipatterns(self, filters: Optional[KnowledgeFilter] = None) -> list[AntiPattern]:
        t = AntiPatternRow
        rows = await self._query(t, filters, search_columns=(t.name, t.name_ko, t.problem_ko, t.solution_ko))
        return [_antipattern_from_row(r) for r in rows]

    async def get_failures(self, filters: Optional[KnowledgeFilter] = None) -> list[FailureScenario]:
        t = FailureRow
        rows = await self._query(
            t, filters,
            search_columns=(t.title_ko, t.scenario_ko, t.component),
            component_columns=(t.component,),
        )
        return [_failure_from_row(r) for r in rows]

    async def get_performance_profiles(self, filters: Optional[KnowledgeFilter] = None) -> list[PerformanceProfile]:
        t = PerformanceRow
        rows = await self._query(
            t, filters,
            search_columns=(t.name_ko, t.component),
            component_columns=(t.component,),
        )
        return [_performance_from_row(r) for r in rows]

    async def get_vulnerabilities(self, filters: Optional[KnowledgeFilter] = None) -> list[VulnerabilityEntry]:
        t = VulnerabilityRow
        rows = await self._query(
            t, filters,
            search_columns=(t.title, t.title_ko, t.description, t.description_ko, t.cve_id),
        )
        vulns = [_vulnerability_from_row(r) for r in rows]
        if filters and filters.component:
            vulns = [v for v in vulns if filters.component in v.affected_components]
        return vulns

    async def get_cloud_services(self, filters: Optional[KnowledgeFilter] = None) -> list[CloudService]:
        t = CloudServiceRow
        rows = await self._query(
            t, filters,
            search_columns=(t.service_name, t.service_name_ko, t.component_type),
            component_columns=(t.component_type,),
        )
        return [_cloud_service_from_row(r) for r in rows]


# ──────────────────────────────────────────────────────────────────────
# ROW -> RECORD
# ──────────────────────────────────────────────────────────────────────

def _relationship_from_row(r: RelationshipRow) -> ComponentRelationship:
    return ComponentRelationship.model_validate({
        "id": r.knowledge_id,
        "source": r.source_component,
        "target": r.target_component,
        "relationship_type": r.relationship_type,
        "strength": r.strength,
        "direction": r.direction,
        "reason": r.reason,
        "reason_ko": r.reason_ko,
        "tags": r.tags,
        "trust": r.trust_metadata,
    })


def _pattern_from_row(r: PatternRow) -> ArchitecturePattern:
    return ArchitecturePattern.model_validate({
        "id": r.pattern_id,
        "name": r.name,
        "name_ko": r.name_ko,
        "description": r.description,
        "description_ko": r.description_ko,
        "required_components": r.required_components,
        "optional_components": r.optional_components,
        "scalability": r.scalability,
        "complexity": r.complexity,
        "evolves_to": r.evolves_to,
        "evolves_from": r.evolves_from,
        "tags": r.tags,
        "trust": r.trust_metadata,
    })


def _antipattern_from_row(r: AntiPatternRow) -> AntiPattern:
    return AntiPattern.model_validate({
        "id": r.antipattern_id,
        "name": r.name,
        "name_ko": r.name_ko,
        "severity": r.severity,
        "detection": detection_registry.resolve(r.detection_rule_id),
        "detection_description_ko": r.detection_description_ko,
        "problem_ko": r.problem_ko,
        "impact_ko": r.impact_ko,
        "solution_ko": r.solution_ko,
        "tags": r.tags,
        "trust": r.trust_metadata,
    })


def _failure_from_row(r: FailureRow) -> FailureScenario:
    return FailureScenario.model_validate({
        "id": r.failure_id,
        "component": r.component,
        "title_ko": r.title_ko,
        "scenario_ko": r.scenario_ko,
        "impact": _from_db_enum(r.impact),
        "likelihood": r.likelihood,
        "affected_components": r.affected_components,
        "prevention_ko": r.prevention_ko,
        "mitigation_ko": r.mitigation_ko,
        "estimated_mttr": r.estimated_mttr,
        "tags": r.tags,
        "trust": r.trust_metadata,
    })


def _performance_from_row(r: PerformanceRow) -> PerformanceProfile:
    return PerformanceProfile.model_validate({
        "id": r.performance_id,
        "component": r.component,
        "name_ko": r.name_ko,
        "latency_range": r.latency_range,
        "throughput_range": r.throughput_range,
        "scaling_strategy": r.scaling_strategy,
        "bottleneck_indicators": r.bottleneck_indicators,
        "bottleneck_indicators_ko": r.bottleneck_indicators_ko,
        "optimization_tips_ko": r.optimization_tips_ko,
        "tags": r.tags,
        "trust": r.trust_metadata,
    })


def _vulnerability_from_row(r: VulnerabilityRow) -> VulnerabilityEntry:
    return VulnerabilityEntry.model_validate({
        "id": r.vuln_id,
        "cve_id": r.cve_id,
        "affected_components": r.affected_components,
        "severity": r.severity,
        "cvss_score": r.cvss_score,
        "title": r.title,
        "title_ko": r.title_ko,
        "description": r.description,
        "description_ko": r.description_ko,
        "mitigation": r.mitigation,
        "mitigation_ko": r.mitigation_ko,
        "published_date": r.published_date,
        "references": r.references,
        "tags": r.tags,
        "trust": r.trust_metadata,
    })


def _cloud_service_from_row(r: CloudServiceRow) -> CloudService:
    return CloudService.model_validate({
        "id": r.service_id,
        "provider": r.provider,
        "component_type": r.component_type,
        "service_name": r.service_name,
        "service_name_ko": r.service_name_ko,
        "status": _from_db_enum(r.status),
        "successor": r.successor,
        "successor_ko": r.successor_ko,
        "features": r.features,
        "features_ko": r.features_ko,
        "pricing_tier": r.pricing_tier,
        "trust": r.trust_metadata,
    })


# ──────────────────────────────────────────────────────────────────────
# SEEDING
# ──────────────────────────────────────────────────────────────────────

def _common(record: Any) -> dict[str, Any]:
    return {
        "tags": list(getattr(record, "tags", ())),
        "trust_metadata": record.trust.model_dump(mode="json"),
        "is_active": True,
    }


def _relationship_rows(records: Iterable[ComponentRelationship]) -> list[RelationshipRow]:
    return [
        RelationshipRow(
            knowledge_id=r.id, source_component=r.source, target_component=r.target,
            relationship_type=r.relationship_type, strength=r.strength, direction=r.direction,
            reason=r.reason, reason_ko=r.reason_ko, **_common(r),
        )
        for r in records
    ]


def _pattern_rows(records: Iterable[ArchitecturePattern]) -> list[PatternRow]:
    return [
        PatternRow(
            pattern_id=p.id, name=p.name, name_ko=p.name_ko,
            description=p.description, description_ko=p.description_ko,
            required_components=[c.model_dump() for c in p.required_components],
            optional_components=[c.model_dump() for c in p.optional_components],
            scalability=p.scalability, complexity=p.complexity,
            evolves_to=list(p.evolves_to), evolves_from=list(p.evolves_from), **_common(p),
        )
        for p in records
    ]


def _antipattern_rows(records: Iterable[AntiPattern]) -> list[AntiPatternRow]:
    return [
        AntiPatternRow(
            antipattern_id=ap.id, name=ap.name, name_ko=ap.name_ko, severity=ap.severity,
            detection_rule_id=ap.id, detection_description_ko=ap.detection_description_ko,
            problem_ko=ap.problem_ko, impact_ko=ap.impact_ko, solution_ko=ap.solution_ko,
            **_common(ap),
        )
        for ap in records
    ]


def _failure_rows(records: Iterable[FailureScenario]) -> list[FailureRow]:
    return [
        FailureRow(
            failure_id=f.id, component=f.component, title_ko=f.title_ko, scenario_ko=f.scenario_ko,
            impact=_to_db_enum(f.impact), likelihood=f.likelihood,
            affected_components=list(f.affected_components),
            prevention_ko=list(f.prevention_ko), mitigation_ko=list(f.mitigation_ko),
            estimated_mttr=f.estimated_mttr, **_common(f),
        )
        for f in records
    ]


def _performance_rows(records: Iterable[PerformanceProfile]) -> list[PerformanceRow]:
    return [
        PerformanceRow(
            performance_id=p.id, component=p.component, name_ko=p.name_ko,
            latency_range=p.latency_range.model_dump(), throughput_range=p.throughput_range.model_dump(),
            scaling_strategy=p.scaling_strategy,
            bottleneck_indicators=list(p.bottleneck_indicators),
            bottleneck_indicators_ko=list(p.bottleneck_indicators_ko),
            optimization_tips_ko=list(p.optimization_tips_ko), **_common(p),
        )
        for p in records
    ]


def _vulnerability_rows(records: Iterable[VulnerabilityEntry]) -> list[VulnerabilityRow]:
    return [
        VulnerabilityRow(
            vuln_id=v.id, cve_id=v.cve_id, affected_components=list(v.affected_components),
            severity=v.severity, cvss_score=v.cvss_score,
            title=v.title, title_ko=v.title_ko, description=v.description,
            description_ko=v.description_ko, mitigation=v.mitigation, mitigation_ko=v.mitigation_ko,
            published_date=v.published_date, references=list(v.references), **_common(v),
        )
        for v in records
    ]


def _cloud_service_rows(records: Iterable[CloudService]) -> list[CloudServiceRow]:
    return [
        CloudServiceRow(
            service_id=s.id, provider=s.provider, component_type=s.component_type,
            service_name=s.service_name, service_name_ko=s.service_name_ko,
            status=_to_db_enum(s.status), successor=s.successor, successor_ko=s.successor_ko,
            features=list(s.features), features_ko=list(s.features_ko),
            pricing_tier=s.pricing_tier, **_common(s),
        )
        for s in records
    ]


async def seed_from_static(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, int]:
    """Copy the bundled knowledge tables into the database.

    Expects an empty schema (see init_schema). Runs in a single transaction.

    Returns:
        Row count inserted per table
    """
    static = StaticDataSource()
    batches = {
        RelationshipRow.__tablename__: _relationship_rows(await static.get_relationships()),
        PatternRow.__tablename__: _pattern_rows(await static.get_patterns()),
        AntiPatternRow.__tablename__: _antipattern_rows(await static.get_antipatterns()),
        FailureRow.__tablename__: _failure_rows(await static.get_failures()),
        PerformanceRow.__tablename__: _performance_rows(await static.get_performance_profiles()),
        VulnerabilityRow.__tablename__: _vulnerability_rows(await static.get_vulnerabilities()),
        CloudServiceRow.__tablename__: _cloud_service_rows(await static.get_cloud_services()),
    }

    async with session_factory() as session:
        async with session.begin():
            for rows in batches.values():
                session.add_all(rows)

    counts = {table: len(rows) for table, rows in batches.items()}
    logger.info("knowledge_seeded", **counts)
    return counts
