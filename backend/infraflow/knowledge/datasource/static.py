"""Static data source — filters the bundled in-memory knowledge tables."""

from typing import Callable, Iterable, Optional, TypeVar

from infraflow.knowledge.antipatterns import ANTI_PATTERNS
from infraflow.knowledge.cloud_catalog import CLOUD_SERVICES
from infraflow.knowledge.datasource.base import KnowledgeDataSource, KnowledgeFilter
from infraflow.knowledge.failures import FAILURE_SCENARIOS
from infraflow.knowledge.models import (
    AntiPattern,
    ArchitecturePattern,
    CloudService,
    ComponentRelationship,
    FailureScenario,
    PerformanceProfile,
    VulnerabilityEntry,
)
from infraflow.knowledge.patterns import ARCHITECTURE_PATTERNS
from infraflow.knowledge.performance import PERFORMANCE_PROFILES
from infraflow.knowledge.relationships import RELATIONSHIPS
from infraflow.knowledge.vulnerabilities import VULNERABILITIES

T = TypeVar("T")


def matches_search(fields: Iterable[Optional[str]], search: Optional[str]) -> bool:
    """Case-insensitive substring match against any of `fields`."""
    if not search:
        return True
    needle = search.lower()
    return any(f and needle in f.lower() for f in fields)


def matches_tags(entry_tags: Iterable[str], filter_tags: Optional[list[str]]) -> bool:
    """True when any filter tag is on the entry (no filter tags = match)."""
    if not filter_tags:
        return True
    tags = set(entry_tags)
    return any(t in tags for t in filter_tags)


def _apply(
    records: Iterable[T],
    filters: Optional[KnowledgeFilter],
    text: Callable[[T], Iterable[Optional[str]]],
    tags: Optional[Callable[[T], Iterable[str]]] = None,
    component: Optional[Callable[[T, str], bool]] = None,
) -> list[T]:
    if filters is None:
        return list(records)

    # Bundled tables only hold active records
    if not filters.is_active:
        return []

    result = []
    for record in records:
        if not matches_search(text(record), filters.search):
            continue
        if tags is not None and not matches_tags(tags(record), filters.tags):
            continue
        if component is not None and filters.component and not component(record, filters.component):
            continue
        result.append(record)
    return result


class StaticDataSource(KnowledgeDataSource):
    """Default backend: the frozen tables shipped with the package."""

    @property
    def name(self) -> str:
        return "static"

    async def get_relationships(self, filters: Optional[KnowledgeFilter] = None) -> list[ComponentRelationship]:
        return _apply(
            RELATIONSHIPS, filters,
            text=lambda r: (r.reason, r.reason_ko, r.source, r.target),
            tags=lambda r: r.tags,
            component=lambda r, c: r.source == c or r.target == c,
        )

    async def get_patterns(self, filters: Optional[KnowledgeFilter] = None) -> list[ArchitecturePattern]:
        return _apply(
            ARCHITECTURE_PATTERNS, filters,
            text=lambda p: (p.name, p.name_ko, p.description, p.description_ko),
            tags=lambda p: p.tags,
            component=lambda p, c: any(req.type == c for req in p.required_components),
        )

    async def get_antipatterns(self, filters: Optional[KnowledgeFilter] = None) -> list[AntiPattern]:
        return _apply(
            ANTI_PATTERNS, filters,
            text=lambda ap: (ap.name, ap.name_ko, ap.problem_ko, ap.solution_ko),
            tags=lambda ap: ap.tags,
        )

    async def get_failures(self, filters: Optional[KnowledgeFilter] = None) -> list[FailureScenario]:
        return _apply(
            FAILURE_SCENARIOS, filters,
            text=lambda f: (f.title_ko, f.scenario_ko, f.component),
            tags=lambda f: f.tags,
            component=lambda f, c: f.component == c,
        )

    async def get_performance_profiles(self, filters: Optional[KnowledgeFilter] = None) -> list[PerformanceProfile]:
        return _apply(
            PERFORMANCE_PROFILES, filters,
            text=lambda p: (p.name_ko, p.component),
            tags=lambda p: p.tags,
            component=lambda p, c: p.component == c,
        )

    async def get_vulnerabilities(self, filters: Optional[KnowledgeFilter] = None) -> list[VulnerabilityEntry]:
        return _apply(
            VULNERABILITIES, filters,
            text=lambda v: (v.title, v.title_ko, v.description, v.description_ko, v.cve_id),
            tags=lambda v: v.tags,
            component=lambda v, c: c in v.affected_components,
        )

    async def get_cloud_services(self, filters: Optional[KnowledgeFilter] = None) -> list[CloudService]:
        return _apply(
            CLOUD_SERVICES, filters,
            text=lambda s: (s.service_name, s.service_name_ko, s.component_type),
            # catalog entries carry no tags, so any tag filter excludes them
            tags=lambda s: (),
            component=lambda s, c: s.component_type == c,
        )
