"""Knowledge data source — one async query interface over interchangeable backends.

Backends:
    StaticDataSource    in-memory filtering of the bundled knowledge tables
    DatabaseDataSource  SQLAlchemy async queries over the knowledge_* tables

Callers depend only on KnowledgeDataSource; the factory picks the backend.
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel

from infraflow.knowledge.models import (
    AntiPattern,
    ArchitecturePattern,
    CloudService,
    ComponentRelationship,
    FailureScenario,
    PerformanceProfile,
    VulnerabilityEntry,
)


class KnowledgeFilter(BaseModel):
    """Optional narrowing applied by every data-source query."""

    search: Optional[str] = None        # case-insensitive substring over text fields
    tags: Optional[list[str]] = None    # match when any tag is present
    component: Optional[str] = None     # component type equality
    is_active: bool = True


class KnowledgeDataSource(ABC):
    """Abstract knowledge backend.

    Contract:
        - Every getter accepts an optional KnowledgeFilter (None = no narrowing)
        - Returned records are the same frozen models the static tables hold
        - Anti-patterns always carry a callable detection predicate
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name for logging and the health endpoint."""
        ...

    async def close(self) -> None:
        """Release backend resources. No-op unless the backend holds connections."""
        return None

    @abstractmethod
    async def get_relationships(self, filters: Optional[KnowledgeFilter] = None) -> list[ComponentRelationship]:
        ...

    @abstractmethod
    async def get_patterns(self, filters: Optional[KnowledgeFilter] = None) -> list[ArchitecturePattern]:
        ...

    @abstractmethod
    async def get_antipatterns(self, filters: Optional[KnowledgeFilter] = None) -> list[AntiPattern]:
        ...

    @abstractmethod
    async def get_failures(self, filters: Optional[KnowledgeFilter] = None) -> list[FailureScenario]:
        ...

    @abstractmethod
    async def get_performance_profiles(self, filters: Optional[KnowledgeFilter] = None) -> list[PerformanceProfile]:
        ...

    @abstractmethod
    async def get_vulnerabilities(self, filters: Optional[KnowledgeFilter] = None) -> list[VulnerabilityEntry]:
        ...

    @abstractmethod
    async def get_cloud_services(self, filters: Optional[KnowledgeFilter] = None) -> list[CloudService]:
        ...
