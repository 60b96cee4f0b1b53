"""Architecture patterns — recognizable reference topologies and how they evolve.

A pattern is detected when every required component type is present with at
least its minimum node count. Detection results are ordered simplest first.
"""

from typing import Optional

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import ArchitecturePattern
from infraflow.models.topology import Topology

ARCHITECTURE_PATTERNS: tuple[ArchitecturePattern, ...] = load_entries("patterns.json", ArchitecturePattern)


def pattern_by_id(pattern_id: str) -> Optional[ArchitecturePattern]:
    for pattern in ARCHITECTURE_PATTERNS:
        if pattern.id == pattern_id:
            return pattern
    return None


def patterns_by_complexity(max_complexity: int) -> list[ArchitecturePattern]:
    """Patterns no more complex than `max_complexity`, simplest first."""
    matches = [p for p in ARCHITECTURE_PATTERNS if p.complexity <= max_complexity]
    return sorted(matches, key=lambda p: p.complexity)


def detect_patterns(topology: Topology) -> list[ArchitecturePattern]:
    """Patterns whose required components the topology satisfies.

    Args:
        topology: Topology under analysis

    Returns:
        Matching patterns sorted by complexity (stable, table order within a level)
    """
    counts = topology.type_counts()

    matches = [
        p for p in ARCHITECTURE_PATTERNS
        if all(counts.get(req.type, 0) >= req.min_count for req in p.required_components)
    ]
    return sorted(matches, key=lambda p: p.complexity)
