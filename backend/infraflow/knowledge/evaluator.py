"""Anti-pattern evaluator — runs detection predicates against a topology.

Deterministic and failure-isolated: a predicate that raises is logged and
counted as non-matching, so one broken rule never kills the whole pass.

Usage:
    violations = detect_violations(topology, ANTI_PATTERNS)
"""

from typing import Iterable

import structlog

from infraflow.knowledge.models import AntiPattern
from infraflow.models.topology import Topology

logger = structlog.get_logger()


def detect_violations(topology: Topology, antipatterns: Iterable[AntiPattern]) -> list[AntiPattern]:
    """Return the anti-patterns whose predicate fires, preserving input order.

    Args:
        topology: Topology under analysis
        antipatterns: Candidate anti-patterns (canonical set or a data-source subset)

    Returns:
        Matching anti-patterns. Never raises.
    """
    violations: list[AntiPattern] = []

    for ap in antipatterns:
        try:
            matched = bool(ap.detection(topology))
        except Exception as e:
            logger.warning(
                "antipattern_detection_failed",
                antipattern_id=ap.id,
                error=str(e),
            )
            matched = False

        if matched:
            violations.append(ap)

    return violations
