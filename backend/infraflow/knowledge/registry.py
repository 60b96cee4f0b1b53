"""Detection registry — id → predicate lookup for the canonical anti-patterns.

Database rows cannot store functions, so stores persist only the rule id and
re-attach the predicate from here when a record is read back.
"""

from typing import Iterable, Optional

import structlog

from infraflow.knowledge.antipatterns import ANTI_PATTERNS
from infraflow.knowledge.models import AntiPattern, Detection
from infraflow.models.topology import Topology

logger = structlog.get_logger()


def _never(topology: Topology) -> bool:
    return False


class DetectionRegistry:
    """Maps anti-pattern ids to their detection predicates. Read-only after construction."""

    def __init__(self, antipatterns: Iterable[AntiPattern] = ANTI_PATTERNS):
        self._rules: dict[str, Detection] = {}
        for ap in antipatterns:
            # Later duplicates overwrite earlier ones
            self._rules[ap.id] = ap.detection

    def get(self, rule_id: str) -> Optional[Detection]:
        return self._rules.get(rule_id)

    def has(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def list(self) -> list[str]:
        return list(self._rules)

    def count(self) -> int:
        return len(self._rules)

    def run(self, rule_id: str, topology: Topology) -> bool:
        """Run one rule by id. Unknown ids never match."""
        detection = self._rules.get(rule_id)
        if detection is None:
            return False
        return detection(topology)

    def resolve(self, rule_id: str) -> Detection:
        """Registered predicate, or an always-false one when the id is unknown."""
        detection = self._rules.get(rule_id)
        if detection is None:
            logger.warning("detection_rule_missing", rule_id=rule_id)
            return _never
        return detection


# Module-level singleton
detection_registry = DetectionRegistry()
