"""
Unit tests for anti-pattern detection

Tests for:
    - antipatterns.py: canonical predicates on hand-built topologies
    - evaluator.py: failure isolation and ordering
    - registry.py: id -> predicate lookup
"""

import pytest

from infraflow.knowledge.antipatterns import (
    ANTI_PATTERNS,
    antipatterns_by_severity,
    critical_antipatterns,
    detect_antipatterns,
)
from infraflow.knowledge.evaluator import detect_violations
from infraflow.knowledge.registry import DetectionRegistry, detection_registry

from conftest import make_topology


def _ids(antipatterns):
    return [ap.id for ap in antipatterns]


# =============================================================================
# Canonical set
# =============================================================================

class TestCanonicalSet:
    """Tests for the shape of the bundled anti-pattern table."""

    def test_ids_are_unique(self):
        ids = _ids(ANTI_PATTERNS)
        assert len(ids) == len(set(ids)) == 22

    def test_every_entry_is_cited(self):
        for ap in ANTI_PATTERNS:
            assert ap.trust.sources, ap.id
            assert 0 < ap.confidence <= 1

    def test_severity_helpers(self):
        critical = critical_antipatterns()
        assert critical
        assert all(ap.severity == "critical" for ap in critical)
        assert critical == antipatterns_by_severity("critical")

    def test_detection_not_serialized(self):
        """Predicates never leak into JSON output."""
        dumped = ANTI_PATTERNS[0].model_dump(mode="json")
        assert "detection" not in dumped
        assert dumped["id"] == "AP-SEC-001"


# =============================================================================
# Detection predicates
# =============================================================================

class TestDetection:
    """Tests for individual predicates on small topologies."""

    def test_empty_topology_triggers_nothing(self, empty_topology):
        assert detect_antipatterns(empty_topology) == []

    def test_db_exposed_to_internet(self, exposed_db_topology):
        ids = _ids(detect_antipatterns(exposed_db_topology))
        assert "AP-SEC-001" in ids
        assert "AP-SEC-002" in ids  # no firewall
        assert "AP-HA-002" in ids   # no backup

    def test_unconnected_firewall_does_not_clear_exposure(self):
        """The rule checks the direct link, not mere firewall presence."""
        topo = make_topology("db-server", "internet", "firewall", connections=[(0, 1)])
        ids = _ids(detect_antipatterns(topo))
        assert "AP-SEC-001" in ids
        assert "AP-SEC-002" not in ids

    def test_firewall_in_between_clears_exposure(self):
        topo = make_topology("internet", "firewall", "db-server", connections=[(0, 1), (1, 2)])
        ids = _ids(detect_antipatterns(topo))
        assert "AP-SEC-001" not in ids
        assert "AP-SEC-002" not in ids

    def test_single_load_balancer_in_front_of_web_pair(self, three_tier_topology):
        assert "AP-HA-001" in _ids(detect_antipatterns(three_tier_topology))

    def test_web_pair_without_load_balancer(self):
        topo = make_topology("web-server", "web-server")
        assert "AP-PERF-003" in _ids(detect_antipatterns(topo))

    def test_web_straight_to_db(self):
        topo = make_topology("web-server", "db-server", connections=[(0, 1)])
        ids = _ids(detect_antipatterns(topo))
        assert "AP-PERF-004" in ids
        assert "AP-ARCH-002" in ids

    def test_db_in_dmz_is_unprotected(self):
        topo = make_topology("db-server", tiers={0: "dmz"})
        assert "AP-SEC-006" in _ids(detect_antipatterns(topo))

    def test_flat_network(self):
        topo = make_topology("web-server", "app-server", "db-server", tiers={0: "internal", 1: "internal", 2: "internal"})
        ids = _ids(detect_antipatterns(topo))
        assert "AP-ARCH-001" in ids
        assert "AP-ARCH-005" in ids  # one of each, nothing to scale with

    def test_oversized_without_orchestration(self):
        topo = make_topology(*["vm"] * 16)
        assert "AP-ARCH-003" in _ids(detect_antipatterns(topo))

    def test_detection_is_deterministic(self, three_tier_topology):
        assert _ids(detect_antipatterns(three_tier_topology)) == _ids(detect_antipatterns(three_tier_topology))


# =============================================================================
# Evaluator
# =============================================================================

class TestEvaluator:
    """Tests for detect_violations failure isolation."""

    def test_raising_predicate_counts_as_no_match(self, exposed_db_topology):
        """One broken rule never takes the whole pass down."""
        def boom(topology):
            raise RuntimeError("broken rule")

        broken = ANTI_PATTERNS[0].model_copy(update={"id": "AP-TEST-001", "detection": boom})
        violations = detect_violations(exposed_db_topology, [broken, ANTI_PATTERNS[0]])
        assert _ids(violations) == ["AP-SEC-001"]

    def test_preserves_input_order(self, exposed_db_topology):
        reversed_set = list(reversed(ANTI_PATTERNS))
        ids = _ids(detect_violations(exposed_db_topology, reversed_set))
        assert ids == [ap.id for ap in reversed_set if ap.id in ids]

    def test_empty_candidate_set(self, exposed_db_topology):
        assert detect_violations(exposed_db_topology, []) == []


# =============================================================================
# Registry
# =============================================================================

class TestDetectionRegistry:
    """Tests for id-based predicate lookup."""

    def test_covers_canonical_set(self):
        assert detection_registry.count() == len(ANTI_PATTERNS)
        assert detection_registry.list() == _ids(ANTI_PATTERNS)

    @pytest.mark.parametrize("ap", ANTI_PATTERNS, ids=lambda ap: ap.id)
    def test_run_matches_predicate(self, ap, exposed_db_topology, three_tier_topology):
        for topo in (exposed_db_topology, three_tier_topology):
            assert detection_registry.run(ap.id, topo) == ap.detection(topo)

    def test_unknown_id_never_matches(self, exposed_db_topology):
        assert not detection_registry.has("AP-NOPE-999")
        assert detection_registry.get("AP-NOPE-999") is None
        assert detection_registry.run("AP-NOPE-999", exposed_db_topology) is False

    def test_resolve_unknown_id_degrades(self, exposed_db_topology):
        predicate = detection_registry.resolve("AP-NOPE-999")
        assert predicate(exposed_db_topology) is False

    def test_later_duplicate_wins(self, exposed_db_topology):
        first = ANTI_PATTERNS[0]
        override = first.model_copy(update={"detection": lambda topology: False})
        registry = DetectionRegistry([first, override])
        assert registry.count() == 1
        assert registry.run(first.id, exposed_db_topology) is False
