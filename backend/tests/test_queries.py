"""
Unit tests for the knowledge query helpers

Tests for:
    - relationships.py, failures.py, performance.py
    - patterns.py: lookup and topology pattern detection
    - vulnerabilities.py: severity ordering
    - cloud_catalog.py: provider filters and deprecation warnings
"""

from infraflow.knowledge.cloud_catalog import (
    CLOUD_SERVICES,
    active_services,
    alternatives,
    cloud_services_for_component,
    deprecated_cloud_services,
    deprecation_warnings,
)
from infraflow.knowledge.failures import (
    FAILURE_SCENARIOS,
    failures_by_likelihood,
    failures_for_component,
    high_impact_failures,
)
from infraflow.knowledge.patterns import detect_patterns, pattern_by_id, patterns_by_complexity
from infraflow.knowledge.performance import profile_for_component, profiles_by_scaling_strategy
from infraflow.knowledge.relationships import (
    conflicts,
    mandatory_dependencies,
    recommendations,
    related_components,
    relationships_for_component,
)
from infraflow.knowledge.vulnerabilities import SEVERITY_ORDER, vulnerabilities_by_severity, vulnerabilities_for_component

from conftest import make_topology


# =============================================================================
# Relationships
# =============================================================================

class TestRelationships:
    """Tests for relationship lookups by component type."""

    def test_either_endpoint_matches(self):
        rels = relationships_for_component("firewall")
        assert rels
        assert all("firewall" in (r.source, r.target) for r in rels)

    def test_mandatory_dependencies_are_outgoing_requires(self):
        deps = mandatory_dependencies("db-server")
        assert {r.target for r in deps} >= {"firewall", "backup"}
        assert all(r.source == "db-server" and r.relationship_type == "requires" for r in deps)

    def test_recommendations_and_conflicts(self):
        assert "waf" in {r.target for r in recommendations("web-server")}
        assert "internet" in {r.target for r in conflicts("db-server")}

    def test_related_components_first_relationship_wins(self):
        related = related_components("web-server")
        names = [r.component for r in related]
        assert len(names) == len(set(names))
        firewall = next(r for r in related if r.component == "firewall")
        assert firewall.relationship == "requires"

    def test_unknown_component(self):
        assert relationships_for_component("quantum-router") == []
        assert related_components("quantum-router") == []


# =============================================================================
# Failures & performance
# =============================================================================

class TestFailures:
    """Tests for failure scenario lookups."""

    def test_for_component_includes_affected(self):
        for scenario in failures_for_component("db-server"):
            assert scenario.component == "db-server" or "db-server" in scenario.affected_components

    def test_high_impact(self):
        high = high_impact_failures()
        assert high
        assert {f.impact for f in high} <= {"service-down", "data-loss"}

    def test_by_likelihood_partitions_table(self):
        total = sum(len(failures_by_likelihood(l)) for l in ("high", "medium", "low"))
        assert total == len(FAILURE_SCENARIOS)


class TestPerformance:
    """Tests for performance profile lookups."""

    def test_profile_for_component(self):
        profile = profile_for_component("cache")
        assert profile is not None
        assert profile.latency_range.min < profile.latency_range.max

    def test_missing_profile(self):
        assert profile_for_component("quantum-router") is None

    def test_by_scaling_strategy(self):
        for profile in profiles_by_scaling_strategy("horizontal"):
            assert profile.scaling_strategy == "horizontal"


# =============================================================================
# Patterns
# =============================================================================

class TestPatterns:
    """Tests for architecture pattern lookup and detection."""

    def test_pattern_by_id(self):
        assert pattern_by_id("PAT-001").id == "PAT-001"
        assert pattern_by_id("PAT-999") is None

    def test_by_complexity_is_sorted_and_bounded(self):
        simple = patterns_by_complexity(2)
        assert simple
        assert all(p.complexity <= 2 for p in simple)
        assert [p.complexity for p in simple] == sorted(p.complexity for p in simple)

    def test_three_tier_detected(self, three_tier_topology):
        ids = [p.id for p in detect_patterns(three_tier_topology)]
        assert "PAT-001" in ids
        assert "PAT-004" in ids  # LB with two web servers

    def test_min_count_enforced(self):
        """A single web server does not satisfy the two-web-server requirement."""
        topo = make_topology("load-balancer", "web-server")
        assert "PAT-004" not in [p.id for p in detect_patterns(topo)]

    def test_detected_sorted_by_complexity(self, three_tier_topology):
        complexities = [p.complexity for p in detect_patterns(three_tier_topology)]
        assert complexities == sorted(complexities)

    def test_empty_topology(self, empty_topology):
        assert detect_patterns(empty_topology) == []


# =============================================================================
# Vulnerabilities
# =============================================================================

class TestVulnerabilities:
    """Tests for vulnerability lookups."""

    def test_most_severe_first(self):
        vulns = vulnerabilities_for_component("db-server")
        keys = [(SEVERITY_ORDER[v.severity], -(v.cvss_score or 0)) for v in vulns]
        assert keys == sorted(keys)
        assert vulns[0].severity == "critical"

    def test_multi_component_entries(self):
        assert "VULN-FW-001" in [v.id for v in vulnerabilities_for_component("vpn-gateway")]

    def test_by_severity(self):
        assert all(v.severity == "low" for v in vulnerabilities_by_severity("low"))


# =============================================================================
# Cloud catalog
# =============================================================================

class TestCloudCatalog:
    """Tests for cloud service lookups and deprecation warnings."""

    def test_provider_filter(self):
        aws = cloud_services_for_component("load-balancer", provider="aws")
        assert aws
        assert all(s.provider == "aws" for s in aws)
        assert len(cloud_services_for_component("load-balancer")) > len(aws)

    def test_deprecated_services(self):
        ids = [s.id for s in deprecated_cloud_services()]
        assert {"CS-LB-AWS-002", "CS-CDN-AZ-002", "CS-IAM-AZ-002"} <= set(ids)

    def test_active_services_span_providers(self):
        services = active_services("load-balancer")
        assert {s.provider for s in services} == {"aws", "azure", "gcp"}
        assert all(s.status == "active" for s in services)

    def test_alternatives_for_deprecated(self):
        classic = next(s for s in CLOUD_SERVICES if s.id == "CS-LB-AWS-002")
        alts = alternatives(classic)
        assert alts
        assert all(s.provider == "aws" and s.status == "active" for s in alts)

    def test_active_service_has_no_alternatives(self):
        current = next(s for s in CLOUD_SERVICES if s.id == "CS-LB-AWS-001")
        assert alternatives(current) == []

    def test_deprecation_warnings_for_present_types(self):
        notices = deprecation_warnings(make_topology("load-balancer", "web-server"))
        assert [n.service.id for n in notices] == ["CS-LB-AWS-002"]
        assert notices[0].urgency == "high"
        assert "애플리케이션/네트워크 로드 밸런서" in notices[0].message_ko

    def test_no_warnings_without_matching_types(self, empty_topology):
        assert deprecation_warnings(empty_topology) == []
