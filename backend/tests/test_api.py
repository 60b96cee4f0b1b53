"""
API tests for the InfraFlow HTTP surface

Tests for:
    - GET  /api/v1/health
    - GET  /api/v1/knowledge/{category}
    - POST /api/v1/analyze
    - POST /api/v1/capacity
    - POST /api/v1/compliance
"""

from fastapi.testclient import TestClient

from infraflow.knowledge.relationships import RELATIONSHIPS
from infraflow.main import app

client = TestClient(app)


EXPOSED_DB = {
    "nodes": [
        {"id": "inet", "type": "internet", "label": "Internet", "tier": "external"},
        {"id": "db", "type": "db-server", "label": "Primary DB", "tier": "data"},
    ],
    "connections": [{"source": "inet", "target": "db", "flowType": "request"}],
}

WEB_TIER = {
    "nodes": [
        {"id": "lb", "type": "load-balancer"},
        {"id": "web1", "type": "web-server"},
        {"id": "web2", "type": "web-server"},
    ],
    "connections": [
        {"source": "lb", "target": "web1"},
        {"source": "lb", "target": "web2"},
    ],
}


# =============================================================================
# Health & root
# =============================================================================

class TestHealth:
    """Tests for service metadata endpoints."""

    def test_health(self):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["knowledge_source"] == "static"
        assert body["dependencies"]["knowledge_source"]["status"] == "healthy"

    def test_root(self):
        body = client.get("/").json()
        assert body["name"] == "InfraFlow Knowledge Engine"
        assert body["health"] == "/api/v1/health"


# =============================================================================
# Knowledge browsing
# =============================================================================

class TestKnowledgeList:
    """Tests for GET /knowledge/{category}."""

    def test_list_relationships(self):
        response = client.get("/api/v1/knowledge/relationships")
        assert response.status_code == 200
        body = response.json()
        assert body["category"] == "relationships"
        assert body["count"] == len(RELATIONSHIPS)

    def test_antipatterns_omit_detection(self):
        entries = client.get("/api/v1/knowledge/antipatterns").json()["entries"]
        assert entries
        assert all("detection" not in e for e in entries)

    def test_filters_pass_through(self):
        response = client.get(
            "/api/v1/knowledge/cloud-services",
            params={"component": "load-balancer", "search": "classic"},
        )
        entries = response.json()["entries"]
        assert [e["id"] for e in entries] == ["CS-LB-AWS-002"]

    def test_repeated_tags(self):
        response = client.get("/api/v1/knowledge/failures", params=[("tags", "dns"), ("tags", "nope")])
        entries = response.json()["entries"]
        assert entries
        assert all("dns" in e["tags"] for e in entries)

    def test_unknown_category(self):
        response = client.get("/api/v1/knowledge/recipes")
        assert response.status_code == 404
        assert "relationships" in response.json()["detail"]


# =============================================================================
# Analysis
# =============================================================================

class TestAnalyze:
    """Tests for POST /analyze."""

    def test_exposed_database(self):
        response = client.post("/api/v1/analyze", json={"topology": EXPOSED_DB})
        assert response.status_code == 200
        body = response.json()

        violation_ids = [v["id"] for v in body["violations"]]
        assert "AP-SEC-001" in violation_ids
        assert all("detection" not in v for v in body["violations"])

        assert "REL-SEC-004" in [r["id"] for r in body["relationships"]]
        assert "REL-SEC-001" in [s["id"] for s in body["suggestions"]]
        assert body["prompt_section"].startswith("## 인프라 지식 기반 가이드")

    def test_empty_topology(self):
        body = client.post("/api/v1/analyze", json={"topology": {"nodes": [], "connections": []}}).json()
        assert body["violations"] == []
        assert body["prompt_section"] == ""
        assert body["capacity"]["max_rps"] == 0

    def test_deprecations_and_patterns(self):
        body = client.post("/api/v1/analyze", json={"topology": WEB_TIER}).json()
        assert [d["service"]["id"] for d in body["deprecations"]] == ["CS-LB-AWS-002"]
        assert "PAT-004" in [p["id"] for p in body["patterns"]]

    def test_min_confidence_bounds(self):
        response = client.post("/api/v1/analyze", json={"topology": EXPOSED_DB, "min_confidence": 1.5})
        assert response.status_code == 422


# =============================================================================
# Capacity
# =============================================================================

class TestCapacity:
    """Tests for POST /capacity."""

    def test_estimate_only(self):
        body = client.post("/api/v1/capacity", json={"topology": WEB_TIER}).json()
        assert body["estimate"]["max_rps"] == 4000
        assert body["estimate"]["current_tier"] == "medium"
        assert body["sizing"] == []

    def test_with_target_tier(self):
        body = client.post("/api/v1/capacity", json={"topology": WEB_TIER, "target_tier": "large"}).json()
        assert [s["component_type"] for s in body["sizing"]] == ["load-balancer", "web-server"]

    def test_unknown_tier_rejected(self):
        response = client.post("/api/v1/capacity", json={"topology": WEB_TIER, "target_tier": "galactic"})
        assert response.status_code == 422


# =============================================================================
# Compliance
# =============================================================================

class TestCompliance:
    """Tests for POST /compliance."""

    def test_web_tier_against_ecommerce(self):
        body = client.post("/api/v1/compliance", json={"topology": WEB_TIER, "industry": "ecommerce"}).json()
        assert body["industry"] == "ecommerce"
        assert body["is_compliant"] is False
        assert body["passed"] == []
        assert len(body["failed"]) == 6
        assert body["missing_components"] == ["firewall", "waf", "cdn", "cache", "db-server", "backup"]
        assert [ap["id"] for ap in body["antipatterns"]][0] == "EC-AP-001"

    def test_unknown_industry_rejected(self):
        response = client.post("/api/v1/compliance", json={"topology": WEB_TIER, "industry": "casino"})
        assert response.status_code == 422
