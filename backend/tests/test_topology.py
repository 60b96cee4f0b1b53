"""
Unit tests for infraflow.models.topology

Tests for:
    - membership helpers used by detection predicates
    - direct connectivity checks
    - wire-format aliases
"""

from infraflow.models.topology import NODE_TYPES, Connection, Topology

from conftest import make_topology


# =============================================================================
# Membership
# =============================================================================

class TestMembership:
    """Tests for type membership and counting."""

    def test_empty_topology_has_nothing(self, empty_topology):
        assert empty_topology.present_types() == set()
        assert empty_topology.type_counts() == {}
        assert not empty_topology.has_type("firewall")
        assert empty_topology.count_type("web-server") == 0

    def test_type_counts_follow_first_appearance(self):
        """Counts keep the order in which each type first appears."""
        topo = make_topology("web-server", "db-server", "web-server", "cache")
        assert list(topo.type_counts()) == ["web-server", "db-server", "cache"]
        assert topo.type_counts()["web-server"] == 2

    def test_has_any_type(self):
        topo = make_topology("ldap-ad")
        assert topo.has_any_type(("sso", "ldap-ad"))
        assert not topo.has_any_type(("sso", "mfa"))

    def test_unknown_node_type_is_tolerated(self):
        """Unrecognized node types load but never match known groups."""
        topo = make_topology("quantum-router")
        assert "quantum-router" not in NODE_TYPES
        assert topo.has_type("quantum-router")

    def test_node_by_id(self):
        topo = make_topology("dns", "cdn")
        assert topo.node_by_id("n1").type == "cdn"
        assert topo.node_by_id("missing") is None


# =============================================================================
# Connectivity
# =============================================================================

class TestConnectivity:
    """Tests for is_directly_connected."""

    def test_direct_link_either_direction(self, exposed_db_topology):
        assert exposed_db_topology.is_directly_connected("db-server", "internet")
        assert exposed_db_topology.is_directly_connected("internet", "db-server")

    def test_indirect_path_is_not_direct(self):
        """Only single hops count; paths through other nodes do not."""
        topo = make_topology("internet", "firewall", "db-server", connections=[(0, 1), (1, 2)])
        assert not topo.is_directly_connected("internet", "db-server")

    def test_missing_type_is_never_connected(self):
        topo = make_topology("internet", connections=[])
        assert not topo.is_directly_connected("internet", "db-server")


# =============================================================================
# Wire format
# =============================================================================

class TestWireFormat:
    """Tests for JSON aliases accepted from the editor."""

    def test_flow_type_alias(self):
        conn = Connection.model_validate({"source": "a", "target": "b", "flowType": "encrypted"})
        assert conn.flow_type == "encrypted"

    def test_topology_from_json(self):
        topo = Topology.model_validate({
            "nodes": [{"id": "fw", "type": "firewall"}],
            "connections": [],
        })
        assert topo.nodes[0].label == ""
        assert topo.nodes[0].tier is None
