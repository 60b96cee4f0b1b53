"""Shared fixtures: small hand-built topologies and a clean knowledge source per test."""

import pytest

from infraflow.knowledge.datasource import StaticDataSource, reset_knowledge_source, set_knowledge_source
from infraflow.models.topology import Connection, Topology, TopologyNode


def make_topology(*node_types: str, connections=(), tiers=None) -> Topology:
    """Build a topology with one node per type, ids n0..nN.

    `connections` are (source_index, target_index) pairs.
    """
    tiers = tiers or {}
    nodes = [
        TopologyNode(id=f"n{i}", type=t, label=t, tier=tiers.get(i))
        for i, t in enumerate(node_types)
    ]
    links = [Connection(source=f"n{a}", target=f"n{b}") for a, b in connections]
    return Topology(nodes=nodes, connections=links)


@pytest.fixture(autouse=True)
def static_knowledge_source():
    set_knowledge_source(StaticDataSource())
    yield
    reset_knowledge_source()


@pytest.fixture
def empty_topology() -> Topology:
    return Topology()


@pytest.fixture
def three_tier_topology() -> Topology:
    """internet → firewall → load-balancer → 2 web → app → db, with backup."""
    return make_topology(
        "internet", "firewall", "load-balancer", "web-server", "web-server",
        "app-server", "db-server", "backup",
        connections=[(0, 1), (1, 2), (2, 3), (2, 4), (3, 5), (4, 5), (5, 6), (6, 7)],
        tiers={0: "external", 1: "dmz", 2: "dmz", 3: "dmz", 4: "dmz", 5: "internal", 6: "data", 7: "data"},
    )


@pytest.fixture
def exposed_db_topology() -> Topology:
    """A database wired straight to the internet, nothing in between."""
    return make_topology("internet", "db-server", connections=[(0, 1)])
