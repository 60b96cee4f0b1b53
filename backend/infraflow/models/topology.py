"""Topology models — the node/connection graph describing an infrastructure design.

Topologies are produced upstream (prompt parser, diagram editor) and only read
here. Endpoint ids are not cross-checked: callers supply well-formed graphs.
"""

from collections import Counter
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, Field


# ──────────────────────────────────────────────────────────────────────
# NODE TYPES
# ──────────────────────────────────────────────────────────────────────

SECURITY_TYPES = ("firewall", "waf", "ids-ips", "vpn-gateway", "nac", "dlp", "siem")
NETWORK_TYPES = ("router", "switch-l2", "switch-l3", "load-balancer", "sd-wan", "dns", "cdn")
COMPUTE_TYPES = ("web-server", "app-server", "db-server", "container", "vm", "kubernetes")
CLOUD_TYPES = ("aws-vpc", "azure-vnet", "gcp-network", "private-cloud")
STORAGE_TYPES = ("san-nas", "object-storage", "backup", "cache", "storage")
AUTH_TYPES = ("ldap-ad", "sso", "mfa", "iam")
TELECOM_TYPES = ("central-office", "base-station", "olt", "customer-premise", "idc")
WAN_TYPES = (
    "pe-router", "p-router", "mpls-network", "dedicated-line", "metro-ethernet",
    "corporate-internet", "vpn-service", "sd-wan-service", "private-5g",
    "core-network", "upf", "ring-network",
)
EXTERNAL_TYPES = ("user", "internet", "zone")

NODE_TYPES: frozenset[str] = frozenset(
    SECURITY_TYPES + NETWORK_TYPES + COMPUTE_TYPES + CLOUD_TYPES + STORAGE_TYPES
    + AUTH_TYPES + TELECOM_TYPES + WAN_TYPES + EXTERNAL_TYPES
)

TierType = Literal["external", "dmz", "internal", "data"]

FlowType = Literal[
    "request", "response", "sync", "blocked", "encrypted", "wan-link", "wireless", "tunnel",
]


class TopologyNode(BaseModel):
    """A single infrastructure component in the diagram."""

    id: str
    type: str  # One of NODE_TYPES; unknown kinds are tolerated and simply never match
    label: str = ""
    tier: Optional[TierType] = None
    zone: Optional[str] = None
    description: Optional[str] = None


class Connection(BaseModel):
    """A directed link between two nodes."""

    source: str
    target: str
    flow_type: Optional[FlowType] = Field(default=None, alias="flowType")
    label: Optional[str] = None
    bidirectional: bool = False

    model_config = {"populate_by_name": True}


class Topology(BaseModel):
    """Infrastructure topology under analysis (nodes + connections)."""

    name: Optional[str] = None
    nodes: list[TopologyNode] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)

    # ── Membership helpers (used by detection predicates) ──

    def present_types(self) -> set[str]:
        """Distinct node types appearing in the topology."""
        return {n.type for n in self.nodes}

    def has_type(self, node_type: str) -> bool:
        return any(n.type == node_type for n in self.nodes)

    def has_any_type(self, node_types: Iterable[str]) -> bool:
        wanted = set(node_types)
        return any(n.type in wanted for n in self.nodes)

    def nodes_of_type(self, node_type: str) -> list[TopologyNode]:
        return [n for n in self.nodes if n.type == node_type]

    def count_type(self, node_type: str) -> int:
        return sum(1 for n in self.nodes if n.type == node_type)

    def type_counts(self) -> dict[str, int]:
        """Node count per type, in first-appearance order."""
        return dict(Counter(n.type for n in self.nodes))

    def node_by_id(self, node_id: str) -> Optional[TopologyNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def is_directly_connected(self, type_a: str, type_b: str) -> bool:
        """True if any connection links a node of type_a with a node of type_b (either direction)."""
        ids_a = {n.id for n in self.nodes if n.type == type_a}
        ids_b = {n.id for n in self.nodes if n.type == type_b}
        if not ids_a or not ids_b:
            return False

        return any(
            (c.source in ids_a and c.target in ids_b) or (c.source in ids_b and c.target in ids_a)
            for c in self.connections
        )
