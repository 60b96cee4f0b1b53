"""Capacity estimator — throughput ceiling, bottlenecks and sizing per traffic tier.

Every component's capacity is normalized to the *small* tier's single-instance
ceiling, multiplied by how many nodes of that type the topology holds. The
architecture can only go as fast as its weakest covered component type.
"""

from typing import Optional

import structlog

from infraflow.knowledge.loader import KnowledgeDataError, load_entries
from infraflow.knowledge.models import (
    TRAFFIC_TIERS,
    Bottleneck,
    CapacityEstimate,
    NumericRange,
    SizingEntry,
    SizingRecommendation,
    TrafficProfile,
)
from infraflow.models.topology import Topology

logger = structlog.get_logger()

SizingMatrix = dict[str, dict[str, SizingEntry]]

BASELINE_TIER = "small"
BOTTLENECK_FACTOR = 2

# Minimum effective RPS for each tier, checked top-down
TIER_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("enterprise", 100_000),
    ("large", 10_000),
    ("medium", 1_000),
)

# RPS needed before the architecture counts as able to handle a tier
CAN_HANDLE_THRESHOLDS: dict[str, int] = {
    "small": 1_000,
    "medium": 10_000,
    "large": 100_000,
    "enterprise": 1_000_000,
}


# ──────────────────────────────────────────────────────────────────────
# REFERENCE DATA
# ──────────────────────────────────────────────────────────────────────

TRAFFIC_PROFILES: tuple[TrafficProfile, ...] = (
    TrafficProfile(
        tier="small", name="Small", name_ko="소규모",
        description="Small websites, internal tools, early startups",
        description_ko="소규모 웹사이트, 내부 도구, 초기 스타트업",
        requests_per_second=NumericRange(min=1, max=1_000),
        concurrent_users=NumericRange(min=1, max=500),
    ),
    TrafficProfile(
        tier="medium", name="Medium", name_ko="중규모",
        description="Growing SaaS, mid-size e-commerce, regional services",
        description_ko="성장하는 SaaS, 중견 전자상거래, 지역 서비스",
        requests_per_second=NumericRange(min=1_000, max=10_000),
        concurrent_users=NumericRange(min=500, max=10_000),
    ),
    TrafficProfile(
        tier="large", name="Large", name_ko="대규모",
        description="Enterprise platforms, national services, popular apps",
        description_ko="엔터프라이즈 플랫폼, 전국 서비스, 인기 앱",
        requests_per_second=NumericRange(min=10_000, max=100_000),
        concurrent_users=NumericRange(min=10_000, max=100_000),
    ),
    TrafficProfile(
        tier="enterprise", name="Enterprise", name_ko="엔터프라이즈",
        description="Hyperscale platforms, global services, 100K+ RPS",
        description_ko="하이퍼스케일 플랫폼, 글로벌 서비스, 100K+ RPS",
        requests_per_second=NumericRange(min=100_000, max=1_000_000),
        concurrent_users=NumericRange(min=100_000, max=1_000_000),
    ),
)


def _build_matrix(entries: tuple[SizingEntry, ...]) -> SizingMatrix:
    """Index sizing rows by component type and tier, checking each row is complete."""
    matrix: SizingMatrix = {}
    for entry in entries:
        matrix.setdefault(entry.component_type, {})[entry.tier] = entry

    for component, row in matrix.items():
        missing = [t for t in TRAFFIC_TIERS if t not in row]
        if missing:
            raise KnowledgeDataError(f"sizing.json: '{component}' is missing tiers {missing}")

        ceilings = [row[t].max_rps for t in TRAFFIC_TIERS]
        if ceilings != sorted(ceilings):
            raise KnowledgeDataError(f"sizing.json: '{component}' max_rps decreases across tiers {ceilings}")

    return matrix


SIZING_MATRIX: SizingMatrix = _build_matrix(load_entries("sizing.json", SizingEntry))


# ──────────────────────────────────────────────────────────────────────
# ESTIMATION
# ──────────────────────────────────────────────────────────────────────

def estimate_capacity(topology: Topology, sizing: Optional[SizingMatrix] = None) -> CapacityEstimate:
    """Estimate the throughput ceiling of a topology.

    Args:
        topology: Topology under analysis
        sizing: Sizing matrix to use (defaults to SIZING_MATRIX)

    Returns:
        CapacityEstimate with bottlenecks sorted by max_rps ascending.
        An empty or uncovered topology yields max_rps 0 and tier "small".
    """
    sizing = SIZING_MATRIX if sizing is None else sizing

    totals: dict[str, tuple[int, int]] = {}
    for node_type, count in topology.type_counts().items():
        row = sizing.get(node_type)
        if row is None:
            continue
        totals[node_type] = (row[BASELINE_TIER].max_rps * count, count)

    effective_rps = min((total for total, _ in totals.values()), default=0)

    bottlenecks = [
        _bottleneck(node_type, total, count)
        for node_type, (total, count) in totals.items()
        if total <= effective_rps * BOTTLENECK_FACTOR
    ]
    bottlenecks.sort(key=lambda b: b.max_rps)

    estimate = CapacityEstimate(
        current_tier=_tier_for(effective_rps),
        max_rps=effective_rps,
        bottlenecks=bottlenecks,
        can_handle={tier: effective_rps >= rps for tier, rps in CAN_HANDLE_THRESHOLDS.items()},
    )

    logger.info(
        "capacity_estimated",
        covered_types=len(totals),
        max_rps=estimate.max_rps,
        current_tier=estimate.current_tier,
        bottlenecks=len(bottlenecks),
    )
    return estimate


def find_bottlenecks(topology: Topology) -> list[Bottleneck]:
    return estimate_capacity(topology).bottlenecks


def recommend_sizing(topology: Topology, tier: str) -> list[SizingRecommendation]:
    """Sizing guidance at `tier` for every covered component type in the topology."""
    if tier not in TRAFFIC_TIERS:
        raise ValueError(f"Unknown traffic tier '{tier}'. Expected one of {', '.join(TRAFFIC_TIERS)}")

    recommendations = []
    for node_type in topology.type_counts():
        row = SIZING_MATRIX.get(node_type)
        if row is None:
            continue
        entry = row[tier]
        recommendations.append(SizingRecommendation(
            component_type=node_type,
            recommended=entry.recommended,
            minimum=entry.minimum,
            scaling_notes=entry.scaling_notes,
            scaling_notes_ko=entry.scaling_notes_ko,
            estimated_monthly_cost=entry.estimated_monthly_cost,
        ))
    return recommendations


def traffic_profiles() -> list[TrafficProfile]:
    return list(TRAFFIC_PROFILES)


def _bottleneck(node_type: str, total: int, count: int) -> Bottleneck:
    target = count * 2
    return Bottleneck(
        component_type=node_type,
        reason=f"Limited to ~{total:,} RPS with {count} instance(s)",
        reason_ko=f"{count}개 인스턴스로 약 {total:,} RPS 제한",
        max_rps=total,
        recommendation=f"Scale to {target} instances or upgrade specs",
        recommendation_ko=f"{target}개 인스턴스로 확장하거나 사양 업그레이드",
    )


def _tier_for(rps: int) -> str:
    for tier, threshold in TIER_THRESHOLDS:
        if rps >= threshold:
            return tier
    return "small"
