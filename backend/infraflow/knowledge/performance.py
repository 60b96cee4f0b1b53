"""Performance profiles — latency/throughput envelopes per component type."""

from typing import Optional

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import PerformanceProfile

PERFORMANCE_PROFILES: tuple[PerformanceProfile, ...] = load_entries("performance.json", PerformanceProfile)


def profile_for_component(component: str) -> Optional[PerformanceProfile]:
    """The profile for `component`, or None when it is not profiled."""
    for profile in PERFORMANCE_PROFILES:
        if profile.component == component:
            return profile
    return None


def profiles_by_scaling_strategy(strategy: str) -> list[PerformanceProfile]:
    return [p for p in PERFORMANCE_PROFILES if p.scaling_strategy == strategy]
