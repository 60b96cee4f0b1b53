"""Failure scenarios — how each component type fails and what to do about it."""

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import FailureScenario

FAILURE_SCENARIOS: tuple[FailureScenario, ...] = load_entries("failures.json", FailureScenario)

HIGH_IMPACT = ("service-down", "data-loss")


def failures_for_component(component: str) -> list[FailureScenario]:
    """Scenarios that originate in `component` or list it as affected."""
    return [
        f for f in FAILURE_SCENARIOS
        if f.component == component or component in f.affected_components
    ]


def high_impact_failures() -> list[FailureScenario]:
    return [f for f in FAILURE_SCENARIOS if f.impact in HIGH_IMPACT]


def failures_by_likelihood(likelihood: str) -> list[FailureScenario]:
    return [f for f in FAILURE_SCENARIOS if f.likelihood == likelihood]
