"""Industry presets — compliance frameworks and advisories per industry sector.

Four sectors (financial, healthcare, government, ecommerce), each with the
compliance controls it answers to, the components those controls require,
extra relationships and industry anti-patterns. Industry anti-patterns are
advisory: they carry a detection hint, not a predicate.

Usage:
    result = check_compliance(topology, "financial")
    for rule in result.failed:
        ...
"""

from typing import Iterable, Union

import structlog

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import (
    ComplianceResult,
    ComplianceRule,
    IndustryAntiPattern,
    IndustryPreset,
)
from infraflow.models.topology import Topology

logger = structlog.get_logger()

INDUSTRY_PRESETS: dict[str, IndustryPreset] = {
    p.id: p for p in load_entries("industry_presets.json", IndustryPreset)
}


def get_preset(industry: str) -> IndustryPreset:
    """Look up a preset.

    Raises:
        ValueError: unknown industry
    """
    preset = INDUSTRY_PRESETS.get(industry)
    if preset is None:
        raise ValueError(f"Unknown industry '{industry}'. Expected one of: {', '.join(INDUSTRY_PRESETS)}")
    return preset


def get_required_components(industry: str) -> tuple[str, ...]:
    return get_preset(industry).required_components


def compliance_rules(industry: str) -> list[ComplianceRule]:
    """Every rule of every framework the industry answers to, in framework order."""
    return [rule for fw in get_preset(industry).compliance for rule in fw.requirements]


def check_compliance(
    topology_or_types: Union[Topology, Iterable[str]],
    industry: str,
) -> ComplianceResult:
    """Split an industry's compliance rules by whether their components are present.

    A rule passes only when every one of its required components appears at
    least once. Presence is all that is checked, not wiring.

    Args:
        topology_or_types: Topology under analysis, or the component types present
        industry: One of the preset ids

    Returns:
        Passed and failed rules in framework order, plus the required
        components the topology lacks

    Raises:
        ValueError: unknown industry
    """
    if isinstance(topology_or_types, Topology):
        present = topology_or_types.present_types()
    else:
        present = set(topology_or_types)

    preset = get_preset(industry)
    passed: list[ComplianceRule] = []
    failed: list[ComplianceRule] = []
    for rule in compliance_rules(industry):
        if all(c in present for c in rule.required_components):
            passed.append(rule)
        else:
            failed.append(rule)

    missing = [c for c in preset.required_components if c not in present]

    logger.info(
        "compliance_checked",
        industry=industry,
        passed=len(passed),
        failed=len(failed),
    )
    return ComplianceResult(industry=preset.id, passed=passed, failed=failed, missing_components=missing)


def get_industry_antipatterns(industry: str) -> tuple[IndustryAntiPattern, ...]:
    return get_preset(industry).antipatterns
