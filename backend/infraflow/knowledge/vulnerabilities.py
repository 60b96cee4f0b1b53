"""Known vulnerabilities (CVE-backed) mapped to the component types they affect."""

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import VulnerabilityEntry

VULNERABILITIES: tuple[VulnerabilityEntry, ...] = load_entries("vulnerabilities.json", VulnerabilityEntry)

SEVERITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def vulnerabilities_for_component(component: str) -> list[VulnerabilityEntry]:
    """Vulnerabilities affecting `component`, most severe first."""
    matches = [v for v in VULNERABILITIES if component in v.affected_components]
    return sorted(matches, key=lambda v: (SEVERITY_ORDER[v.severity], -(v.cvss_score or 0.0)))


def vulnerabilities_by_severity(severity: str) -> list[VulnerabilityEntry]:
    return [v for v in VULNERABILITIES if v.severity == severity]
