"""Context enricher — matches knowledge against a topology and renders it for prompts.

Two stages:
    1. enrich_context() picks the relationships, missing components, anti-pattern
       violations and failure risks relevant to the node types in a topology.
    2. build_knowledge_prompt_section() renders that result as a trust-tiered
       text block for direct inclusion in an LLM system prompt.

Both stages are pure and deterministic.
"""

from typing import Iterable, Optional

import structlog

from infraflow.knowledge.evaluator import detect_violations
from infraflow.knowledge.models import (
    AntiPattern,
    ComponentRelationship,
    EnrichedKnowledge,
    FailureScenario,
)
from infraflow.models.topology import Topology

logger = structlog.get_logger()

DEFAULT_MIN_CONFIDENCE = 0.5
OFFICIAL_CONFIDENCE_THRESHOLD = 0.85
MAX_RISKS = 5

IMPACT_ORDER = {"service-down": 0, "data-loss": 1, "security-breach": 2, "degraded": 3}
SEVERITY_ORDER = {"critical": 0, "high": 1, "medium": 2}

SEVERITY_ICONS = {"critical": "🔴", "high": "🟠", "medium": "🟡"}
IMPACT_ICONS = {"service-down": "🔴", "data-loss": "🟣", "security-breach": "🔶"}

PRIORITY_RULES = (
    "1. 공식 표준 출처의 가이드를 최우선으로 적용하세요.",
    "2. 검증된 실무 가이드는 공식 표준과 충돌하지 않는 범위에서 참고하세요.",
    "3. 미검증 사용자 기여 내용은 참고만 하고, 의사결정의 근거로 사용하지 마세요.",
)


# ──────────────────────────────────────────────────────────────────────
# STAGE A: ENRICHMENT
# ──────────────────────────────────────────────────────────────────────

def enrich_context(
    topology: Topology,
    relationships: Iterable[ComponentRelationship],
    antipatterns: Optional[Iterable[AntiPattern]] = None,
    failures: Optional[Iterable[FailureScenario]] = None,
) -> EnrichedKnowledge:
    """Collect the knowledge relevant to a topology.

    Args:
        topology: Topology under analysis
        relationships: Relationship table to match against present node types
        antipatterns: Optional anti-pattern set; violations stay empty without it
        failures: Optional failure scenarios; risks stay empty without them

    Returns:
        EnrichedKnowledge with de-duplicated relationships and ordered suggestions
    """
    present = topology.present_types()
    rels = [r for r in relationships if r.confidence >= DEFAULT_MIN_CONFIDENCE]

    relevant = [
        r for r in rels
        if r.relationship_type != "conflicts" and r.source in present and r.target in present
    ]
    conflicts = [
        r for r in rels
        if r.relationship_type == "conflicts" and r.source in present and r.target in present
    ]

    violations = detect_violations(topology, antipatterns) if antipatterns is not None else []

    enriched = EnrichedKnowledge(
        relationships=_dedup(relevant + conflicts),
        violations=violations,
        suggestions=_sort_suggestions(_dedup(_find_suggestions(present, rels))),
        risks=_find_risks(present, failures),
    )

    logger.info(
        "context_enriched",
        node_types=len(present),
        relationships=len(enriched.relationships),
        suggestions=len(enriched.suggestions),
        violations=len(enriched.violations),
        risks=len(enriched.risks),
    )
    return enriched


def _find_suggestions(present: set[str], rels: list[ComponentRelationship]) -> list[ComponentRelationship]:
    """requires/recommends edges whose far side is missing from the topology."""
    suggestions = []

    for rel in rels:
        if rel.relationship_type not in ("requires", "recommends"):
            continue

        if rel.source in present and rel.target not in present:
            suggestions.append(rel)

        if rel.direction == "bidirectional" and rel.target in present and rel.source not in present:
            suggestions.append(rel)

    return suggestions


def _sort_suggestions(suggestions: list[ComponentRelationship]) -> list[ComponentRelationship]:
    # requires first, then confidence descending; sorted() is stable for ties
    return sorted(
        suggestions,
        key=lambda r: (0 if r.relationship_type == "requires" else 1, -r.confidence),
    )


def _dedup(entries: list[ComponentRelationship]) -> list[ComponentRelationship]:
    seen: set[str] = set()
    result = []
    for entry in entries:
        if entry.id not in seen:
            seen.add(entry.id)
            result.append(entry)
    return result


def _find_risks(present: set[str], failures: Optional[Iterable[FailureScenario]]) -> list[FailureScenario]:
    if not failures:
        return []
    risks = [f for f in failures if f.component in present]
    return sorted(risks, key=lambda f: IMPACT_ORDER.get(f.impact, 9))


# ──────────────────────────────────────────────────────────────────────
# STAGE B: PROMPT RENDERING
# ──────────────────────────────────────────────────────────────────────

def build_knowledge_prompt_section(
    enriched: EnrichedKnowledge,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> str:
    """Render enriched knowledge as a prompt section grouped by trust level.

    Entries at or above OFFICIAL_CONFIDENCE_THRESHOLD are official standards,
    the rest above `min_confidence` verified practice. Entries below the floor
    are listed separately as unverified user contributions.

    Returns:
        The rendered section, or "" when nothing qualifies
    """
    all_entries = enriched.relationships + enriched.suggestions
    filtered = [e for e in all_entries if e.confidence >= min_confidence]

    if not filtered and not _has_violations(enriched) and not enriched.risks:
        return ""

    official = [e for e in filtered if e.confidence >= OFFICIAL_CONFIDENCE_THRESHOLD]
    verified = [e for e in filtered if e.confidence < OFFICIAL_CONFIDENCE_THRESHOLD]
    user_level = [e for e in all_entries if e.confidence < min_confidence]

    lines = ["## 인프라 지식 기반 가이드\n"]

    if official:
        lines.append("### 공식 표준 (반드시 준수)")
        lines.extend(f"- {e.reason_ko} [{_primary_source_title(e)}]" for e in official)
        lines.append("")

    if verified:
        lines.append("### 검증된 실무 가이드")
        lines.extend(f"- {e.reason_ko} (신뢰도: {round(e.confidence * 100)}%)" for e in verified)
        lines.append("")

    if user_level:
        lines.append("### 참고: 사용자 기여 (미검증)")
        lines.extend(f"- {e.reason_ko} ⚠️ 미검증" for e in user_level)
        lines.append("")

    violation_lines = _violation_lines(enriched)
    if violation_lines:
        lines.append("### ⛔ 주의사항 및 위반 감지")
        lines.extend(violation_lines)
        lines.append("")

    risk_lines = _risk_lines(enriched)
    if risk_lines:
        lines.append("### 💥 잠재적 장애 시나리오")
        lines.extend(risk_lines)
        lines.append("")

    lines.append("### 우선순위 규칙")
    lines.extend(PRIORITY_RULES)

    return "\n".join(lines)


def _primary_source_title(entry: ComponentRelationship) -> str:
    if entry.trust.sources:
        return entry.trust.primary_source_title
    return "출처 미상"


def _has_violations(enriched: EnrichedKnowledge) -> bool:
    return (
        bool(enriched.violations)
        or any(r.relationship_type == "conflicts" for r in enriched.relationships)
        or any(s.relationship_type == "requires" for s in enriched.suggestions)
    )


def _violation_lines(enriched: EnrichedKnowledge) -> list[str]:
    lines = []

    for ap in sorted(enriched.violations, key=lambda a: SEVERITY_ORDER[a.severity]):
        lines.append(f"- {SEVERITY_ICONS[ap.severity]} [{ap.severity.upper()}] {ap.name_ko}: {ap.problem_ko}")
        lines.append(f"  해결: {ap.solution_ko}")

    for rel in enriched.relationships:
        if rel.relationship_type == "conflicts":
            lines.append(f'- ⚠️ 충돌: "{rel.source}" ↔ "{rel.target}" — {rel.reason_ko}')

    for rel in enriched.suggestions:
        if rel.relationship_type == "requires":
            lines.append(f'- 🔴 필수 누락: "{rel.source}"은(는) "{rel.target}"이(가) 필요합니다 — {rel.reason_ko}')

    return lines


def _risk_lines(enriched: EnrichedKnowledge) -> list[str]:
    lines = []

    for risk in enriched.risks[:MAX_RISKS]:
        icon = IMPACT_ICONS.get(risk.impact, "🟡")
        lines.append(f"- {icon} [{risk.impact}] {risk.title_ko} (MTTR: {risk.estimated_mttr})")
        if risk.prevention_ko:
            lines.append(f"  예방: {risk.prevention_ko[0]}")

    return lines
