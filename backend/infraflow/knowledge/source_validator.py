"""Source validator — offline structural checks over knowledge citations.

Checks every `trust.sources` citation for missing fields, malformed or
deprecated URLs, and access dates that are in the future or more than a
year old. Also reports entries whose last review is overdue and how the
citations spread across source types. Never makes network requests.

Usage:
    report = validate_all_sources()
    stale = get_stale_entries(max_age_days=180)
"""

import re
from datetime import date, datetime, timezone
from typing import Iterable, Optional

import structlog

from infraflow.knowledge.antipatterns import ANTI_PATTERNS
from infraflow.knowledge.failures import FAILURE_SCENARIOS
from infraflow.knowledge.models import (
    BASE_CONFIDENCE,
    KnowledgeEntry,
    KnowledgeSource,
    SourceIssue,
    SourceIssueLocation,
    SourceValidationResult,
    StaleEntry,
    ValidationReport,
)
from infraflow.knowledge.patterns import ARCHITECTURE_PATTERNS
from infraflow.knowledge.performance import PERFORMANCE_PROFILES
from infraflow.knowledge.relationships import RELATIONSHIPS

logger = structlog.get_logger()

URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)
PROTOCOL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
DOUBLE_SLASH_IN_PATH = re.compile(r"^https?://[^/]+/.*//")
MISSING_TLD_PATTERN = re.compile(r"^https?://[^./]+$")

# Retired documentation hosts and paths
DEPRECATED_DOMAINS = (
    "docs.oracle.com/cd/",
    "technet.microsoft.com",
    "msdn.microsoft.com",
)

STALE_AFTER_DAYS = 365


def _issue(severity: str, code: str, message: str, message_ko: str) -> SourceIssue:
    return SourceIssue(severity=severity, code=code, message=message, message_ko=message_ko)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def knowledge_entries() -> list[KnowledgeEntry]:
    """Every trust-bearing rule entry: relationships, patterns, anti-patterns, failures, profiles."""
    return [
        *RELATIONSHIPS,
        *ARCHITECTURE_PATTERNS,
        *ANTI_PATTERNS,
        *FAILURE_SCENARIOS,
        *PERFORMANCE_PROFILES,
    ]


# ──────────────────────────────────────────────────────────────────────
# URL & SOURCE
# ──────────────────────────────────────────────────────────────────────

def validate_source_url(url: Optional[str]) -> list[SourceIssue]:
    """Check URL shape only. Empty, protocol-less or malformed URLs stop at the first error."""
    if not url or not url.strip():
        return [_issue("error", "EMPTY_URL", "URL is empty", "URL이 비어 있습니다")]

    if not PROTOCOL_PATTERN.match(url):
        return [_issue(
            "error", "MISSING_PROTOCOL",
            "URL is missing http:// or https:// protocol",
            "URL에 http:// 또는 https:// 프로토콜이 없습니다",
        )]

    if not URL_PATTERN.match(url):
        return [_issue("error", "INVALID_URL_FORMAT", "URL format is invalid", "URL 형식이 유효하지 않습니다")]

    issues: list[SourceIssue] = []
    if MISSING_TLD_PATTERN.match(url):
        issues.append(_issue(
            "warning", "MISSING_TLD",
            "URL domain appears to be missing a TLD (e.g. .com, .org)",
            "URL 도메인에 TLD(.com, .org 등)가 누락된 것으로 보입니다",
        ))

    if DOUBLE_SLASH_IN_PATH.match(url):
        issues.append(_issue(
            "warning", "DOUBLE_SLASH_IN_PATH",
            "URL path contains consecutive slashes (//)",
            "URL 경로에 연속된 슬래시(//)가 포함되어 있습니다",
        ))

    deprecated = next((d for d in DEPRECATED_DOMAINS if d in url), None)
    if deprecated:
        issues.append(_issue(
            "warning", "DEPRECATED_DOMAIN",
            f"URL references a deprecated domain or path: {deprecated}",
            f"URL이 더 이상 사용되지 않는 도메인/경로를 참조합니다: {deprecated}",
        ))

    return issues


def validate_source(source: KnowledgeSource, today: Optional[date] = None) -> SourceValidationResult:
    """Validate one citation.

    Args:
        source: Citation to check
        today: Reference date for future and staleness checks (defaults to today)

    Returns:
        Result with every issue found; `is_valid` is False if any issue is an error
    """
    today = today or date.today()
    issues: list[SourceIssue] = []

    if not source.title.strip():
        issues.append(_issue(
            "error", "MISSING_TITLE",
            "Source title is missing or empty",
            "소스 제목이 누락되었거나 비어 있습니다",
        ))

    if not source.accessed_date.strip():
        issues.append(_issue(
            "error", "MISSING_ACCESSED_DATE",
            "Source accessed date is missing",
            "소스 접근 일자(accessed_date)가 누락되었습니다",
        ))
    else:
        accessed = _parse_date(source.accessed_date)
        if accessed is not None and accessed > today:
            issues.append(_issue(
                "error", "FUTURE_ACCESSED_DATE",
                f"Source accessed date is in the future: {source.accessed_date}",
                f"소스 접근 일자가 미래입니다: {source.accessed_date}",
            ))
        if accessed is not None and (today - accessed).days > STALE_AFTER_DAYS:
            issues.append(_issue(
                "warning", "STALE_SOURCE",
                f"Source was last accessed over 1 year ago: {source.accessed_date}",
                f"소스가 1년 이상 전에 마지막으로 접근되었습니다: {source.accessed_date}",
            ))

    # url is optional on a citation, so its absence only warns
    if not source.url or not source.url.strip():
        issues.append(_issue("warning", "MISSING_URL", "Source URL is not provided", "소스 URL이 제공되지 않았습니다"))
    else:
        issues.extend(validate_source_url(source.url))

    return SourceValidationResult(
        source_title=source.title or "(untitled)",
        url=source.url,
        is_valid=not any(i.severity == "error" for i in issues),
        issues=issues,
    )


# ──────────────────────────────────────────────────────────────────────
# AGGREGATES
# ──────────────────────────────────────────────────────────────────────

def validate_all_sources(
    entries: Optional[Iterable[KnowledgeEntry]] = None,
    today: Optional[date] = None,
) -> ValidationReport:
    """Validate every citation of every entry and summarize.

    A citation with both warnings and errors counts toward both totals.
    Only citations with at least one issue are listed.
    """
    entries = knowledge_entries() if entries is None else entries
    total = valid = warnings = errors = 0
    located: list[SourceIssueLocation] = []

    for entry in entries:
        for source in entry.trust.sources:
            total += 1
            result = validate_source(source, today=today)
            if result.is_valid:
                valid += 1
            if any(i.severity == "warning" for i in result.issues):
                warnings += 1
            if any(i.severity == "error" for i in result.issues):
                errors += 1
            if result.issues:
                located.append(SourceIssueLocation(entry_id=entry.id, entry_type=entry.type, source=result))

    report = ValidationReport(
        total_sources=total,
        valid_count=valid,
        warning_count=warnings,
        error_count=errors,
        issues=located,
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(
        "source_validation_completed",
        total_sources=total,
        warnings=warnings,
        errors=errors,
    )
    return report


def get_stale_entries(
    max_age_days: int = STALE_AFTER_DAYS,
    entries: Optional[Iterable[KnowledgeEntry]] = None,
    today: Optional[date] = None,
) -> list[StaleEntry]:
    """Entries whose `trust.last_reviewed_at` is more than `max_age_days` old.

    Entries with an unparsable review date are skipped.
    """
    entries = knowledge_entries() if entries is None else entries
    today = today or date.today()
    stale: list[StaleEntry] = []

    for entry in entries:
        reviewed = _parse_date(entry.trust.last_reviewed_at)
        if reviewed is None:
            continue
        age = (today - reviewed).days
        if age > max_age_days:
            stale.append(StaleEntry(
                entry_id=entry.id,
                last_reviewed=entry.trust.last_reviewed_at,
                days_since_review=age,
            ))

    return stale


def get_source_type_coverage(entries: Optional[Iterable[KnowledgeEntry]] = None) -> dict[str, int]:
    """Citation count per source type. Every known type is present, zero when unused."""
    entries = knowledge_entries() if entries is None else entries
    coverage = {source_type: 0 for source_type in BASE_CONFIDENCE}

    for entry in entries:
        for source in entry.trust.sources:
            if source.type in coverage:
                coverage[source.type] += 1

    return coverage
