"""
Unit tests for infraflow.knowledge.source_validator

Tests for:
    - URL shape checks
    - single-citation validation (missing fields, future and stale dates)
    - report, staleness and source-type coverage over the bundled entries
"""

from datetime import date

import pytest

from infraflow.knowledge.models import BASE_CONFIDENCE, KnowledgeSource, TrustMetadata
from infraflow.knowledge.relationships import RELATIONSHIPS
from infraflow.knowledge.source_validator import (
    get_source_type_coverage,
    get_stale_entries,
    knowledge_entries,
    validate_all_sources,
    validate_source,
    validate_source_url,
)
from infraflow.knowledge.sources import NIST_800_41

# Bundled citations were accessed 2026-02-09 and reviewed 2026-02-09/10
SHORTLY_AFTER = date(2026, 3, 1)
OVER_A_YEAR_LATER = date(2027, 6, 1)


def _codes(issues):
    return [i.code for i in issues]


def _entry_citing(*sources, entry_id="REL-TEST-001", reviewed="2026-02-09"):
    trust = TrustMetadata(confidence=0.9, sources=sources, last_reviewed_at=reviewed)
    return RELATIONSHIPS[0].model_copy(update={"id": entry_id, "trust": trust})


# =============================================================================
# URL checks
# =============================================================================

class TestValidateSourceUrl:
    """Tests for validate_source_url."""

    def test_well_formed(self):
        assert validate_source_url("https://csrc.nist.gov/pubs/sp/800/41/r1/final") == []

    @pytest.mark.parametrize("url", [None, "", "   "])
    def test_empty(self, url):
        assert _codes(validate_source_url(url)) == ["EMPTY_URL"]

    def test_missing_protocol_stops_further_checks(self):
        assert _codes(validate_source_url("msdn.microsoft.com//x")) == ["MISSING_PROTOCOL"]

    def test_invalid_format(self):
        assert _codes(validate_source_url("https:// spaced")) == ["INVALID_URL_FORMAT"]

    def test_missing_tld_warns(self):
        issues = validate_source_url("http://intranet")
        assert _codes(issues) == ["MISSING_TLD"]
        assert issues[0].severity == "warning"

    def test_double_slash_in_path(self):
        assert _codes(validate_source_url("https://example.com/docs//guide")) == ["DOUBLE_SLASH_IN_PATH"]

    def test_deprecated_domain(self):
        issues = validate_source_url("https://technet.microsoft.com/library/cc")
        assert _codes(issues) == ["DEPRECATED_DOMAIN"]
        assert "technet.microsoft.com" in issues[0].message


# =============================================================================
# Single citation
# =============================================================================

class TestValidateSource:
    """Tests for validate_source."""

    def test_registry_source_is_clean(self):
        result = validate_source(NIST_800_41, today=SHORTLY_AFTER)
        assert result.is_valid
        assert result.issues == []
        assert result.url == NIST_800_41.url

    def test_stale_source_warns_but_stays_valid(self):
        result = validate_source(NIST_800_41, today=OVER_A_YEAR_LATER)
        assert result.is_valid
        assert _codes(result.issues) == ["STALE_SOURCE"]

    def test_future_access_is_an_error(self):
        result = validate_source(NIST_800_41, today=date(2026, 1, 1))
        assert not result.is_valid
        assert _codes(result.issues) == ["FUTURE_ACCESSED_DATE"]

    def test_missing_url_warns(self):
        source = KnowledgeSource(type="academic", title="Site Reliability Engineering", accessed_date="2026-02-09")
        result = validate_source(source, today=SHORTLY_AFTER)
        assert result.is_valid
        assert _codes(result.issues) == ["MISSING_URL"]

    def test_blank_title_and_date(self):
        source = KnowledgeSource(type="vendor", title=" ", url="https://aws.amazon.com/", accessed_date="")
        result = validate_source(source, today=SHORTLY_AFTER)
        assert not result.is_valid
        assert _codes(result.issues) == ["MISSING_TITLE", "MISSING_ACCESSED_DATE"]

    def test_unparsable_date_is_not_judged(self):
        source = NIST_800_41.model_copy(update={"accessed_date": "Feb 2026"})
        assert validate_source(source, today=OVER_A_YEAR_LATER).issues == []


# =============================================================================
# Aggregates
# =============================================================================

class TestValidateAllSources:
    """Tests for validate_all_sources over bundled and hand-built entries."""

    def test_bundled_citations(self):
        """Registry citations are clean; the one community contribution has no URL."""
        report = validate_all_sources(today=SHORTLY_AFTER)
        total = sum(len(e.trust.sources) for e in knowledge_entries())
        assert report.total_sources == total > 0
        assert report.valid_count == total
        assert report.error_count == 0
        assert report.warning_count == 1
        assert [(loc.entry_id, _codes(loc.source.issues)) for loc in report.issues] == [
            ("REL-USR-001", ["MISSING_URL"]),
        ]
        assert report.generated_at

    def test_bundled_citations_have_no_errors_today(self):
        assert validate_all_sources().error_count == 0

    def test_everything_stale_a_year_on(self):
        report = validate_all_sources(today=OVER_A_YEAR_LATER)
        assert report.warning_count == report.total_sources
        assert report.valid_count == report.total_sources
        assert {code for loc in report.issues for code in _codes(loc.source.issues)} == {"STALE_SOURCE", "MISSING_URL"}

    def test_counts_and_locations(self):
        no_url = KnowledgeSource(type="industry", title="Vendor blog", accessed_date="2026-02-09")
        future = NIST_800_41.model_copy(update={"accessed_date": "2030-01-01"})
        entries = [
            _entry_citing(NIST_800_41, entry_id="REL-A"),
            _entry_citing(no_url, future, entry_id="REL-B"),
        ]

        report = validate_all_sources(entries, today=SHORTLY_AFTER)

        assert report.total_sources == 3
        assert report.valid_count == 2
        assert report.warning_count == 1
        assert report.error_count == 1
        assert [(loc.entry_id, loc.entry_type) for loc in report.issues] == [
            ("REL-B", "relationship"),
            ("REL-B", "relationship"),
        ]


class TestStaleEntries:
    """Tests for get_stale_entries."""

    def test_nothing_stale_shortly_after_review(self):
        assert get_stale_entries(today=SHORTLY_AFTER) == []

    def test_everything_stale_a_year_on(self):
        stale = get_stale_entries(today=OVER_A_YEAR_LATER)
        assert len(stale) == len(knowledge_entries())
        assert all(s.days_since_review > 365 for s in stale)

    def test_custom_threshold(self):
        entry = _entry_citing(NIST_800_41, reviewed="2026-02-09")
        stale = get_stale_entries(max_age_days=10, entries=[entry], today=date(2026, 2, 25))
        assert [(s.entry_id, s.last_reviewed, s.days_since_review) for s in stale] == [
            ("REL-TEST-001", "2026-02-09", 16),
        ]

    def test_threshold_is_exclusive(self):
        entry = _entry_citing(NIST_800_41, reviewed="2026-02-09")
        assert get_stale_entries(max_age_days=16, entries=[entry], today=date(2026, 2, 25)) == []

    def test_unparsable_review_date_skipped(self):
        entry = _entry_citing(NIST_800_41, reviewed="last spring")
        assert get_stale_entries(max_age_days=0, entries=[entry], today=OVER_A_YEAR_LATER) == []


class TestSourceTypeCoverage:
    """Tests for get_source_type_coverage."""

    def test_every_type_reported(self):
        coverage = get_source_type_coverage()
        assert set(coverage) == set(BASE_CONFIDENCE)

    def test_totals_match_citations(self):
        coverage = get_source_type_coverage()
        assert sum(coverage.values()) == sum(len(e.trust.sources) for e in knowledge_entries())
        assert coverage["nist"] > 0
        assert coverage["user_unverified"] == 1

    def test_hand_built_entries(self):
        no_url = KnowledgeSource(type="industry", title="Vendor blog", accessed_date="2026-02-09")
        coverage = get_source_type_coverage([_entry_citing(NIST_800_41, no_url), _entry_citing(no_url)])
        assert coverage["nist"] == 1
        assert coverage["industry"] == 2
        assert coverage["rfc"] == 0
