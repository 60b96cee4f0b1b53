"""
Unit tests for infraflow.knowledge.sources

Tests for:
    - the keyed source registry used by JSON citations
    - source type helpers
"""

import pytest

from infraflow.knowledge.models import BASE_CONFIDENCE
from infraflow.knowledge.sources import (
    ALL_SOURCES,
    NIST_800_41,
    is_official_source,
    is_user_source,
    with_section,
)


# =============================================================================
# Registry
# =============================================================================

class TestSourceRegistry:
    """Tests for ALL_SOURCES."""

    def test_registry_is_populated(self):
        assert len(ALL_SOURCES) >= 25
        assert "AWS_CATALOG" in ALL_SOURCES

    def test_titles_are_unique(self):
        titles = [s.title for s in ALL_SOURCES.values()]
        assert len(titles) == len(set(titles))

    def test_every_type_has_base_confidence(self):
        for name, source in ALL_SOURCES.items():
            assert source.type in BASE_CONFIDENCE, name
            assert source.accessed_date, name

    def test_nist_entries(self):
        assert NIST_800_41.type == "nist"
        assert "NIST" in NIST_800_41.title
        assert "csrc.nist.gov" in NIST_800_41.url

    def test_with_section_copies(self):
        narrowed = with_section(NIST_800_41, "Section 4.1")
        assert narrowed.section == "Section 4.1"
        assert NIST_800_41.section is None
        assert narrowed.title == NIST_800_41.title


# =============================================================================
# Type helpers
# =============================================================================

class TestSourceTypes:
    """Tests for is_official_source and is_user_source."""

    @pytest.mark.parametrize("source_type", ["rfc", "nist", "cis", "owasp"])
    def test_official(self, source_type):
        assert is_official_source(source_type)
        assert not is_user_source(source_type)

    @pytest.mark.parametrize("source_type", ["vendor", "industry", "academic"])
    def test_neither(self, source_type):
        assert not is_official_source(source_type)
        assert not is_user_source(source_type)

    @pytest.mark.parametrize("source_type", ["user_verified", "user_unverified"])
    def test_user(self, source_type):
        assert is_user_source(source_type)
        assert not is_official_source(source_type)

    def test_official_sources_rank_above_vendor(self):
        assert min(BASE_CONFIDENCE[t] for t in ("rfc", "nist", "cis", "owasp")) > BASE_CONFIDENCE["vendor"]
