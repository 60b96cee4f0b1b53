"""
Unit tests for infraflow.knowledge.loader

Tests for:
    - loading bundled data files with source references resolved
    - malformed files raising KnowledgeDataError
"""

import json

import pytest

from infraflow.knowledge import loader
from infraflow.knowledge.loader import KnowledgeDataError, load_entries
from infraflow.knowledge.models import ComponentRelationship
from infraflow.knowledge.sources import ALL_SOURCES


def _write(tmp_path, name, payload):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return name


def _relationship(**overrides):
    entry = {
        "id": "REL-TEST-001",
        "source": "web-server",
        "target": "firewall",
        "relationship_type": "requires",
        "strength": "mandatory",
        "direction": "upstream",
        "reason": "test",
        "reason_ko": "테스트",
        "tags": ["test"],
        "trust": {
            "confidence": 0.9,
            "sources": [{"ref": "NIST_800_41", "section": "Section 4.1"}],
            "last_reviewed_at": "2026-02-09",
        },
    }
    entry.update(overrides)
    return entry


# =============================================================================
# Bundled data
# =============================================================================

class TestBundledData:
    """Tests for the data files shipped with the package."""

    def test_relationships_load(self):
        records = load_entries("relationships.json", ComponentRelationship)
        assert records
        assert isinstance(records, tuple)

    def test_references_resolve_to_registry_sources(self):
        records = load_entries("relationships.json", ComponentRelationship)
        first = records[0]
        assert first.trust.sources[0].title == ALL_SOURCES["NIST_800_41"].title
        assert first.trust.sources[0].section is not None


# =============================================================================
# Malformed files
# =============================================================================

class TestMalformedFiles:
    """Tests for load-time validation failures."""

    @pytest.fixture(autouse=True)
    def data_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(loader, "DATA_DIR", tmp_path)

    def test_missing_file(self):
        with pytest.raises(KnowledgeDataError, match="cannot read"):
            load_entries("nope.json", ComponentRelationship)

    def test_invalid_json(self, tmp_path):
        name = _write(tmp_path, "bad.json", "{not json")
        with pytest.raises(KnowledgeDataError, match="cannot read"):
            load_entries(name, ComponentRelationship)

    def test_missing_entries_list(self, tmp_path):
        name = _write(tmp_path, "shape.json", {"category": "relationships"})
        with pytest.raises(KnowledgeDataError, match="'entries' list"):
            load_entries(name, ComponentRelationship)

    def test_unknown_source_reference(self, tmp_path):
        entry = _relationship(trust={"confidence": 0.9, "sources": [{"ref": "NOPE"}], "last_reviewed_at": "2026-02-09"})
        name = _write(tmp_path, "ref.json", {"entries": [entry]})
        with pytest.raises(KnowledgeDataError, match="unknown source reference 'NOPE'"):
            load_entries(name, ComponentRelationship)

    def test_entry_failing_validation_names_its_id(self, tmp_path):
        name = _write(tmp_path, "invalid.json", {"entries": [_relationship(relationship_type="likes")]})
        with pytest.raises(KnowledgeDataError, match="REL-TEST-001"):
            load_entries(name, ComponentRelationship)

    def test_confidence_out_of_range(self, tmp_path):
        entry = _relationship()
        entry["trust"]["confidence"] = 1.5
        name = _write(tmp_path, "conf.json", {"entries": [entry]})
        with pytest.raises(KnowledgeDataError):
            load_entries(name, ComponentRelationship)

    def test_valid_file_keeps_order(self, tmp_path):
        entries = [_relationship(id="REL-TEST-002"), _relationship(id="REL-TEST-001")]
        name = _write(tmp_path, "ok.json", {"entries": entries})
        assert [r.id for r in load_entries(name, ComponentRelationship)] == ["REL-TEST-002", "REL-TEST-001"]
