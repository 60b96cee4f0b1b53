"""Knowledge data loader — reads the JSON tables under knowledge/data/ into frozen records.

Each file is a JSON object with an "entries" list. A citation in
`trust.sources` is either a full source object or a reference into the
source registry: {"ref": "NIST_800_41", "section": "Section 4.1"}.

Data files ship with the package, so a malformed file is a programmer error:
it raises KnowledgeDataError at import instead of being skipped.
"""

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from infraflow.knowledge.sources import ALL_SOURCES, with_section

DATA_DIR = Path(__file__).parent / "data"

ModelT = TypeVar("ModelT", bound=BaseModel)


class KnowledgeDataError(Exception):
    """A bundled knowledge data file is missing, unparsable, or fails validation."""


def _resolve_source(raw: Any, file_name: str) -> Any:
    if not isinstance(raw, dict) or "ref" not in raw:
        return raw

    ref = raw["ref"]
    source = ALL_SOURCES.get(ref)
    if source is None:
        raise KnowledgeDataError(f"{file_name}: unknown source reference '{ref}'")
    if raw.get("section"):
        source = with_section(source, raw["section"])
    return source


def _resolve_citations(entry: dict, file_name: str) -> dict:
    trust = entry.get("trust")
    if not isinstance(trust, dict) or "sources" not in trust:
        return entry
    sources = [_resolve_source(s, file_name) for s in trust["sources"]]
    return {**entry, "trust": {**trust, "sources": sources}}


def load_entries(file_name: str, model: type[ModelT]) -> tuple[ModelT, ...]:
    """Load and validate one data file.

    Args:
        file_name: File name under the data directory (e.g. "relationships.json")
        model: Record model every entry is validated against

    Returns:
        Immutable tuple of validated records, in file order

    Raises:
        KnowledgeDataError: file missing, not JSON, wrong shape, or an entry fails validation
    """
    path = DATA_DIR / file_name
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise KnowledgeDataError(f"{file_name}: cannot read knowledge data: {e}") from e

    entries = data.get("entries") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise KnowledgeDataError(f"{file_name}: expected an object with an 'entries' list")

    records: list[ModelT] = []
    for index, raw in enumerate(entries):
        if not isinstance(raw, dict):
            raise KnowledgeDataError(f"{file_name}[{index}]: entry must be an object")
        try:
            records.append(model.model_validate(_resolve_citations(raw, file_name)))
        except ValidationError as e:
            entry_id = raw.get("id", index)
            raise KnowledgeDataError(f"{file_name}[{entry_id}]: {e}") from e

    return tuple(records)
