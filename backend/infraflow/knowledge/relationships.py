"""Component relationships — requires / recommends / conflicts / enhances / protects.

Directed edges between component *types* (not topology nodes). The enricher
matches them against the types present in a topology.
"""

from infraflow.knowledge.loader import load_entries
from infraflow.knowledge.models import ComponentRelationship, RelatedComponent

RELATIONSHIPS: tuple[ComponentRelationship, ...] = load_entries("relationships.json", ComponentRelationship)


def relationships_for_component(component: str) -> list[ComponentRelationship]:
    """All relationships where `component` is either endpoint."""
    return [r for r in RELATIONSHIPS if r.source == component or r.target == component]


def related_components(component: str) -> list[RelatedComponent]:
    """Distinct components on the other side of `component`'s relationships.

    When a component is linked more than once, the first relationship in
    table order wins.
    """
    seen: dict[str, RelatedComponent] = {}

    for rel in relationships_for_component(component):
        other = rel.target if rel.source == component else rel.source
        if other not in seen:
            seen[other] = RelatedComponent(
                component=other,
                relationship=rel.relationship_type,
                reason=rel.reason,
            )

    return list(seen.values())


def _outgoing(component: str, relationship_type: str) -> list[ComponentRelationship]:
    return [
        r for r in RELATIONSHIPS
        if r.source == component and r.relationship_type == relationship_type
    ]


def mandatory_dependencies(component: str) -> list[ComponentRelationship]:
    return _outgoing(component, "requires")


def recommendations(component: str) -> list[ComponentRelationship]:
    return _outgoing(component, "recommends")


def conflicts(component: str) -> list[ComponentRelationship]:
    return _outgoing(component, "conflicts")
