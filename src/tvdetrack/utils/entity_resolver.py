"""Utility for resolving entity names to IDs."""

from typing import Iterable, Protocol


class NamedEntity(Protocol):
    id: str
    name: str


def resolve_entity(entities: Iterable[NamedEntity], reference: str, kind: str) -> str:
    """Resolve an entity name or ID to its ID.

    An exact ID match wins, then an exact name match, then a
    case-insensitive name match.

    Args:
        entities: Candidate entities (platforms, drivers or vehicles)
        reference: Entity ID or name
        kind: Entity kind used in the error message (e.g. "Driver")

    Returns:
        Entity ID

    Raises:
        ValueError: If no entity matches, or the name is ambiguous
    """
    entities = list(entities)
    reference = reference.strip()

    for entity in entities:
        if entity.id == reference:
            return entity.id

    for entity in entities:
        if entity.name == reference:
            return entity.id

    matches = [e for e in entities if e.name.lower() == reference.lower()]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        raise ValueError(f"{kind} '{reference}' is ambiguous; use the ID instead")

    raise ValueError(f"{kind} '{reference}' not found")
