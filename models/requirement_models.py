"""Define the requirement graph models produced by extraction and closure.

A [`RequirementSet`](models/requirement_models.py) records, per facet, what an
entity requires and what it forbids:

- ``required[facet]`` holds atoms: either a bare identifier (a hard requirement) or
  an ``AlternativeGroup`` tuple meaning "at least one of these".
- ``forbidden[facet]`` is always a flat list of identifiers ("none of these").

Notes:
    The output shape of [`EntityDefinition.to_dict()`](models/requirement_models.py)
    keeps the ``yes``/``no`` naming used by downstream generator data files.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

AlternativeGroup = tuple[str, ...]
Atom = str | AlternativeGroup


def unique_in_order(values: Iterable[Any]) -> list[Any]:
    """Return ``values`` without duplicates, keeping first occurrences."""
    seen: set[Any] = set()
    out: list[Any] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


class RequirementSet(BaseModel):
    """Required and forbidden identifiers of one entity, grouped by facet."""

    required: dict[str, list[Atom]] = Field(default_factory=dict)
    forbidden: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def for_facets(cls, facets: Iterable[str]) -> RequirementSet:
        """Create an empty set with an entry for every facet in ``facets``."""
        facet_list = list(facets)
        return cls(
            required={facet: [] for facet in facet_list},
            forbidden={facet: [] for facet in facet_list},
        )

    def add_required(self, facet: str, identifiers: Iterable[str]) -> None:
        self.required.setdefault(facet, []).extend(identifiers)

    def add_alternative(self, facet: str, identifiers: Iterable[str]) -> None:
        """Append an "at least one of" group; empty groups are dropped."""
        group = tuple(unique_in_order(identifiers))
        if group:
            self.required.setdefault(facet, []).append(group)

    def add_forbidden(self, facet: str, identifiers: Iterable[str]) -> None:
        self.forbidden.setdefault(facet, []).extend(identifiers)

    def required_for(self, facet: str) -> list[Atom]:
        return self.required.get(facet, [])

    def forbidden_for(self, facet: str) -> list[str]:
        return self.forbidden.get(facet, [])

    def alternatives_for(self, facet: str) -> list[AlternativeGroup]:
        return [atom for atom in self.required_for(facet) if isinstance(atom, tuple)]

    def deduplicate(self) -> None:
        """Drop repeated bare atoms and forbidden identifiers in place.

        Alternative groups are never merged with each other, even when identical.
        """
        for facet, atoms in self.required.items():
            seen: set[str] = set()
            kept: list[Atom] = []
            for atom in atoms:
                if isinstance(atom, tuple):
                    kept.append(atom)
                elif atom not in seen:
                    seen.add(atom)
                    kept.append(atom)
            self.required[facet] = kept
        for facet, identifiers in self.forbidden.items():
            self.forbidden[facet] = unique_in_order(identifiers)

    def flatten_single_groups(self) -> None:
        """Unwrap required groups with exactly one member into bare atoms."""
        for facet, atoms in self.required.items():
            self.required[facet] = [atom[0] if isinstance(atom, tuple) and len(atom) == 1 else atom for atom in atoms]

    def contradictions(self) -> dict[str, list[str]]:
        """Return identifiers that are both hard-required and forbidden, per facet.

        These are reported, not resolved; whether such a rule is unsatisfiable or a
        "required unless granted" pattern depends on the source data.
        """
        found: dict[str, list[str]] = {}
        for facet, forbidden in self.forbidden.items():
            bare = {atom for atom in self.required.get(facet, []) if isinstance(atom, str)}
            overlap = [identifier for identifier in forbidden if identifier in bare]
            if overlap:
                found[facet] = overlap
        return found


class EntityDefinition(BaseModel):
    """A named game entity (civic, origin, ethic, trait) and its requirements."""

    name: str
    collection: str
    requirements: RequirementSet = Field(default_factory=RequirementSet)
    cost: int | float | None = None
    modifiers: dict[str, int] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``{"yes": ..., "no": ...}`` generator data shape.

        Alternative groups become nested lists. ``cost`` and ``modifiers`` are only
        included when present.
        """
        data: dict[str, Any] = {
            "yes": {
                facet: [list(atom) if isinstance(atom, tuple) else atom for atom in atoms]
                for facet, atoms in self.requirements.required.items()
            },
            "no": {facet: list(identifiers) for facet, identifiers in self.requirements.forbidden.items()},
        }
        if self.cost is not None:
            data["cost"] = self.cost
        if self.modifiers:
            data["modifiers"] = dict(self.modifiers)
        return data


class EntityCollection(BaseModel):
    """An ordered, named group of entities such as all civics or all origins."""

    name: str
    entities: dict[str, EntityDefinition] = Field(default_factory=dict)

    def names(self) -> list[str]:
        return list(self.entities)

    def get(self, name: str) -> EntityDefinition | None:
        return self.entities.get(name)

    def has(self, name: str) -> bool:
        return name in self.entities

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: entity.to_dict() for name, entity in self.entities.items()}
