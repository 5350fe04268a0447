"""Symmetric incompatibility closure across entity collections.

The closure runs as two strictly sequential phases:

1. [`collect_incompatibilities()`](core/requirements/closure_engine.py) reads the
   collections and returns an immutable relation ``entity -> frozenset(entities)``.
2. [`rewrite_collections()`](core/requirements/closure_engine.py) returns new
   collections whose forbidden closure-facet lists are replaced by that relation.

Only one facet takes part (``civics`` by default). Forbidding and forbidden entities
may live in different collections, and cross references let a separate collection
contribute restrictions that were never declared on the target side.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import structlog

from models.facet_constants import FACET_CIVICS
from models.requirement_models import EntityCollection

logger = structlog.get_logger(__name__)

IncompatibilityRelation = Mapping[str, frozenset[str]]


@dataclass(frozen=True)
class CrossReference:
    """Restrictions a *source* collection declares against closed entities.

    Every entity ``S`` in ``source`` that forbids ``X`` through ``facet`` becomes
    incompatible with ``X`` when ``X`` belongs to a collection being closed.
    """

    source: EntityCollection
    facet: str


def collect_incompatibilities(
    collections: Sequence[EntityCollection],
    closure_facet: str = FACET_CIVICS,
    cross_references: Sequence[CrossReference] = (),
) -> dict[str, frozenset[str]]:
    """Collect the symmetric incompatibility relation without touching inputs.

    Args:
        collections: Collections being closed.
        closure_facet: Facet whose forbidden lists form the relation.
        cross_references: Extra collections whose restrictions point at members of
            ``collections``.

    Returns:
        A mapping from entity id to the ids it is incompatible with. Ids that are
        only ever forbidden (never defined) still get an entry.
    """
    incompatibilities: dict[str, set[str]] = defaultdict(set)
    members: set[str] = set()

    for collection in collections:
        for name, entity in collection.entities.items():
            members.add(name)
            incompatibilities[name].update(entity.requirements.forbidden_for(closure_facet))

    for reference in cross_references:
        for source_name, source_entity in reference.source.entities.items():
            for target in source_entity.requirements.forbidden_for(reference.facet):
                if target in members:
                    incompatibilities[target].add(source_name)

    # Symmetric completion over the fully collected relation.
    for name, forbidden in list(incompatibilities.items()):
        for other in list(forbidden):
            incompatibilities[other].add(name)

    logger.debug(
        "Collected incompatibility relation",
        closure_facet=closure_facet,
        entities=len(members),
        cross_references=len(cross_references),
    )
    return {name: frozenset(forbidden) for name, forbidden in incompatibilities.items()}


def rewrite_collections(
    collections: Sequence[EntityCollection],
    relation: IncompatibilityRelation,
    closure_facet: str = FACET_CIVICS,
) -> list[EntityCollection]:
    """Return copies of ``collections`` with closure-facet forbidden lists rewritten.

    Each present entity's list becomes the sorted contents of its relation entry.
    Entities absent from ``relation`` keep their list unchanged.
    """
    rewritten: list[EntityCollection] = []
    for collection in collections:
        entities = {}
        for name, entity in collection.entities.items():
            updated = entity.model_copy(deep=True)
            if name in relation:
                updated.requirements.forbidden[closure_facet] = sorted(relation[name])
            entities[name] = updated
        rewritten.append(EntityCollection(name=collection.name, entities=entities))
    return rewritten


def close(
    collections: Sequence[EntityCollection],
    closure_facet: str = FACET_CIVICS,
    cross_references: Sequence[CrossReference] = (),
) -> list[EntityCollection]:
    """Collect then rewrite: make incompatibilities on ``closure_facet`` symmetric."""
    relation = collect_incompatibilities(collections, closure_facet, cross_references)
    return rewrite_collections(collections, relation, closure_facet)
