"""Build entity collections from parsed Paradox documents.

[`build_collection()`](core/requirements/entity_builders.py) is the single generic
builder for condition-driven collections (civics, origins); the differences between
them live in their [`CollectionConfig`](models/facet_schema.py). Ethics and traits
do not carry ``potential``/``possible`` requirements of their own and get dedicated
builders.

None of these functions close incompatibilities; that is the closure engine's job.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from models.facet_constants import (
    AVAILABILITY_KEY,
    DEFAULT_ETHIC_COST,
    DLC_PREDICATE_KEY,
    ETHIC_OPPOSITES,
    ETHIC_PREFIX,
    ETHICS,
    FACET_AUTHORITIES,
    FACET_ETHICS,
    FACET_SPECIES_ARCHETYPE,
    FACET_SPECIES_CLASS,
    FACET_TRAITS,
    FANATIC_ETHIC_PREFIX,
    GESTALT_ETHIC,
    NOR_KEY,
    OR_KEY,
    TRAIT_CONDITION_PREFIX,
    TRAITS,
)
from models.facet_schema import CollectionConfig
from models.requirement_models import EntityCollection, EntityDefinition, RequirementSet

from .condition_walker import extract_entity, gather, iter_blocks, requires_absent_dlc

logger = structlog.get_logger(__name__)

EntityFilter = Callable[[str, Any], bool]

TRAIT_FACETS: tuple[str, ...] = (FACET_TRAITS, FACET_SPECIES_CLASS, FACET_SPECIES_ARCHETYPE)
ETHIC_FACETS: tuple[str, ...] = (FACET_ETHICS, FACET_AUTHORITIES)


def _inherit_trait_archetypes(
    entity_data: Mapping[str, Any],
    requirements: RequirementSet,
    trait_lookup: Mapping[str, Any],
) -> None:
    for traits_block in iter_blocks(entity_data.get("traits")):
        if not isinstance(traits_block, Mapping):
            continue
        for trait_id in gather(traits_block.get("trait")):
            trait_data = trait_lookup.get(trait_id)
            if not isinstance(trait_data, Mapping) or "allowed_archetypes" not in trait_data:
                continue
            requirements.add_alternative(FACET_SPECIES_ARCHETYPE, gather(trait_data["allowed_archetypes"]))


def build_collection(
    document: Mapping[str, Any],
    config: CollectionConfig,
    filter_fn: EntityFilter | None = None,
    trait_lookup: Mapping[str, Any] | None = None,
    availability_key: str = AVAILABILITY_KEY,
    dlc_predicate: str = DLC_PREDICATE_KEY,
) -> EntityCollection:
    """Extract requirements for every entity of a condition-driven collection.

    Args:
        document: Parsed document mapping entity ids to their blocks.
        config: Collection settings and facet schema.
        filter_fn: Optional ``(name, data) -> bool``; entities returning False are skipped.
        trait_lookup: Parsed trait definitions, used when the config inherits
            archetype requirements from force-added traits.
        availability_key: Section checked by the DLC pre-filter.
        dlc_predicate: Predicate key that marks a DLC test inside ``NOT``.

    Returns:
        The collection, in document order, before incompatibility closure.
    """
    collection = EntityCollection(name=config.name)
    pruned = 0

    for name, data in document.items():
        if config.prune_dlc_exclusive and requires_absent_dlc(data, availability_key, dlc_predicate):
            pruned += 1
            logger.debug("Skipping DLC-exclusive entity", collection=config.name, entity=name)
            continue
        if filter_fn is not None and not filter_fn(name, data):
            continue

        requirements = extract_entity(data, config.facet_schema, config.condition_keys)
        if config.inherit_trait_archetypes and trait_lookup and isinstance(data, Mapping):
            _inherit_trait_archetypes(data, requirements, trait_lookup)
        if config.flatten_single_groups:
            requirements.flatten_single_groups()

        contradictions = requirements.contradictions()
        if contradictions:
            logger.debug(
                "Entity both requires and forbids identifiers",
                collection=config.name,
                entity=name,
                contradictions=contradictions,
            )

        collection.entities[name] = EntityDefinition(name=name, collection=config.name, requirements=requirements)

    logger.info(
        "Built entity collection",
        collection=config.name,
        entities=len(collection.entities),
        pruned_dlc_exclusive=pruned,
    )
    return collection


# --- Ethics ---
def _to_number_or_default(value: Any, default: int | float) -> int | float:
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return float(value) if "." in value else int(value)
        except ValueError:
            return default
    return default


def _first_present(node: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in node:
            return node[key]
    return None


def _extract_or_nor(node: Any) -> tuple[list[str], list[str]]:
    """Split an authority's ethics node into its allowed (OR) and excluded (NOR) lists.

    A node without either key is a direct list of allowed ethics.
    """
    if node is None:
        return [], []
    if not isinstance(node, Mapping):
        return gather(node), []
    or_list = gather(_first_present(node, OR_KEY, "Or", "or"))
    nor_list = gather(_first_present(node, NOR_KEY, "Nor", "nor"))
    if not or_list and not nor_list:
        return gather(node), []
    return or_list, nor_list


def _authority_ethics_nodes(authority_data: Any) -> list[Any]:
    if not isinstance(authority_data, Mapping):
        return []
    nodes = []
    for possible in iter_blocks(authority_data.get("possible")):
        if isinstance(possible, Mapping):
            nodes.extend(iter_blocks(possible.get("ethics")))
    return nodes


def incompatible_ethics(ethic_name: str) -> list[str]:
    """Return the ethics that can never be combined with ``ethic_name``.

    These are the regular/fanatic counterpart of the ethic, plus its opposite in both
    strengths.
    """
    incompatible: list[str] = []
    if ethic_name.startswith(FANATIC_ETHIC_PREFIX):
        base_name = ETHIC_PREFIX + ethic_name.removeprefix(FANATIC_ETHIC_PREFIX)
        incompatible.append(base_name)
    else:
        base_name = ethic_name
        incompatible.append(FANATIC_ETHIC_PREFIX + ethic_name.removeprefix(ETHIC_PREFIX))

    opposite = ETHIC_OPPOSITES.get(base_name)
    if opposite:
        for candidate in (opposite, FANATIC_ETHIC_PREFIX + opposite.removeprefix(ETHIC_PREFIX)):
            if candidate not in incompatible:
                incompatible.append(candidate)
    return incompatible


def build_ethics(
    ethics_document: Mapping[str, Any],
    authorities_document: Mapping[str, Any] | None = None,
) -> EntityCollection:
    """Build the ethics collection with costs, incompatibilities and allowed authorities.

    Only authorities that restrict ethics are listed; an authority without an
    ``ethics`` condition is valid with every ethic and is left out.
    """
    authorities_document = authorities_document or {}
    collection = EntityCollection(name=ETHICS)

    for ethic_name, ethic_data in ethics_document.items():
        if ethic_name == GESTALT_ETHIC:
            continue

        cost = DEFAULT_ETHIC_COST
        if isinstance(ethic_data, Mapping):
            cost = _to_number_or_default(ethic_data.get("cost"), DEFAULT_ETHIC_COST)

        allowed_authorities: list[str] = []
        for authority_name, authority_data in authorities_document.items():
            ethics_nodes = _authority_ethics_nodes(authority_data)
            if not ethics_nodes:
                continue
            allowed = True
            for node in ethics_nodes:
                or_list, nor_list = _extract_or_nor(node)
                if ethic_name in nor_list or (or_list and ethic_name not in or_list):
                    allowed = False
                    break
            if allowed:
                allowed_authorities.append(authority_name)

        requirements = RequirementSet.for_facets(ETHIC_FACETS)
        requirements.add_forbidden(FACET_ETHICS, incompatible_ethics(ethic_name))
        requirements.add_required(FACET_AUTHORITIES, allowed_authorities)
        collection.entities[ethic_name] = EntityDefinition(
            name=ethic_name,
            collection=ETHICS,
            requirements=requirements,
            cost=cost,
        )

    logger.info("Built ethics collection", entities=len(collection.entities), authorities=len(authorities_document))
    return collection


# --- Traits ---
def _to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return default
    return default


def extract_cost_modifiers(modifier_data: Any) -> dict[str, int]:
    """Map each ``has_*`` condition value in cost modifier blocks to its ``add`` amount."""
    modifiers: dict[str, int] = {}
    for modifier in iter_blocks(modifier_data):
        if not isinstance(modifier, Mapping) or "add" not in modifier:
            continue
        for key, condition_value in modifier.items():
            if key.startswith(TRAIT_CONDITION_PREFIX) and isinstance(condition_value, str):
                modifiers[condition_value] = _to_int(modifier["add"])
    return modifiers


def extract_trait_cost(trait_data: Mapping[str, Any]) -> tuple[int, dict[str, int]]:
    """Return ``(cost, modifiers)`` from a plain or ``{ base = X modifier = {...} }`` cost."""
    raw_cost = trait_data.get("cost")
    if raw_cost is None:
        return 0, {}
    if isinstance(raw_cost, Mapping):
        cost = _to_int(raw_cost.get("base"))
        modifiers = extract_cost_modifiers(raw_cost.get("modifier"))
        return cost, modifiers
    return _to_int(raw_cost), {}


def _as_identifier_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []


def has_species_class(trait_data: Mapping[str, Any], species_classes: str | Iterable[str]) -> bool:
    """Return True if the trait declares any of ``species_classes``."""
    wanted = {species_classes} if isinstance(species_classes, str) else set(species_classes)
    return any(value in wanted for value in _as_identifier_list(trait_data.get("species_class")))


def has_allowed_archetype(trait_data: Mapping[str, Any], archetypes: str | Iterable[str]) -> bool:
    """Return True if the trait allows any of ``archetypes``."""
    wanted = {archetypes} if isinstance(archetypes, str) else set(archetypes)
    return any(value in wanted for value in _as_identifier_list(trait_data.get("allowed_archetypes")))


def is_only_for_archetypes(trait_data: Mapping[str, Any], archetypes: str | Iterable[str]) -> bool:
    """Return True if every archetype the trait allows is one of ``archetypes``."""
    wanted = {archetypes} if isinstance(archetypes, str) else set(archetypes)
    allowed = _as_identifier_list(trait_data.get("allowed_archetypes"))
    return bool(allowed) and all(value in wanted for value in allowed)


def build_traits(document: Mapping[str, Any], filter_fn: EntityFilter | None = None) -> EntityCollection:
    """Build the trait collection; opposites become forbidden ``traits``.

    Traits declared with ``initial = no`` are never selectable and are skipped.
    """
    collection = EntityCollection(name=TRAITS)

    for trait_id, trait_data in document.items():
        if not isinstance(trait_data, Mapping):
            continue
        initial = trait_data.get("initial")
        if initial is False or initial == "no":
            continue
        if filter_fn is not None and not filter_fn(trait_id, trait_data):
            continue

        cost, modifiers = extract_trait_cost(trait_data)
        requirements = RequirementSet.for_facets(TRAIT_FACETS)
        requirements.add_forbidden(FACET_TRAITS, gather(trait_data.get("opposites")))
        requirements.add_required(FACET_SPECIES_CLASS, _as_identifier_list(trait_data.get("species_class")))
        if "allowed_archetypes" in trait_data:
            requirements.add_alternative(FACET_SPECIES_ARCHETYPE, gather(trait_data["allowed_archetypes"]))
        requirements.deduplicate()

        collection.entities[trait_id] = EntityDefinition(
            name=trait_id,
            collection=TRAITS,
            requirements=requirements,
            cost=cost,
            modifiers=modifiers,
        )

    logger.info("Built traits collection", entities=len(collection.entities))
    return collection
