"""Walk ``potential``/``possible`` condition trees into requirement sets.

Every function here is pure: it reads a parsed value tree and a
[`FacetSchema`](models/facet_schema.py) and writes only into the
``RequirementSet`` it builds.

Shape handling is centralised in [`iter_blocks()`](core/requirements/condition_walker.py):
a key declared several times arrives as a ``MultiValue`` from the parser, and every
other value counts as exactly one block.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

import structlog

from core.parsers.paradox_parser import MultiValue
from models.facet_constants import (
    AVAILABILITY_KEY,
    CONDITION_KEYS,
    DLC_PREDICATE_KEY,
    NOR_KEY,
    NOT_KEY,
    OR_KEY,
    VALUE_KEY,
)
from models.facet_schema import FacetSchema
from models.requirement_models import RequirementSet

logger = structlog.get_logger(__name__)


def iter_blocks(value: Any) -> Iterator[Any]:
    """Yield each block of a value that may have been declared zero or more times."""
    if value is None:
        return
    if isinstance(value, MultiValue):
        yield from value
    else:
        yield value


def gather(value: Any) -> list[str]:
    """Flatten a value into the identifiers it names.

    - a string yields itself;
    - a list yields the identifiers of each element, in order;
    - a mapping with a ``value`` key yields only what that key names;
    - any other mapping yields the identifiers of all its values;
    - numbers, booleans and ``None`` yield nothing.
    """
    identifiers: list[str] = []
    pending = [value]
    while pending:
        node = pending.pop()
        if isinstance(node, str):
            identifiers.append(str(node))
        elif isinstance(node, list):
            pending.extend(reversed(node))
        elif isinstance(node, Mapping):
            if VALUE_KEY in node:
                pending.append(node[VALUE_KEY])
            else:
                pending.extend(reversed(list(node.values())))
    return identifiers


def _apply_facet_block(block: Any, facet: str, schema: FacetSchema, requirements: RequirementSet) -> None:
    if not isinstance(block, Mapping):
        return

    for or_block in iter_blocks(block.get(OR_KEY)):
        alternatives = gather(or_block)
        if schema.is_flat(facet):
            requirements.add_required(facet, alternatives)
        else:
            requirements.add_alternative(facet, alternatives)

    # NOR and NOT both mean "none of these" and may appear together.
    requirements.add_forbidden(facet, gather(block.get(NOR_KEY)))
    requirements.add_forbidden(facet, gather(block.get(NOT_KEY)))

    if VALUE_KEY in block:
        requirements.add_required(facet, gather(block[VALUE_KEY]))


def extract(
    condition_node: Any,
    schema: FacetSchema,
    requirements: RequirementSet | None = None,
) -> RequirementSet:
    """Extract per-facet requirements from one condition section.

    Args:
        condition_node: A parsed ``potential``/``possible`` value. A ``MultiValue`` of
            several such sections is processed block by block.
        schema: Raw key to facet mapping. Unmapped keys are ignored.
        requirements: Set to accumulate into; a new empty one is created if omitted.

    Returns:
        The accumulated requirement set (not yet deduplicated).
    """
    if requirements is None:
        requirements = RequirementSet.for_facets(schema.facets)

    for node in iter_blocks(condition_node):
        if not isinstance(node, Mapping):
            continue
        for key, value in node.items():
            facet = schema.facet_for(key)
            if facet is None:
                continue
            for block in iter_blocks(value):
                _apply_facet_block(block, facet, schema, requirements)

    return requirements


def extract_entity(
    entity_data: Any,
    schema: FacetSchema,
    condition_keys: Sequence[str] = CONDITION_KEYS,
    flatten_single_groups: bool = False,
) -> RequirementSet:
    """Build the deduplicated requirement set of one entity.

    Args:
        entity_data: The entity's parsed block.
        schema: Facet schema of the entity's collection.
        condition_keys: Condition sections to walk, in order.
        flatten_single_groups: Unwrap one-member alternative groups afterwards.
    """
    requirements = RequirementSet.for_facets(schema.facets)
    if isinstance(entity_data, Mapping):
        for section in condition_keys:
            extract(entity_data.get(section), schema, requirements)
    requirements.deduplicate()
    if flatten_single_groups:
        requirements.flatten_single_groups()
    return requirements


def requires_absent_dlc(
    entity_data: Any,
    availability_key: str = AVAILABILITY_KEY,
    dlc_predicate: str = DLC_PREDICATE_KEY,
) -> bool:
    """Return True when an entity is only available without some DLC.

    This is the case when its availability block holds a ``NOT`` block that tests
    the DLC predicate (``playable = { NOT = { host_has_dlc = "..." } }``).
    """
    if not isinstance(entity_data, Mapping):
        return False
    for availability in iter_blocks(entity_data.get(availability_key)):
        if not isinstance(availability, Mapping):
            continue
        for not_block in iter_blocks(availability.get(NOT_KEY)):
            if isinstance(not_block, Mapping) and dlc_predicate in not_block:
                logger.debug("Entity requires an absent DLC", dlc=not_block[dlc_predicate])
                return True
    return False
