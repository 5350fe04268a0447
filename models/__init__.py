# models/__init__.py
"""Export the requirement graph model types.

This package exposes a stable import surface for the Pydantic models used by
extraction, closure and serialization.
"""

from .facet_schema import CollectionConfig, FacetSchema, default_collection_configs
from .requirement_models import (
    AlternativeGroup,
    Atom,
    EntityCollection,
    EntityDefinition,
    RequirementSet,
)

__all__ = [
    "AlternativeGroup",
    "Atom",
    "CollectionConfig",
    "EntityCollection",
    "EntityDefinition",
    "FacetSchema",
    "RequirementSet",
    "default_collection_configs",
]
