"""Define the facet schema and per-collection configuration models.

A [`FacetSchema`](models/facet_schema.py) is pure data: it maps raw source keys
to canonical facet ids. A [`CollectionConfig`](models/facet_schema.py) bundles a
schema with the few toggles that distinguish one entity collection from another,
so civics and origins share one extraction algorithm.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .facet_constants import (
    CIVIC_FACETS,
    CIVIC_KEY_MAP,
    CIVICS,
    CONDITION_KEYS,
    FLAT_FACETS,
    ORIGIN_FACETS,
    ORIGIN_KEY_MAP,
    ORIGINS,
)


class FacetSchema(BaseModel):
    """Map raw condition keys to canonical facet ids."""

    model_config = ConfigDict(extra="forbid")

    key_map: dict[str, str] = Field(default_factory=dict)
    facets: list[str] = Field(default_factory=list)
    flat_facets: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def declare_mapped_facets(self) -> FacetSchema:
        # Every facet reachable through key_map is declared, in first-seen order.
        for facet in self.key_map.values():
            if facet not in self.facets:
                self.facets.append(facet)
        unknown = [facet for facet in self.flat_facets if facet not in self.facets]
        if unknown:
            raise ValueError(f"flat_facets references undeclared facets: {unknown}")
        return self

    def facet_for(self, key: str) -> str | None:
        """Return the facet id for a raw key, or ``None`` when the key is unmapped."""
        return self.key_map.get(key)

    def is_flat(self, facet: str) -> bool:
        return facet in self.flat_facets


class CollectionConfig(BaseModel):
    """Extraction settings for one entity collection.

    Attributes:
        name: Collection name (``civics``, ``origins``...).
        facet_schema: Raw key to facet mapping for this collection.
        condition_keys: Entity sections walked for requirements.
        flatten_single_groups: Unwrap one-member alternative groups after extraction.
        prune_dlc_exclusive: Skip entities only playable without some DLC.
        inherit_trait_archetypes: Add archetype groups from force-added traits.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    facet_schema: FacetSchema
    condition_keys: list[str] = Field(default_factory=lambda: list(CONDITION_KEYS))
    flatten_single_groups: bool = False
    prune_dlc_exclusive: bool = False
    inherit_trait_archetypes: bool = False


def default_collection_configs() -> dict[str, CollectionConfig]:
    """Return fresh default configs for the civics and origins collections."""
    return {
        CIVICS: CollectionConfig(
            name=CIVICS,
            facet_schema=FacetSchema(key_map=dict(CIVIC_KEY_MAP), facets=list(CIVIC_FACETS), flat_facets=list(FLAT_FACETS)),
            prune_dlc_exclusive=True,
        ),
        ORIGINS: CollectionConfig(
            name=ORIGINS,
            facet_schema=FacetSchema(key_map=dict(ORIGIN_KEY_MAP), facets=list(ORIGIN_FACETS), flat_facets=list(FLAT_FACETS)),
            flatten_single_groups=True,
            inherit_trait_archetypes=True,
        ),
    }
