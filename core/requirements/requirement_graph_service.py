"""Assemble the full requirement graph from parsed game data documents.

[`RequirementGraphService`](core/requirements/requirement_graph_service.py) wires
the builders to the closure engine with each collection's closure rules:

- civics are closed among themselves on the ``civics`` facet;
- origins are closed on the ``civics`` facet, with civics that forbid an origin
  through their ``origin`` condition folded in as a cross reference;
- traits are closed among themselves on the ``traits`` facet;
- ethics incompatibilities are symmetric by construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

import config
from models.facet_constants import AUTHORITIES, CIVICS, ETHICS, FACET_ORIGINS, ORIGINS, TRAITS
from models.facet_schema import CollectionConfig, default_collection_configs
from models.requirement_models import EntityCollection

from .closure_engine import CrossReference, close
from .entity_builders import EntityFilter, build_collection, build_ethics, build_traits

logger = structlog.get_logger(__name__)

Document = Mapping[str, Any]


class RequirementGraphService:
    """Build closed entity collections from parsed documents.

    Attributes:
        configs: Collection configs keyed by collection name.
        closure_facet: Facet used for civic/origin incompatibility closure.
        trait_closure_facet: Facet used for trait opposites closure.
    """

    def __init__(
        self,
        configs: Mapping[str, CollectionConfig] | None = None,
        closure_facet: str | None = None,
        trait_closure_facet: str | None = None,
    ):
        self.configs = dict(configs) if configs is not None else default_collection_configs()
        self.closure_facet = closure_facet or config.settings.CLOSURE_FACET
        self.trait_closure_facet = trait_closure_facet or config.settings.TRAIT_CLOSURE_FACET
        self.availability_key = config.settings.AVAILABILITY_KEY
        self.dlc_predicate = config.settings.DLC_PREDICATE_KEY

    def _config(self, name: str) -> CollectionConfig:
        try:
            return self.configs[name]
        except KeyError:
            raise KeyError(f"No collection config registered for {name!r}") from None

    def _build(
        self,
        document: Document,
        name: str,
        filter_fn: EntityFilter | None = None,
        trait_lookup: Document | None = None,
    ) -> EntityCollection:
        return build_collection(
            document,
            self._config(name),
            filter_fn=filter_fn,
            trait_lookup=trait_lookup,
            availability_key=self.availability_key,
            dlc_predicate=self.dlc_predicate,
        )

    def build_civics(self, document: Document, filter_fn: EntityFilter | None = None) -> EntityCollection:
        """Build civics and make civic-civic incompatibilities symmetric."""
        civics = self._build(document, CIVICS, filter_fn)
        (closed,) = close([civics], self.closure_facet)
        return closed

    def build_origins(
        self,
        document: Document,
        civics_document: Document | None = None,
        filter_fn: EntityFilter | None = None,
        traits_document: Document | None = None,
    ) -> EntityCollection:
        """Build origins and fold in civics that forbid them.

        Args:
            document: Parsed origins.
            civics_document: Parsed civics, scanned for ``origin`` restrictions.
            filter_fn: Optional origin filter.
            traits_document: Parsed traits, for archetype requirements of
                force-added traits.
        """
        origins = self._build(document, ORIGINS, filter_fn, trait_lookup=traits_document)
        cross_references = []
        if civics_document:
            civics = self._build(civics_document, CIVICS)
            cross_references.append(CrossReference(source=civics, facet=FACET_ORIGINS))
        (closed,) = close([origins], self.closure_facet, cross_references)
        return closed

    def build_ethics(self, ethics_document: Document, authorities_document: Document | None = None) -> EntityCollection:
        return build_ethics(ethics_document, authorities_document)

    def build_traits(self, document: Document, filter_fn: EntityFilter | None = None) -> EntityCollection:
        """Build traits and make opposites symmetric."""
        traits = build_traits(document, filter_fn)
        (closed,) = close([traits], self.trait_closure_facet)
        return closed

    def build_all(self, documents: Mapping[str, Document]) -> dict[str, EntityCollection]:
        """Build every collection for which a document was supplied.

        Args:
            documents: Parsed documents keyed by ``civics``, ``origins``, ``ethics``,
                ``authorities`` and ``traits``. Missing keys are skipped.

        Returns:
            Closed collections keyed by collection name, in a stable order.
        """
        collections: dict[str, EntityCollection] = {}

        if documents.get(CIVICS):
            collections[CIVICS] = self.build_civics(documents[CIVICS])
        if documents.get(ORIGINS):
            collections[ORIGINS] = self.build_origins(
                documents[ORIGINS],
                civics_document=documents.get(CIVICS),
                traits_document=documents.get(TRAITS),
            )
        if documents.get(ETHICS):
            collections[ETHICS] = self.build_ethics(documents[ETHICS], documents.get(AUTHORITIES))
        if documents.get(TRAITS):
            collections[TRAITS] = self.build_traits(documents[TRAITS])

        logger.info(
            "Requirement graph built",
            collections={name: len(collection.entities) for name, collection in collections.items()},
        )
        return collections

    @staticmethod
    def to_json_payload(collections: Mapping[str, EntityCollection]) -> dict[str, dict[str, Any]]:
        """Convert collections to ``{collection: {entity: {"yes": ..., "no": ...}}}``."""
        return {name: collection.to_dict() for name, collection in collections.items()}
