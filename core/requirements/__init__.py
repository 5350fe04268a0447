"""Requirement extraction and incompatibility closure."""

from .closure_engine import CrossReference, close, collect_incompatibilities, rewrite_collections
from .condition_walker import extract, extract_entity, gather, iter_blocks, requires_absent_dlc
from .entity_builders import build_collection, build_ethics, build_traits
from .requirement_graph_service import RequirementGraphService

__all__ = [
    "CrossReference",
    "close",
    "collect_incompatibilities",
    "rewrite_collections",
    "extract",
    "extract_entity",
    "gather",
    "iter_blocks",
    "requires_absent_dlc",
    "build_collection",
    "build_ethics",
    "build_traits",
    "RequirementGraphService",
]
