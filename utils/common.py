# utils/common.py
"""Load Paradox script documents from disk.

Game data for one collection is usually split across several files
(``00_civics.txt``, ``01_civics_dlc.txt``...). These helpers parse each file and
merge them into one document per collection.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import structlog

from core.exceptions import handle_document_error
from core.parsers import ParadoxParser

logger = structlog.get_logger(__name__)


def load_document(path: str | Path) -> dict[str, Any]:
    """Parse a single Paradox script file.

    Raises:
        DocumentLoadError: The file is missing, unreadable, or not UTF-8.
    """
    try:
        document = ParadoxParser().parse_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise handle_document_error(str(path), e) from e
    logger.debug("Parsed document", path=str(path), entries=len(document))
    return document


def merge_documents(documents: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge top-level entries; a later document replaces earlier entries with the same id."""
    merged: dict[str, Any] = {}
    for document in documents:
        merged.update(document)
    return merged


def load_documents(paths: Iterable[str | Path]) -> dict[str, Any]:
    """Parse ``paths`` in order and merge them into one document."""
    return merge_documents(load_document(path) for path in paths)
