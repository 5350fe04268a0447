# config/validator.py
"""
Configuration validation utilities for the requirement graph tooling.

This module provides a single public function `validate_all()` that:
1. Reads the current `ReqGraphSettings` object (field types are already
   checked by Pydantic).
2. Performs cross-field sanity checks that cannot be expressed purely with
   Pydantic field validators (log level names, referenced files, facet ids).
3. Returns a structured health report dictionary.

The report layout:

{
    "overall_health": "healthy" | "warning" | "error",
    "issues": {
        "errors":   [{ "field": "<field>", "message": "<msg>" }, ...],
        "warnings": [{ "field": "<field>", "message": "<msg>" }, ...],
        "info":     [{ "field": "<field>", "message": "<msg>" }, ...],
    }
}
"""

from __future__ import annotations

import importlib
import os
from typing import Any

from models.facet_constants import FACET_TRAITS
from models.facet_schema import default_collection_configs

from .settings import VALID_LOG_LEVELS


def _add_issue(
    issues: dict[str, list[dict[str, str]]],
    severity: str,
    field: str,
    message: str,
) -> None:
    """Utility to append an issue entry to the report."""
    issues.setdefault(severity, []).append({"field": field, "message": message})


def validate_all(current_settings: Any = None) -> dict:
    """
    Validate the current configuration state.

    Args:
        current_settings: Settings object to check; defaults to the live singleton.

    Returns a health-report dict with overall status and detailed issue lists.
    """
    if current_settings is None:
        current_settings = importlib.import_module("config.settings").settings

    issues: dict[str, list[dict[str, str]]] = {"errors": [], "warnings": [], "info": []}

    if current_settings.LOG_LEVEL_STR not in VALID_LOG_LEVELS:
        _add_issue(
            issues,
            "errors",
            "LOG_LEVEL",
            f"LOG_LEVEL {current_settings.LOG_LEVEL_STR!r} is not one of {sorted(VALID_LOG_LEVELS)}.",
        )

    schema_file = current_settings.COLLECTION_SCHEMA_FILE
    if schema_file and not os.path.isfile(schema_file):
        _add_issue(
            issues,
            "errors",
            "COLLECTION_SCHEMA_FILE",
            f"Collection schema file not found: {schema_file}",
        )

    declared_facets = {facet for config in default_collection_configs().values() for facet in config.facet_schema.facets}
    if current_settings.CLOSURE_FACET not in declared_facets:
        _add_issue(
            issues,
            "warnings",
            "CLOSURE_FACET",
            (
                f"CLOSURE_FACET {current_settings.CLOSURE_FACET!r} is not declared by the default "
                "collection schemas; closure will only see restrictions from a custom schema."
            ),
        )

    if current_settings.TRAIT_CLOSURE_FACET != FACET_TRAITS:
        _add_issue(
            issues,
            "warnings",
            "TRAIT_CLOSURE_FACET",
            (
                f"TRAIT_CLOSURE_FACET {current_settings.TRAIT_CLOSURE_FACET!r} differs from the facet "
                f"trait opposites are stored under ({FACET_TRAITS!r}); trait closure will be a no-op."
            ),
        )

    if current_settings.JSON_INDENT > 8:
        _add_issue(
            issues,
            "info",
            "JSON_INDENT",
            f"JSON_INDENT is {current_settings.JSON_INDENT}; output files will be large.",
        )

    if not current_settings.SIMPLE_LOGGING_MODE and not current_settings.LOG_FILE:
        _add_issue(
            issues,
            "info",
            "LOG_FILE",
            "LOG_FILE is not set; file logging is disabled.",
        )

    overall = "healthy"
    if issues["errors"]:
        overall = "error"
    elif issues["warnings"]:
        overall = "warning"

    return {
        "overall_health": overall,
        "issues": issues,
    }
