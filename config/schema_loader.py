# config/schema_loader.py
"""Load collection/facet schema overrides from YAML.

The file holds a top-level ``collections`` mapping keyed by collection name:

```yaml
collections:
  civics:
    facet_schema:
      key_map:
        ethics: ethics
        graphical_culture: culture
      flat_facets: [culture]
    prune_dlc_exclusive: true
```

Each entry replaces the built-in config of that collection; collections the file
does not mention keep their defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import SchemaConfigurationError, create_error_context
from models.facet_schema import CollectionConfig, default_collection_configs

logger = structlog.get_logger(__name__)


def _read_yaml(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError as e:
        raise SchemaConfigurationError(
            f"Collection schema file not found: {path}",
            details=create_error_context(path=str(path), error_type=type(e).__name__),
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaConfigurationError(
            f"Failed to read collection schema file: {path}",
            details=create_error_context(path=str(path), original_error=str(e), error_type=type(e).__name__),
        ) from e
    except yaml.YAMLError as e:
        raise SchemaConfigurationError(
            f"Collection schema file is not valid YAML: {path}",
            details=create_error_context(path=str(path), original_error=str(e)),
        ) from e


def load_collection_configs(path: str | Path) -> dict[str, CollectionConfig]:
    """Return the default collection configs with the file's overrides applied.

    Args:
        path: YAML file with a top-level ``collections`` mapping.

    Raises:
        SchemaConfigurationError: The file is missing, unreadable, not YAML, or
            describes an invalid config.
    """
    path = Path(path)
    content = _read_yaml(path)

    if content is None:
        logger.info("Collection schema file is empty; using defaults", path=str(path))
        return default_collection_configs()

    collections = content.get("collections") if isinstance(content, dict) else None
    if not isinstance(collections, dict):
        raise SchemaConfigurationError(
            "Collection schema file must contain a 'collections' mapping",
            details=create_error_context(path=str(path)),
        )

    configs = default_collection_configs()
    for name, raw in collections.items():
        if not isinstance(raw, dict):
            raise SchemaConfigurationError(
                f"Collection {name!r} must be a mapping",
                details=create_error_context(path=str(path), collection=name),
            )
        try:
            configs[name] = CollectionConfig.model_validate({"name": name, **raw})
        except PydanticValidationError as e:
            raise SchemaConfigurationError(
                f"Invalid configuration for collection {name!r}",
                details=create_error_context(path=str(path), collection=name, original_error=str(e)),
            ) from e

    logger.info("Loaded collection schema overrides", path=str(path), collections=sorted(collections))
    return configs
