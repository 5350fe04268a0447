# core/exceptions.py
"""Define standardized exception types for the requirement graph tooling.

The parsing and extraction core never raises: malformed game data degrades to a
best-effort result. These exceptions exist for the boundary around it (reading
source files, loading schema overrides, validating CLI input).
"""

from typing import Any


class ReqGraphError(Exception):
    """Base exception for all requirement graph errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class DocumentLoadError(ReqGraphError):
    """A Paradox source document could not be read from disk."""


class SchemaConfigurationError(ReqGraphError):
    """A collection/facet schema override is missing, malformed, or invalid."""


class ValidationError(ReqGraphError):
    """Errors related to invalid input combinations."""


def create_error_context(**kwargs: Any) -> dict[str, Any]:
    """Build a context dictionary for structured errors.

    Args:
        **kwargs: Key-value pairs to include.

    Returns:
        A dictionary containing only keys whose values are not `None`.
    """
    return {k: v for k, v in kwargs.items() if v is not None}


def handle_document_error(path: str, original_error: Exception, **context: Any) -> DocumentLoadError:
    """Convert an I/O or decoding failure into a `DocumentLoadError`.

    Args:
        path: Path of the document that failed to load.
        original_error: The caught exception.
        **context: Additional structured context to attach.

    Returns:
        A `DocumentLoadError` carrying the original error text and type.
    """
    error_details = create_error_context(
        path=path,
        original_error=str(original_error),
        error_type=type(original_error).__name__,
        **context,
    )

    if isinstance(original_error, FileNotFoundError):
        return DocumentLoadError(f"Document not found: {path}", details=error_details)
    elif isinstance(original_error, UnicodeDecodeError):
        return DocumentLoadError(f"Document is not valid UTF-8: {path}", details=error_details)
    else:
        return DocumentLoadError(f"Failed to read document: {path}", details=error_details)
