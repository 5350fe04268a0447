# utils/__init__.py
"""General utility functions for loading source documents and writing output."""

from .common import load_document, load_documents, merge_documents
from .file_io import write_json_file, write_text_file

__all__ = [
    "load_document",
    "load_documents",
    "merge_documents",
    "write_json_file",
    "write_text_file",
]
