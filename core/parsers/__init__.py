"""Parser modules for Paradox (Clausewitz-engine) script files.

This package contains the lexer and the value-tree parser that turn raw game
data text into plain Python containers.
"""

from .paradox_lexer import Token, TokenKind, strip_comments, tokenize
from .paradox_parser import MIXED_ITEMS_KEY, ComparisonExpr, MultiValue, ParadoxParser, parse_text

__all__ = [
    "Token",
    "TokenKind",
    "strip_comments",
    "tokenize",
    "ComparisonExpr",
    "MultiValue",
    "MIXED_ITEMS_KEY",
    "ParadoxParser",
    "parse_text",
]
