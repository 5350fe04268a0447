"""Tokenize Paradox (Clausewitz-engine) script text.

The lexer is permissive: it never raises, and characters it does not
recognize are folded into the surrounding word. Tokenization runs in two phases:

1. [`strip_comments()`](core/parsers/paradox_lexer.py) removes `#` comments while
   respecting quoted strings.
2. [`tokenize()`](core/parsers/paradox_lexer.py) scans the cleaned text into
   [`Token`](core/parsers/paradox_lexer.py) objects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)

NUMBER_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")

# Characters that terminate a bare word.
_WORD_BREAKS = frozenset('{}=><!"')
_COMPARATOR_CHARS = frozenset("><!")


class TokenKind(Enum):
    """Kinds of lexical tokens in Paradox script."""

    BRACE_OPEN = "{"
    BRACE_CLOSE = "}"
    EQUALS = "="
    COMPARATOR = "comparator"
    QUOTED_STRING = "string"
    NUMBER = "number"
    WORD = "word"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    For `QUOTED_STRING` tokens, `text` is the decoded string contents without the
    surrounding quotes. For `COMPARATOR` tokens it is the operator (`>`, `>=`, ...).
    """

    kind: TokenKind
    text: str


def _preceding_backslashes(src: str, index: int) -> int:
    count = 0
    j = index - 1
    while j >= 0 and src[j] == "\\":
        count += 1
        j -= 1
    return count


def strip_comments(src: str) -> str:
    """Remove `#` comments that are not inside a quoted string.

    A `"` toggles the quoted state unless it is escaped by an odd number of
    backslashes. The newline that ends a comment is kept so line structure survives.
    """
    out: list[str] = []
    in_quote = False
    i = 0
    length = len(src)
    while i < length:
        ch = src[i]
        if ch == '"':
            if _preceding_backslashes(src, i) % 2 == 0:
                in_quote = not in_quote
            out.append(ch)
            i += 1
            continue
        if ch == "#" and not in_quote:
            newline = src.find("\n", i)
            if newline == -1:
                break
            out.append("\n")
            i = newline + 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _decode_escapes(raw: str) -> str:
    """Decode `\\"` and `\\\\`; any other backslash pair is left as written."""
    if "\\" not in raw:
        return raw
    out: list[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and i + 1 < len(raw) and raw[i + 1] in ('"', "\\"):
            out.append(raw[i + 1])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def tokenize(text: str | None) -> list[Token]:
    """Convert Paradox script text into a list of tokens.

    Args:
        text: Raw document text. `None` is treated as an empty document.

    Returns:
        The token sequence in source order. Never raises.
    """
    src = strip_comments((text or "").replace("\r\n", "\n").replace("\r", "\n"))
    tokens: list[Token] = []
    i = 0
    length = len(src)

    while i < length:
        ch = src[i]
        if ch.isspace():
            i += 1
            continue

        if ch == "{":
            tokens.append(Token(TokenKind.BRACE_OPEN, ch))
            i += 1
            continue
        if ch == "}":
            tokens.append(Token(TokenKind.BRACE_CLOSE, ch))
            i += 1
            continue
        if ch == "=":
            tokens.append(Token(TokenKind.EQUALS, ch))
            i += 1
            continue

        if ch == '"':
            j = i + 1
            terminated = False
            while j < length:
                if src[j] == '"' and _preceding_backslashes(src, j) % 2 == 0:
                    terminated = True
                    break
                j += 1
            if not terminated:
                logger.debug("Unterminated quoted string; consuming to end of input", offset=i)
            tokens.append(Token(TokenKind.QUOTED_STRING, _decode_escapes(src[i + 1 : j])))
            i = j + 1
            continue

        if ch in _COMPARATOR_CHARS:
            if i + 1 < length and src[i + 1] == "=":
                tokens.append(Token(TokenKind.COMPARATOR, ch + "="))
                i += 2
            else:
                tokens.append(Token(TokenKind.COMPARATOR, ch))
                i += 1
            continue

        j = i
        while j < length and not src[j].isspace() and src[j] not in _WORD_BREAKS:
            j += 1
        word = src[i:j]
        kind = TokenKind.NUMBER if NUMBER_PATTERN.match(word) else TokenKind.WORD
        tokens.append(Token(kind, word))
        i = j

    return tokens
