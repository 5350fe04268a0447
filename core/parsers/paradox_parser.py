"""Parse Paradox script tokens into a generic value tree.

The grammar is ambiguous: the same `{ ... }` block may be a list (`{ a b c }`),
a keyed mapping (`{ a = 1 b = 2 }`), or a mix of both. The parser collects keyed
entries and bare items separately and resolves the block shape once it is closed:

- no keyed entries: the block is a plain ``list``;
- keyed entries only: the block is a ``dict``;
- both: the block is a ``dict`` with the bare items stored under ``items``.

Repeated keys coalesce into a [`MultiValue`](core/parsers/paradox_parser.py), so
consumers can tell "this key was declared several times" apart from "this key holds
a list block".

Malformed input (unbalanced braces, a dangling ``=``, truncated quotes) never
raises; parsing simply stops at end of input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from .paradox_lexer import Token, TokenKind, tokenize

logger = structlog.get_logger(__name__)

MIXED_ITEMS_KEY = "items"


class MultiValue(list):
    """Ordered values of a key that was assigned more than once in one block."""

    def __repr__(self) -> str:
        return f"MultiValue({list.__repr__(self)})"


class ComparisonExpr(str):
    """A ``name <op> operand`` expression found inside a block.

    The string value is the formatted expression (e.g. ``"num_pops > 10"``) so it
    behaves like any other bare list item; the parts stay available as attributes.
    """

    name: str
    operator: str
    operand: str | None
    _quoted: bool

    def __new__(cls, name: str, operator: str, operand: str | None = None, quoted: bool = False) -> ComparisonExpr:
        if operand is None:
            text = f"{name} {operator}"
        elif quoted:
            text = f'{name} {operator} "{operand}"'
        else:
            text = f"{name} {operator} {operand}"
        instance = super().__new__(cls, text)
        instance.name = name
        instance.operator = operator
        instance.operand = operand
        instance._quoted = quoted
        return instance

    def __getnewargs__(self) -> tuple[str, str, str | None, bool]:  # type: ignore[override]
        return (self.name, self.operator, self.operand, self._quoted)


def _to_number(text: str) -> int | float:
    return float(text) if "." in text else int(text)


def assign_coalescing(mapping: dict[str, Any], key: str, value: Any) -> None:
    """Assign ``value`` to ``key``, turning repeated keys into a ``MultiValue``."""
    if key not in mapping:
        mapping[key] = value
        return
    existing = mapping[key]
    if isinstance(existing, MultiValue):
        existing.append(value)
    else:
        mapping[key] = MultiValue([existing, value])


@dataclass
class _BlockFrame:
    """An open block: its keyed part, its bare part, and the key awaiting a nested block."""

    mapping: dict[str, Any] = field(default_factory=dict)
    items: list[Any] = field(default_factory=list)
    pending_key: str | None = None

    def attach(self, value: Any) -> None:
        if self.pending_key is None:
            self.items.append(value)
        else:
            assign_coalescing(self.mapping, self.pending_key, value)
            self.pending_key = None

    def resolve(self) -> dict[str, Any] | list[Any]:
        if not self.mapping:
            return self.items
        if self.items:
            assign_coalescing(self.mapping, MIXED_ITEMS_KEY, self.items)
        return self.mapping


class ParadoxParser:
    """Block parser over a [`tokenize()`](core/parsers/paradox_lexer.py) stream."""

    def __init__(self) -> None:
        self.tokens: list[Token] = []
        self.idx = 0

    def parse_file(self, path: str | Path) -> dict[str, Any]:
        """Read a UTF-8 (optionally BOM-prefixed) file and parse it.

        I/O errors propagate to the caller; wrapping them is the loader's concern.
        """
        with open(path, encoding="utf-8-sig") as f:
            content = f.read()
        return self.parse(content)

    def parse(self, source: str | list[Token] | None) -> dict[str, Any]:
        """Parse a whole document into its top-level mapping.

        Args:
            source: Raw text, or a token list already produced by the lexer.

        Returns:
            The document as a ``dict``. Bare top-level words are assigned ``True``.
        """
        self.tokens = source if isinstance(source, list) else tokenize(source)
        self.idx = 0

        out: dict[str, Any] = {}
        while self._peek() is not None:
            tk = self._next()
            if tk.kind is not TokenKind.WORD:
                continue
            nxt = self._peek()
            if nxt is not None and nxt.kind is TokenKind.EQUALS:
                self._next()
                assign_coalescing(out, tk.text, self._parse_value())
            else:
                # Bare top-level token (rare).
                assign_coalescing(out, tk.text, True)
        return out

    def _peek(self) -> Token | None:
        return self.tokens[self.idx] if self.idx < len(self.tokens) else None

    def _next(self) -> Token:
        tk = self.tokens[self.idx]
        self.idx += 1
        return tk

    def _parse_value(self) -> Any:
        tk = self._peek()
        if tk is None:
            return None
        if tk.kind is TokenKind.BRACE_CLOSE:
            # Dangling "=" right before a closing brace; leave the brace for the block.
            return None

        self._next()
        if tk.kind is TokenKind.BRACE_OPEN:
            return self._parse_block()
        return self._scalar(tk)

    @staticmethod
    def _scalar(tk: Token) -> Any:
        if tk.kind is TokenKind.QUOTED_STRING:
            return tk.text
        if tk.kind is TokenKind.NUMBER:
            return _to_number(tk.text)
        if tk.kind is TokenKind.WORD:
            if tk.text == "yes":
                return True
            if tk.text == "no":
                return False
        return tk.text

    def _parse_block(self) -> dict[str, Any] | list[Any]:
        """Parse the contents of a block; the opening ``{`` is already consumed.

        Nested blocks are tracked on an explicit stack of ``_BlockFrame``s, so nesting
        depth is bounded by memory rather than by the interpreter's recursion limit.
        """
        stack = [_BlockFrame()]

        while True:
            frame = stack[-1]
            tk = self._peek()
            if tk is None:
                logger.debug("Unbalanced block closed at end of input", token_index=self.idx, open_blocks=len(stack))
                value = frame.resolve()
                while len(stack) > 1:
                    stack.pop()
                    stack[-1].attach(value)
                    value = stack[-1].resolve()
                return value
            if tk.kind is TokenKind.BRACE_CLOSE:
                self._next()
                stack.pop()
                if not stack:
                    return frame.resolve()
                stack[-1].attach(frame.resolve())
                continue

            if tk.kind is TokenKind.WORD:
                name = self._next().text
                nxt = self._peek()
                if nxt is not None and nxt.kind is TokenKind.EQUALS:
                    self._next()
                    nxt = self._peek()
                    if nxt is not None and nxt.kind is TokenKind.BRACE_OPEN:
                        self._next()
                        frame.pending_key = name
                        stack.append(_BlockFrame())
                    else:
                        assign_coalescing(frame.mapping, name, self._parse_value())
                elif nxt is not None and nxt.kind is TokenKind.COMPARATOR:
                    frame.items.append(self._parse_comparison(name))
                elif nxt is not None and nxt.kind is TokenKind.BRACE_OPEN:
                    # "name { ... }" without "=" is treated as an assignment.
                    self._next()
                    frame.pending_key = name
                    stack.append(_BlockFrame())
                else:
                    frame.items.append(name)
                continue

            self._next()
            if tk.kind is TokenKind.BRACE_OPEN:
                frame.pending_key = None
                stack.append(_BlockFrame())
            elif tk.kind is TokenKind.NUMBER:
                frame.items.append(_to_number(tk.text))
            else:
                frame.items.append(tk.text)

    def _parse_comparison(self, name: str) -> ComparisonExpr:
        operator = self._next().text
        operand = self._peek()
        if operand is None or operand.kind in (TokenKind.BRACE_OPEN, TokenKind.BRACE_CLOSE):
            return ComparisonExpr(name, operator)
        self._next()
        return ComparisonExpr(name, operator, operand.text, quoted=operand.kind is TokenKind.QUOTED_STRING)


def parse_text(text: str | None) -> dict[str, Any]:
    """Parse Paradox script text with a fresh parser."""
    return ParadoxParser().parse(text)
