"""
Balanced bracket slicing for minified JavaScript.

Given text that starts at `{`, `[` or `(`, returns the text up to the matching
closing bracket. Brackets inside string literals and regex literals are
ignored, so the player's function bodies can be cut out without a parser.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional

from .errors import UnbalancedInputError

_BRACKETS = {"{": "}", "[": "]", "(": ")"}


@dataclass(frozen=True)
class _Literal:
    start: str
    end: str
    prefix: Optional[re.Pattern] = None   # must match the text before `start`


# A `/` only opens a regex after an operator, an opening bracket or
# `return` / `typeof`; after an identifier, number or `)` it's division.
_REGEX_PREFIX = re.compile(r"(?:^|[\[{(:;,/=!&|?+\-*%<>~^]|\b(?:return|typeof))\s?$")

_LITERALS = (
    _Literal('"', '"'),
    _Literal("'", "'"),
    _Literal("`", "`"),
    _Literal("/", "/", _REGEX_PREFIX),
)


def _opens_literal(text: str, i: int) -> Optional[_Literal]:
    ch = text[i]
    for lit in _LITERALS:
        if ch != lit.start:
            continue
        if lit.prefix is None or lit.prefix.search(text[max(0, i - 10):i]):
            return lit
    return None


def cut_balanced(text: str) -> str:
    """Return `text` up to and including the bracket closing its first char."""
    if not text or text[0] not in _BRACKETS:
        got = repr(text[0]) if text else "empty input"
        raise UnbalancedInputError(f"Can't cut code not starting with a bracket, got {got}")

    open_ch, close_ch = text[0], _BRACKETS[text[0]]
    literal: Optional[_Literal] = None
    escaped = False
    depth = 0

    for i, ch in enumerate(text):
        if literal is not None and not escaped and ch == literal.end:
            literal = None
            continue
        if literal is None and not escaped:
            literal = _opens_literal(text, i)
            if literal is not None:
                continue

        escaped = ch == "\\" and not escaped
        if literal is not None:
            continue

        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
        if depth == 0:
            return text[:i + 1]

    raise UnbalancedInputError(
        f"No matching {close_ch!r} found (depth {depth} after {len(text)} chars)")
