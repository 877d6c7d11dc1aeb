"""
Locate the signature decipher and n-transform routines inside a player script.

The player is minified and renamed on every release, so nothing is parsed:
  1. a fixed anchor string that precedes each routine's call site gives its name
  2. `<name>=function(a)` gives the definition, cut out with cut_balanced()
  3. the decipher routine also needs the helper table it calls into
     (`var Xy={...}`), found via the anchor inside the decipher body
  4. each piece is closed with a call on a placeholder argument, producing
     self-contained source an executor can evaluate

Anchors are kept as data below; when the player changes shape, add a pair.
"""
from __future__ import annotations
import logging
import re
from typing import Iterable

from .base import FragmentPair
from .jsslice import cut_balanced

log = logging.getLogger("playersig.extractor")

# ──────────────────────────────
#  Anchors: (left, right) pairs, tried in order
# ──────────────────────────────
MANIPULATION_ANCHORS: tuple[tuple[str, str], ...] = (
    ('a=a.split("");', "."),
)
DECIPHER_NAME_ANCHORS: tuple[tuple[str, str], ...] = (
    ('a.set("alr","yes");c&&(c=', "(decodeURIC"),
)
N_NAME_ANCHORS: tuple[tuple[str, str], ...] = (
    ('&&(b=a.get("n"))&&(b=', "(b)"),
)

# Names the trailing invocation passes to each routine; executors bind them.
SIG_ARGUMENT = "sig"
N_ARGUMENT = "ncode"

_INDEXED_NAME_RE = re.compile(r"^([\w$]+)\[(\d+)\]$")


def between(haystack: str, left: str, right: str) -> str:
    """Text between the first `left` and the next `right`, or ""."""
    start = haystack.find(left)
    if start < 0:
        return ""
    start += len(left)
    end = haystack.find(right, start)
    if end < 0:
        return ""
    return haystack[start:end]


def _first_between(haystack: str, anchors: Iterable[tuple[str, str]]) -> str:
    for left, right in anchors:
        found = between(haystack, left, right)
        if found:
            return found
    return ""


def _function_source(body: str, name: str) -> str:
    """`var <name>=function(a){...}` or "" when the definition isn't there."""
    start = f"{name}=function(a)"
    # `Kq=` must not match inside `aKq=` or `$Kq=`
    m = re.search(rf"(?<![\w$]){re.escape(start)}", body)
    if m is None:
        log.debug("definition %r not found", start)
        return ""
    return f"var {start}{cut_balanced(body[m.end():])}"


def _manipulations(body: str, caller: str) -> str:
    table = _first_between(caller, MANIPULATION_ANCHORS)
    if not table:
        return ""
    start = f"var {table}={{"
    ndx = body.find(start)
    if ndx < 0:
        log.debug("helper table %r not found", table)
        return ""
    return f"var {table}={cut_balanced(body[ndx + len(start) - 1:])}"


def extract_decipher(body: str) -> str:
    name = _first_between(body, DECIPHER_NAME_ANCHORS)
    if not name:
        log.warning("decipher function name not found")
        return ""
    log.debug("decipher function: %s", name)

    function = _function_source(body, name)
    if not function:
        return ""
    return f"{_manipulations(body, function)};{function};{name}({SIG_ARGUMENT});"


def _resolve_indexed(body: str, name: str) -> str:
    """`Xy[1]` → second element of the array literal `Xy=[...]`."""
    m = _INDEXED_NAME_RE.match(name)
    array, index = (m.group(1), int(m.group(2))) if m else (name.split("[")[0], 0)
    items = [i.strip() for i in between(body, f"{array}=[", "]").split(",")]
    if index >= len(items):
        return ""
    return items[index]


def extract_n_transform(body: str) -> str:
    name = _first_between(body, N_NAME_ANCHORS)
    if "[" in name:
        name = _resolve_indexed(body, name)
    if not name:
        log.warning("n-transform function name not found")
        return ""
    log.debug("n-transform function: %s", name)

    function = _function_source(body, name)
    if not function:
        return ""
    return f"{function};{name}({N_ARGUMENT});"


def extract_fragments(body: str) -> FragmentPair:
    """Both routines, each slot None when it could not be located."""
    return FragmentPair(
        decipher=extract_decipher(body) or None,
        n_transform=extract_n_transform(body) or None,
    )


def extract_functions(body: str) -> list[str]:
    """Located fragments in order: decipher first, then n-transform (0..2)."""
    return extract_fragments(body).to_list()
