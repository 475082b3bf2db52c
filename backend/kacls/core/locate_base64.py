"""Base64 Locator: finds key material inside an arbitrarily shaped JSON body.

Invariants:
    - Preferred names are tried before any structural search
    - Within preferred names, earlier names win
    - Structural search is depth first: arrays in index order, objects in insertion order
    - Never raises; None is the only negative signal
    - Subtrees deeper than max_depth are not searched
    - Each subtree is searched at most once per level, so nesting cost stays linear

Design Decisions:
    - "Looks like base64" is a heuristic, not validation. Standard and URL-safe
      alphabets are both admitted, even mixed within one string, so that
      non-canonical client payloads are not rejected here.
"""

import re
from collections.abc import Sequence

from kacls.core.domain_types import JsonValue, LocatedField

MIN_BASE64_LENGTH = 8
DEFAULT_MAX_DEPTH = 64

_BASE64_ISH = re.compile(r"[A-Za-z0-9+/_-]+=*")


def looks_like_base64(value: object) -> bool:
    """True for strings of 8+ chars drawn from either base64 alphabet."""
    return (
        isinstance(value, str)
        and len(value) >= MIN_BASE64_LENGTH
        and _BASE64_ISH.fullmatch(value) is not None
    )


def locate_base64(
    body: JsonValue,
    preferred_names: Sequence[str] = (),
    recursive: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> LocatedField | None:
    """Return the first plausible base64 string in body, or None.

    Preferred names are checked on every object visited, so a preferred
    field nested several levels down still beats a non-preferred field
    at the top level.
    """
    return _locate(body, tuple(preferred_names), recursive, max_depth, 0)


def _locate(
    body: JsonValue,
    preferred: tuple[str, ...],
    recursive: bool,
    max_depth: int,
    depth: int,
) -> LocatedField | None:
    if depth > max_depth or not isinstance(body, (dict, list)):
        return None

    found = _search_preferred(body, preferred, recursive, max_depth, depth)
    if found or not recursive:
        return found

    if isinstance(body, list):
        return _search_list(body, preferred, max_depth, depth)
    return _search_dict(body, preferred, max_depth, depth)


def _search_preferred(
    body: JsonValue,
    preferred: tuple[str, ...],
    recursive: bool,
    max_depth: int,
    depth: int,
) -> LocatedField | None:
    if not isinstance(body, dict):
        return None
    for name in preferred:
        if name not in body:
            continue
        value = body[name]
        if looks_like_base64(value):
            return LocatedField(field_name=name, raw_value=value, path=name)
        if isinstance(value, (dict, list)):
            inner = _locate(value, preferred, recursive, max_depth, depth + 1)
            if inner:
                return _prefixed(name, inner)
    return None


def _search_list(
    body: list[JsonValue],
    preferred: tuple[str, ...],
    max_depth: int,
    depth: int,
) -> LocatedField | None:
    for index, item in enumerate(body):
        segment = f"[{index}]"
        if looks_like_base64(item):
            return LocatedField(field_name=segment, raw_value=item, path=segment)
        inner = _locate(item, preferred, True, max_depth, depth + 1)
        if inner:
            return _prefixed(segment, inner)
    return None


def _search_dict(
    body: dict[str, JsonValue],
    preferred: tuple[str, ...],
    max_depth: int,
    depth: int,
) -> LocatedField | None:
    for key, value in body.items():
        if key in preferred:
            continue  # already searched by _search_preferred
        if looks_like_base64(value):
            return LocatedField(field_name=key, raw_value=value, path=key)
        inner = _locate(value, preferred, True, max_depth, depth + 1)
        if inner:
            return _prefixed(key, inner)
    return None


def _prefixed(segment: str, found: LocatedField) -> LocatedField:
    """Prepend a path segment: key.rest, key[0].rest, [0].rest."""
    joiner = "" if found.path.startswith("[") else "."
    return LocatedField(
        field_name=found.field_name,
        raw_value=found.raw_value,
        path=f"{segment}{joiner}{found.path}",
    )
