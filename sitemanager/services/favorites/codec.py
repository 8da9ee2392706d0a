"""Decode the stored ``favoriteSites`` attribute into a set of site ids.

Favorites are written as a DynamoDB string set today, but older writers stored
a list, or a JSON array serialized into a plain string. Each encoding has a
decode strategy; strategies are tried in a fixed order and the first one that
recognises the attribute's type tag wins. Malformed fragments are skipped,
never raised.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

FavoriteDecoder = Callable[[Mapping[str, Any]], "set[str] | None"]


def _decode_string_set(attribute: Mapping[str, Any]) -> set[str] | None:
    if "SS" not in attribute:
        return None
    return {value for value in attribute["SS"] or () if isinstance(value, str)}


def _decode_list(attribute: Mapping[str, Any]) -> set[str] | None:
    if "L" not in attribute:
        return None

    decoded: set[str] = set()
    for entry in attribute["L"] or ():
        value = entry.get("S") if isinstance(entry, Mapping) else entry
        if isinstance(value, str):
            decoded.add(value)
    return decoded


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value)


def _decode_string(attribute: Mapping[str, Any]) -> set[str] | None:
    raw = attribute.get("S")
    if not isinstance(raw, str) or not raw:
        return None

    try:
        parsed = json.loads(raw)
    except ValueError:
        # Unparsable text is a single bare identifier.
        return {raw}
    if not isinstance(parsed, list):
        return set()
    return {_stringify(value) for value in parsed}


DECODERS: tuple[FavoriteDecoder, ...] = (
    _decode_string_set,
    _decode_list,
    _decode_string,
)


def decode_favorite_ids(attribute: Mapping[str, Any] | None) -> set[str]:
    """Return the unique site ids encoded in ``attribute``.

    ``None``, a ``{"NULL": true}`` marker, or any unrecognised shape decode to
    an empty set.
    """

    if not isinstance(attribute, Mapping):
        return set()

    for decoder in DECODERS:
        decoded = decoder(attribute)
        if decoded is not None:
            return decoded
    return set()


__all__ = ["DECODERS", "FavoriteDecoder", "decode_favorite_ids"]
