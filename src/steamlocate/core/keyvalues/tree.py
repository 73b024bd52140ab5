"""Shared tree model produced by both KeyValues decoders.

A node is either a leaf (``str``, or ``int`` for binary integer records) or a
``KeyValues`` mapping. Mappings keep insertion order; a repeated key keeps its
first position and takes the last value written.
"""
from __future__ import annotations

import re
from typing import Union


class KeyValues(dict):
    """Ordered mapping of string keys to KeyValueNode values."""

    def find(self, key: str, default: KeyValueNode | None = None) -> KeyValueNode | None:
        """Look up ``key`` exactly, then case-insensitively."""
        if key in self:
            return self[key]
        folded = key.casefold()
        for existing_key, value in self.items():
            if existing_key.casefold() == folded:
                return value
        return default

    def find_map(self, key: str) -> KeyValues | None:
        value = self.find(key)
        return value if isinstance(value, KeyValues) else None

    def find_text(self, key: str, default: str | None = None) -> str | None:
        value = self.find(key)
        if isinstance(value, KeyValues) or value is None:
            return default
        return str(value)

    def children(self) -> list[tuple[str, KeyValues]]:
        """Return the (key, mapping) pairs, skipping leaf values."""
        return [(key, value) for key, value in self.items() if isinstance(value, KeyValues)]

    def to_dict(self) -> dict:
        """Plain nested ``dict`` copy, convenient for comparisons and JSON."""
        result: dict = {}
        for key, value in self.items():
            result[key] = value.to_dict() if isinstance(value, KeyValues) else value
        return result


KeyValueNode = Union[str, int, KeyValues]

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


def parse_int_or_zero(value: KeyValueNode | None) -> int:
    """Coerce a leaf to ``int``; anything unparsable becomes 0.

    Manifests can be read while Steam is rewriting them, so a half-written
    number must not abort the scan.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return 0
    text = value.strip()
    if not _DECIMAL_RE.fullmatch(text):
        return 0
    return int(text, 10)
