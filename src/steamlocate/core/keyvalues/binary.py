"""Binary KeyValues dialect, as used by ``userdata/<id>/config/shortcuts.vdf``.

Each record is a type byte, a NUL-terminated key and a payload:

* ``0x00`` nested object, closed by ``0x08``
* ``0x01`` NUL-terminated string
* ``0x02`` 32-bit little-endian unsigned integer

The implicit root object is closed by a final ``0x08``.
"""
from __future__ import annotations

import logging
import struct
from typing import Iterator

from steamlocate.core.errors import KeyValuesDecodeError
from steamlocate.core.keyvalues.tree import KeyValueNode, KeyValues

logger = logging.getLogger(__name__)

TYPE_MAP = 0x00
TYPE_STR = 0x01
TYPE_INT = 0x02
TYPE_END = 0x08

_KNOWN_TYPES = {TYPE_MAP, TYPE_STR, TYPE_INT, TYPE_END}
_INT32 = struct.Struct("<I")


def _read_cstring(data: bytes, pos: int) -> tuple[str, int]:
    end = data.find(b"\x00", pos)
    if end == -1:
        raise KeyValuesDecodeError("Unterminated string", offset=pos)
    return data[pos:end].decode("utf-8", errors="replace"), end + 1


def decode_binary(data: bytes) -> KeyValues:
    """Decode a binary KeyValues stream in a single pass.

    Nesting is tracked with an explicit stack, so hostile nesting depth
    cannot exhaust the interpreter's recursion limit.
    """
    root = KeyValues()
    stack: list[KeyValues] = [root]
    pos = 0
    size = len(data)

    while True:
        if pos >= size:
            raise KeyValuesDecodeError(
                f"Unexpected end of data with {len(stack)} object(s) still open", offset=pos
            )
        tag = data[pos]
        if tag not in _KNOWN_TYPES:
            raise KeyValuesDecodeError(f"Unknown record type 0x{tag:02x}", offset=pos)
        pos += 1

        if tag == TYPE_END:
            stack.pop()
            if not stack:
                break
            continue

        key, pos = _read_cstring(data, pos)
        if tag == TYPE_MAP:
            child = KeyValues()
            stack[-1][key] = child
            stack.append(child)
        elif tag == TYPE_STR:
            value, pos = _read_cstring(data, pos)
            stack[-1][key] = value
        else:
            if pos + _INT32.size > size:
                raise KeyValuesDecodeError(f"Truncated integer for key {key!r}", offset=pos)
            (number,) = _INT32.unpack_from(data, pos)
            pos += _INT32.size
            stack[-1][key] = number

    if pos < size:
        logger.debug("Ignoring %d trailing byte(s) after binary KeyValues root", size - pos)
    return root


def encode_binary(tree: KeyValues) -> bytes:
    """Encode ``tree`` with the framing read by ``decode_binary``."""
    out = bytearray()
    stack: list[Iterator[tuple[str, KeyValueNode]]] = [iter(tree.items())]

    while stack:
        try:
            key, value = next(stack[-1])
        except StopIteration:
            stack.pop()
            out.append(TYPE_END)
            continue

        encoded_key = _encode_cstring(key)
        if isinstance(value, dict):
            out.append(TYPE_MAP)
            out += encoded_key
            stack.append(iter(value.items()))
        elif isinstance(value, int):
            out.append(TYPE_INT)
            out += encoded_key
            out += _INT32.pack(value & 0xFFFFFFFF)
        elif isinstance(value, str):
            out.append(TYPE_STR)
            out += encoded_key
            out += _encode_cstring(value)
        else:
            raise TypeError(f"Cannot encode {type(value).__name__} value for key {key!r}")

    return bytes(out)


def _encode_cstring(value: str) -> bytes:
    raw = value.encode("utf-8")
    if b"\x00" in raw:
        raise ValueError(f"String contains NUL byte: {value!r}")
    return raw + b"\x00"
