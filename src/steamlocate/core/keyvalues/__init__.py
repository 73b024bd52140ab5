"""KeyValues (VDF) decoders sharing one tree model."""

from steamlocate.core.keyvalues.binary import decode_binary, encode_binary
from steamlocate.core.keyvalues.text import decode_text, load_text
from steamlocate.core.keyvalues.tree import KeyValueNode, KeyValues, parse_int_or_zero

__all__ = [
    "KeyValueNode",
    "KeyValues",
    "decode_binary",
    "decode_text",
    "encode_binary",
    "load_text",
    "parse_int_or_zero",
]
