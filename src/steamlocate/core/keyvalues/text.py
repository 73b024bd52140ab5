"""Decoder for the human-readable KeyValues dialect (``.vdf`` / ``.acf``)."""
from __future__ import annotations

from pathlib import Path

from steamlocate.core.errors import KeyValuesDecodeError
from steamlocate.core.keyvalues.lexer import TokenKind, tokenize
from steamlocate.core.keyvalues.tree import KeyValues

_UTF8_BOM = "\ufeff"


def decode_text(data: str | bytes) -> KeyValues:
    """Decode a text KeyValues document into a ``KeyValues`` tree.

    The document must contain a root object (``"Root" { ... }``). Unbalanced
    braces, a dangling key, or invalid UTF-8 raise ``KeyValuesDecodeError``.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise KeyValuesDecodeError(f"Invalid UTF-8 at byte {exc.start}") from exc
    else:
        text = data
    if text.startswith(_UTF8_BOM):
        text = text[1:]

    root = KeyValues()
    stack: list[KeyValues] = [root]
    pending_key: str | None = None
    pending_line = 1

    for token in tokenize(text):
        if token.kind is TokenKind.STRING:
            if pending_key is None:
                pending_key = token.value
                pending_line = token.line
            else:
                stack[-1][pending_key] = token.value
                pending_key = None
        elif token.kind is TokenKind.OPEN:
            if pending_key is None:
                raise KeyValuesDecodeError("Object opened without a key", line=token.line)
            child = KeyValues()
            stack[-1][pending_key] = child
            stack.append(child)
            pending_key = None
        else:
            if pending_key is not None:
                raise KeyValuesDecodeError(f"Key {pending_key!r} has no value", line=pending_line)
            if len(stack) == 1:
                raise KeyValuesDecodeError("Unbalanced closing brace", line=token.line)
            stack.pop()

    if pending_key is not None:
        raise KeyValuesDecodeError(f"Key {pending_key!r} has no value", line=pending_line)
    if len(stack) > 1:
        raise KeyValuesDecodeError(f"{len(stack) - 1} unclosed object(s) at end of document")
    if not root.children():
        raise KeyValuesDecodeError("Document has no root object")
    return root


def load_text(path: Path) -> KeyValues:
    """Read and decode ``path``. ``OSError`` from the read propagates."""
    return decode_text(path.read_bytes())
