"""Tokenizer for the text KeyValues dialect.

Yields quoted and bare strings and braces with their line numbers. Comments,
commas and platform conditionals such as ``[$WIN]`` are dropped.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Iterator

from steamlocate.core.errors import KeyValuesDecodeError


class TokenKind(str, Enum):
    STRING = "string"
    OPEN = "open"
    CLOSE = "close"


@dataclass(slots=True, frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int


_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\n)
    | (?P<space>[ \t\r\f\v,]+)
    | (?P<comment>//[^\n]*)
    | (?P<quoted>"(?:\\.|[^"\\])*")
    | (?P<open>\{)
    | (?P<close>\})
    | (?P<conditional>\[[^\]\n]*\])
    | (?P<bare>[^\s{}"\[\],]+)
    | (?P<invalid>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    '"': '"',
}

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def _unescape(raw: str) -> str:
    # Unknown sequences are kept verbatim.
    return _ESCAPE_RE.sub(lambda match: _ESCAPES.get(match.group(1), match.group(0)), raw)


def tokenize(text: str) -> Iterator[Token]:
    """Yield string and brace tokens; comments, commas and conditionals are dropped."""
    line = 1
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        if kind == "newline":
            line += 1
        elif kind in ("space", "comment", "conditional"):
            continue
        elif kind == "quoted":
            yield Token(TokenKind.STRING, _unescape(value[1:-1]), line)
            line += value.count("\n")
        elif kind == "bare":
            yield Token(TokenKind.STRING, value, line)
        elif kind == "open":
            yield Token(TokenKind.OPEN, value, line)
        elif kind == "close":
            yield Token(TokenKind.CLOSE, value, line)
        else:
            if value == '"':
                raise KeyValuesDecodeError("Unterminated quoted string", line=line)
            raise KeyValuesDecodeError(f"Unexpected character {value!r}", line=line)
