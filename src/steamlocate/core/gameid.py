"""Steam identifiers derived for non-Steam shortcuts.

Steam names shortcut artwork and builds ``steam://rungameid/`` URLs from a
64-bit game id. The layout is not documented by Valve; it is the one used by
Steam ROM Manager and other community tools and is pinned by reference values
in the test suite:

* bits 0-23: app id (0 for shortcuts)
* bits 24-31: id kind (2 for shortcuts)
* bits 32-63: CRC-32 of executable + name, with the top bit set
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING
import zlib

if TYPE_CHECKING:
    from steamlocate.core.models import Shortcut

SHORTCUT_ID_HIGH_BIT = 0x80000000
SHORTCUT_KIND_BITS = 0x02000000


class GameIdKind(IntEnum):
    APP = 0
    GAME_MOD = 1
    SHORTCUT = 2
    P2P = 3


def shortcut_legacy_id(executable: str, name: str) -> int:
    """32-bit id Steam assigns to a shortcut created through its UI."""
    digest = zlib.crc32(executable.encode("utf-8") + name.encode("utf-8")) & 0xFFFFFFFF
    return digest | SHORTCUT_ID_HIGH_BIT


def shortcut_game_id(legacy_id: int) -> int:
    return ((legacy_id & 0xFFFFFFFF) << 32) | SHORTCUT_KIND_BITS


@dataclass(slots=True, frozen=True)
class GameId:
    value: int

    @classmethod
    def from_shortcut(cls, shortcut: Shortcut) -> GameId:
        return cls(shortcut.game_id)

    @property
    def app_id(self) -> int:
        return self.value & 0xFFFFFF

    @property
    def kind(self) -> GameIdKind:
        return GameIdKind((self.value >> 24) & 0xFF)

    @property
    def mod_id(self) -> int:
        return self.value >> 32

    @property
    def is_shortcut(self) -> bool:
        return self.kind is GameIdKind.SHORTCUT

    @property
    def rungameid_url(self) -> str:
        return f"steam://rungameid/{self.value}"

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
