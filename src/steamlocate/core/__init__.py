"""Core discovery, parsing and model modules for steamlocate."""

from steamlocate.core.discovery import DiscoveryOptions, Snapshot, SteamDiscovery, locate
from steamlocate.core.errors import (
    KeyValuesDecodeError,
    LibraryListingDegraded,
    ManifestSkipped,
    RootNotFound,
    ShortcutDecodeFailed,
    SteamLocateError,
)
from steamlocate.core.gameid import GameId, GameIdKind
from steamlocate.core.models import Diagnostic, DiagnosticKind, LibraryFolder, Shortcut, StateFlag, Title

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiscoveryOptions",
    "GameId",
    "GameIdKind",
    "KeyValuesDecodeError",
    "LibraryFolder",
    "LibraryListingDegraded",
    "ManifestSkipped",
    "RootNotFound",
    "Shortcut",
    "ShortcutDecodeFailed",
    "Snapshot",
    "StateFlag",
    "SteamDiscovery",
    "SteamLocateError",
    "Title",
    "locate",
]
