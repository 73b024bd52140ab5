from __future__ import annotations

from pathlib import Path


class SteamLocateError(Exception):
    """Base class for every error raised by steamlocate."""


class RootNotFound(SteamLocateError):
    """Raised when no Steam installation root can be located."""


class KeyValuesDecodeError(SteamLocateError, ValueError):
    """Raised when a text or binary KeyValues document is malformed.

    ``line`` is set by the text decoder, ``offset`` by the binary decoder.
    """

    def __init__(self, message: str, line: int | None = None, offset: int | None = None) -> None:
        self.line = line
        self.offset = offset
        if line is not None:
            message = f"{message} (line {line})"
        elif offset is not None:
            message = f"{message} (offset {offset})"
        super().__init__(message)


class LibraryListingDegraded(SteamLocateError):
    """The library folder listing could not be used; only the root is scanned."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Library listing {path} ignored: {reason}")


class ManifestSkipped(SteamLocateError):
    """A single app manifest could not be parsed and was left out of the scan."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Skipped manifest {path}: {reason}")


class ShortcutDecodeFailed(SteamLocateError):
    """A shortcuts file could not be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to decode shortcuts {path}: {reason}")
