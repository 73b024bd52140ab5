from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from steamlocate.config.platform_paths import (
    LIBRARY_LISTING_FALLBACK,
    LIBRARY_LISTING_NAME,
    LIBRARY_LISTING_ROOT_KEY,
)
from steamlocate.core.errors import KeyValuesDecodeError, LibraryListingDegraded
from steamlocate.core.keyvalues import KeyValues, load_text, parse_int_or_zero
from steamlocate.core.models import LibraryFolder

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def path_key(path: Path) -> str:
    """Comparison key for folder paths. Symlinks are followed, so ``~/.steam/steam`` matches its target."""
    try:
        resolved = Path(path).resolve()
    except (OSError, RuntimeError):
        resolved = Path(path)
    return os.path.normcase(os.path.normpath(str(resolved)))


class LibraryFolderResolver:
    """Read ``libraryfolders.vdf`` into an ordered, de-duplicated folder list.

    The root is always the first folder. Two listing shapes exist in the
    wild and are told apart per entry:

    * old: ``"1" "D:\\\\SteamLibrary"``
    * new: ``"1" { "path" "D:\\\\SteamLibrary" "label" "" ... }``
    """

    def listing_path(self, root: Path) -> Path | None:
        for candidate in (LibraryFolder(path=root).steamapps / LIBRARY_LISTING_NAME, root / LIBRARY_LISTING_FALLBACK):
            if candidate.is_file():
                return candidate
        return None

    def resolve(
        self,
        root: Path,
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[list[LibraryFolder], list[LibraryListingDegraded]]:
        """Return the library folders and any listing problem that was tolerated."""
        folders = [LibraryFolder(path=root)]
        problems: list[LibraryListingDegraded] = []

        listing = self.listing_path(root)
        if listing is None:
            logger.info("No library folder listing under %s; using the root only", root)
            self._emit(progress_callback, "[libraries] No listing found, using Steam root only.")
            return folders, problems

        try:
            entries = self._parse_listing(listing)
        except LibraryListingDegraded as exc:
            logger.warning("%s", exc)
            self._emit(progress_callback, f"[libraries] {exc}")
            problems.append(exc)
            return folders, problems

        seen = {path_key(root)}
        for folder in entries:
            key = path_key(folder.path)
            if key in seen:
                continue
            seen.add(key)
            folders.append(folder)

        logger.info("Found %d Steam library folder(s)", len(folders))
        self._emit(progress_callback, f"[libraries] Resolved {len(folders)} library folder(s) from {listing}")
        return folders, problems

    def _parse_listing(self, listing: Path) -> list[LibraryFolder]:
        try:
            document = load_text(listing)
        except OSError as exc:
            raise LibraryListingDegraded(listing, f"unreadable ({exc})") from exc
        except KeyValuesDecodeError as exc:
            raise LibraryListingDegraded(listing, str(exc)) from exc

        body = document.find_map(LIBRARY_LISTING_ROOT_KEY)
        if body is None:
            raise LibraryListingDegraded(listing, f"missing '{LIBRARY_LISTING_ROOT_KEY}' object")

        # Only numeric keys are folders; old listings mix in keys like "TimeNextStatsReport".
        indexed = sorted(
            ((int(key), value) for key, value in body.items() if key.isascii() and key.isdigit()),
            key=lambda item: item[0],
        )
        folders: list[LibraryFolder] = []
        for index, value in indexed:
            folder = self._entry_to_folder(value)
            if folder is None:
                logger.debug("Library entry %d in %s has no path; skipped", index, listing)
                continue
            folders.append(folder)
        return folders

    @staticmethod
    def _entry_to_folder(value) -> LibraryFolder | None:
        if isinstance(value, KeyValues):
            raw_path = value.find_text("path")
            if not raw_path:
                return None
            total_size = value.find("totalsize")
            return LibraryFolder(
                path=Path(raw_path),
                label=value.find_text("label") or None,
                content_id=value.find_text("contentid"),
                total_size=parse_int_or_zero(total_size) if total_size is not None else None,
            )
        if isinstance(value, str) and value:
            return LibraryFolder(path=Path(value))
        return None

    @staticmethod
    def _emit(callback: ProgressCallback | None, message: str) -> None:
        if callback is not None:
            callback(message)
