from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import cached_property
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping

from steamlocate.core.errors import LibraryListingDegraded, ManifestSkipped
from steamlocate.core.gameid import GameId
from steamlocate.core.libraryfolders import LibraryFolderResolver
from steamlocate.core.locator import RootLocator
from steamlocate.core.manifests import ManifestScanner, ScanResult
from steamlocate.core.models import Diagnostic, DiagnosticKind, LibraryFolder, Shortcut, Title
from steamlocate.core.shortcuts import ShortcutParser

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass(slots=True)
class DiscoveryOptions:
    steam_dir: Path | None = None
    # Library folders scanned concurrently; 1 keeps everything on the calling thread.
    max_workers: int = 1
    # Only read by the desktop browser; the core never loads shortcuts eagerly.
    include_shortcuts: bool = True


@dataclass(frozen=True)
class Snapshot:
    """Result of one discovery call. Nothing here changes after construction."""

    root: Path
    library_folders: tuple[LibraryFolder, ...]
    title_list: tuple[Title, ...]
    diagnostics: tuple[Diagnostic, ...] = ()
    shortcut_parser: ShortcutParser = field(default_factory=ShortcutParser, repr=False, compare=False)

    @cached_property
    def titles(self) -> Mapping[int, Title]:
        return MappingProxyType({title.app_id: title for title in self.title_list})

    def title(self, app_id: int) -> Title | None:
        return self.titles.get(app_id)

    @property
    def library_paths(self) -> list[Path]:
        return [folder.path for folder in self.library_folders]

    def shortcuts(self, user_id: str | None = None) -> list[Shortcut]:
        """Read shortcuts from disk; may raise ``ShortcutDecodeFailed``."""
        return self.shortcut_parser.discover(self.root, user_id=user_id)

    def shortcut_game_ids(self, user_id: str | None = None) -> list[GameId]:
        return [shortcut.game for shortcut in self.shortcuts(user_id)]


class SteamDiscovery:
    """Locate Steam and inventory its library folders and installed titles."""

    def __init__(
        self,
        options: DiscoveryOptions | None = None,
        locator: RootLocator | None = None,
        resolver: LibraryFolderResolver | None = None,
        scanner: ManifestScanner | None = None,
        shortcut_parser: ShortcutParser | None = None,
    ) -> None:
        self.options = options or DiscoveryOptions()
        self.locator = locator or RootLocator()
        self.resolver = resolver or LibraryFolderResolver()
        self.scanner = scanner or ManifestScanner()
        self.shortcut_parser = shortcut_parser or ShortcutParser()

    def discover(self, progress_callback: ProgressCallback | None = None) -> Snapshot:
        """Run a full discovery. Raises ``RootNotFound`` when Steam is absent."""
        root = self.locator.locate(self.options.steam_dir, progress_callback=progress_callback)
        diagnostics: list[Diagnostic] = []

        folders, listing_problems = self.resolver.resolve(root, progress_callback=progress_callback)
        diagnostics.extend(_listing_diagnostic(problem) for problem in listing_problems)

        scan_results = self._scan_folders(folders, progress_callback)

        titles: dict[int, Title] = {}
        for scan_result in scan_results:
            diagnostics.extend(_manifest_diagnostic(skipped) for skipped in scan_result.skipped)
            for title in scan_result.titles:
                if title.app_id in titles:
                    logger.debug(
                        "App %d in %s already found in %s; keeping the first",
                        title.app_id,
                        title.library_folder,
                        titles[title.app_id].library_folder,
                    )
                    continue
                titles[title.app_id] = title

        logger.info(
            "Discovered %d title(s) in %d library folder(s) with %d diagnostic(s)",
            len(titles),
            len(folders),
            len(diagnostics),
        )
        self._emit(progress_callback, f"[discover] {len(titles)} title(s), {len(diagnostics)} diagnostic(s)")
        return Snapshot(
            root=root,
            library_folders=tuple(folders),
            title_list=tuple(titles.values()),
            diagnostics=tuple(diagnostics),
            shortcut_parser=self.shortcut_parser,
        )

    def _scan_folders(
        self,
        folders: list[LibraryFolder],
        progress_callback: ProgressCallback | None,
    ) -> list[ScanResult]:
        workers = max(1, min(self.options.max_workers, len(folders)))
        if workers == 1:
            return [self.scanner.scan(folder, progress_callback) for folder in folders]
        # map() yields in submission order, so the first-folder-wins merge stays deterministic.
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda folder: self.scanner.scan(folder, progress_callback), folders))

    @staticmethod
    def _emit(callback: ProgressCallback | None, message: str) -> None:
        if callback is not None:
            callback(message)


def _listing_diagnostic(problem: LibraryListingDegraded) -> Diagnostic:
    return Diagnostic(kind=DiagnosticKind.LIBRARY_LISTING_DEGRADED, path=problem.path, message=problem.reason)


def _manifest_diagnostic(skipped: ManifestSkipped) -> Diagnostic:
    return Diagnostic(kind=DiagnosticKind.MANIFEST_SKIPPED, path=skipped.path, message=skipped.reason)


def locate(steam_dir: Path | None = None) -> Snapshot:
    """Shortcut for ``SteamDiscovery(DiscoveryOptions(steam_dir=...)).discover()``."""
    return SteamDiscovery(DiscoveryOptions(steam_dir=steam_dir)).discover()
