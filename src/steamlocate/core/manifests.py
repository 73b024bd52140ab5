from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable

from steamlocate.config.platform_paths import APP_MANIFEST_GLOB, APP_MANIFEST_ROOT_KEY
from steamlocate.core.errors import KeyValuesDecodeError, ManifestSkipped
from steamlocate.core.keyvalues import KeyValues, load_text, parse_int_or_zero
from steamlocate.core.models import LibraryFolder, Title

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class ManifestParser:
    """Turn one ``appmanifest_<id>.acf`` file into a ``Title``."""

    def parse(self, manifest_path: Path, library_folder: Path) -> Title:
        try:
            document = load_text(manifest_path)
        except OSError as exc:
            raise ManifestSkipped(manifest_path, f"unreadable ({exc})") from exc
        except KeyValuesDecodeError as exc:
            raise ManifestSkipped(manifest_path, str(exc)) from exc
        return self.from_keyvalues(document, manifest_path, library_folder)

    def from_keyvalues(self, document: KeyValues, manifest_path: Path, library_folder: Path) -> Title:
        app_state = document.find_map(APP_MANIFEST_ROOT_KEY)
        if app_state is None:
            raise ManifestSkipped(manifest_path, f"missing '{APP_MANIFEST_ROOT_KEY}' object")

        # 'appid' is usual; manifests written by older clients use 'appID'.
        app_id = parse_int_or_zero(app_state.find("appid"))
        if app_id <= 0:
            raise ManifestSkipped(manifest_path, "missing or invalid app id")

        name = app_state.find_text("name")
        if not name:
            # Older installations only record the name under UserConfig.
            user_config = app_state.find_map("UserConfig")
            name = user_config.find_text("name") if user_config is not None else None

        return Title(
            app_id=app_id,
            name=name or None,
            install_dir=app_state.find_text("installdir") or None,
            library_folder=library_folder,
            manifest_path=manifest_path,
            size_on_disk=parse_int_or_zero(app_state.find("SizeOnDisk")),
            state_flags=parse_int_or_zero(app_state.find("StateFlags")),
            last_updated=parse_int_or_zero(app_state.find("LastUpdated")),
            build_id=parse_int_or_zero(app_state.find("buildid")),
            last_owner=parse_int_or_zero(app_state.find("LastOwner")),
            sections=dict(app_state.children()),
        )


@dataclass(slots=True)
class ScanResult:
    library_folder: LibraryFolder
    titles: list[Title] = field(default_factory=list)
    skipped: list[ManifestSkipped] = field(default_factory=list)


class ManifestScanner:
    """Scan one library folder's ``steamapps`` directory for app manifests."""

    def __init__(self, parser: ManifestParser | None = None) -> None:
        self.parser = parser or ManifestParser()

    def manifest_paths(self, library_folder: LibraryFolder) -> list[Path]:
        steamapps = library_folder.steamapps
        if not steamapps.is_dir():
            return []
        return sorted(steamapps.glob(APP_MANIFEST_GLOB), key=lambda path: path.name)

    def scan(self, library_folder: LibraryFolder, progress_callback: ProgressCallback | None = None) -> ScanResult:
        result = ScanResult(library_folder=library_folder)
        manifest_paths = self.manifest_paths(library_folder)
        if not manifest_paths:
            logger.debug("No app manifests in %s", library_folder.steamapps)

        for manifest_path in manifest_paths:
            try:
                title = self.parser.parse(manifest_path, library_folder.path)
            except ManifestSkipped as exc:
                logger.warning("%s", exc)
                result.skipped.append(exc)
                continue
            result.titles.append(title)

        self._emit(
            progress_callback,
            f"[scan] {library_folder.path}: {len(result.titles)} title(s), {len(result.skipped)} skipped",
        )
        return result

    @staticmethod
    def _emit(callback: ProgressCallback | None, message: str) -> None:
        if callback is not None:
            callback(message)
