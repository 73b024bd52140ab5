from __future__ import annotations

import logging
import os
from pathlib import Path
import sys
from typing import Callable, Mapping

from steamlocate.config.platform_paths import (
    LINUX_CANDIDATE_DIRS,
    MACOS_CANDIDATE_DIRS,
    REGISTRY_LOCATIONS,
    STEAM_DIR_ENV,
    STEAMAPPS_DIR,
)
from steamlocate.core.errors import RootNotFound
from steamlocate.core.models import find_steamapps_dir

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def has_marker_dir(path: Path) -> bool:
    """True when ``path`` is a directory holding a ``steamapps`` subdirectory, in any case.

    Unreadable candidates count as missing.
    """
    return find_steamapps_dir(path) is not None


def read_registry_roots() -> list[Path]:
    """Steam root paths recorded in the Windows registry, in lookup order."""
    if sys.platform != "win32":
        return []
    import winreg

    roots: list[Path] = []
    for hive_name, key_path, value_name in REGISTRY_LOCATIONS:
        hive = getattr(winreg, hive_name)
        try:
            with winreg.OpenKey(hive, key_path) as key:
                value, value_type = winreg.QueryValueEx(key, value_name)
        except OSError:
            logger.debug("Registry value %s\\%s\\%s not present", hive_name, key_path, value_name)
            continue
        if value_type not in (winreg.REG_SZ, winreg.REG_EXPAND_SZ) or not isinstance(value, str) or not value:
            logger.debug("Registry value %s\\%s\\%s is not a path string", hive_name, key_path, value_name)
            continue
        roots.append(Path(os.path.expandvars(value)))
    return roots


class RootLocator:
    """Find the Steam installation root on the current platform."""

    def __init__(
        self,
        home: Path | None = None,
        platform: str | None = None,
        environ: Mapping[str, str] | None = None,
        registry_reader: Callable[[], list[Path]] = read_registry_roots,
    ) -> None:
        self._home = home
        self._platform = platform or sys.platform
        self._environ = os.environ if environ is None else environ
        self._registry_reader = registry_reader

    def candidates(self) -> list[Path]:
        """Ordered candidate roots for this platform, before marker checks."""
        if self._platform == "win32":
            return list(self._registry_reader())

        home = self._home or Path.home()
        relative_dirs = LINUX_CANDIDATE_DIRS
        if self._platform == "darwin":
            relative_dirs = MACOS_CANDIDATE_DIRS + LINUX_CANDIDATE_DIRS
        return [home / relative for relative in relative_dirs]

    def locate(self, override: Path | None = None, progress_callback: ProgressCallback | None = None) -> Path:
        """Return the Steam root, or raise ``RootNotFound``.

        An explicit ``override`` (or ``$STEAM_DIR``) must itself qualify;
        it is never replaced by probing.
        """
        if override is None and self._environ.get(STEAM_DIR_ENV):
            override = Path(self._environ[STEAM_DIR_ENV])

        if override is not None:
            root = override.expanduser()
            if has_marker_dir(root):
                self._emit(progress_callback, f"[locate] Using configured Steam root: {root}")
                return root.resolve()
            raise RootNotFound(f"Configured Steam directory {root} has no '{STEAMAPPS_DIR}' subdirectory")

        candidates = self.candidates()
        for candidate in candidates:
            logger.debug("Probing Steam root candidate %s", candidate)
            if has_marker_dir(candidate):
                root = candidate.resolve()
                logger.info("Found Steam root at %s", root)
                self._emit(progress_callback, f"[locate] Found Steam root: {root}")
                return root

        checked = ", ".join(str(path) for path in candidates) or "no candidates"
        raise RootNotFound(f"No Steam installation found (checked: {checked})")

    @staticmethod
    def _emit(callback: ProgressCallback | None, message: str) -> None:
        if callback is not None:
            callback(message)
