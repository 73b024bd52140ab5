from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntFlag
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Mapping

from steamlocate.config.platform_paths import COMMON_DIR, STEAMAPPS_DIR
from steamlocate.core.gameid import GameId, shortcut_game_id, shortcut_legacy_id
from steamlocate.core.keyvalues.tree import KeyValues


class StateFlag(IntFlag):
    INVALID = 0
    UNINSTALLED = 1
    UPDATE_REQUIRED = 2
    FULLY_INSTALLED = 4
    ENCRYPTED = 8
    LOCKED = 16
    FILES_MISSING = 32
    APP_RUNNING = 64
    FILES_CORRUPT = 128
    UPDATE_RUNNING = 256
    UPDATE_PAUSED = 512
    UPDATE_STARTED = 1024
    UNINSTALLING = 2048
    BACKUP_RUNNING = 4096
    RECONFIGURING = 65536
    VALIDATING = 131072
    ADDING_FILES = 262144
    PREALLOCATING = 524288
    DOWNLOADING = 1048576
    STAGING = 2097152
    COMMITTING = 4194304
    UPDATE_STOPPING = 8388608


def find_steamapps_dir(path: Path) -> Path | None:
    """The ``steamapps`` directory under ``path`` in whatever case it exists on disk."""
    exact = path / STEAMAPPS_DIR
    try:
        if exact.is_dir():
            return exact
        for entry in path.iterdir():
            if entry.name.lower() == STEAMAPPS_DIR and entry.is_dir():
                return entry
    except OSError:
        return None
    return None


class DiagnosticKind(str, Enum):
    LIBRARY_LISTING_DEGRADED = "library_listing_degraded"
    MANIFEST_SKIPPED = "manifest_skipped"


@dataclass(slots=True, frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    path: Path
    message: str


@dataclass(slots=True, frozen=True)
class LibraryFolder:
    path: Path
    label: str | None = None
    content_id: str | None = None
    total_size: int | None = None

    @property
    def steamapps(self) -> Path:
        return find_steamapps_dir(self.path) or self.path / STEAMAPPS_DIR

    @property
    def common(self) -> Path:
        return self.steamapps / COMMON_DIR


@dataclass(slots=True, frozen=True)
class Title:
    app_id: int
    name: str | None
    install_dir: str | None
    library_folder: Path
    manifest_path: Path
    size_on_disk: int = 0
    state_flags: int = 0
    last_updated: int = 0
    build_id: int = 0
    last_owner: int = 0
    sections: Mapping[str, KeyValues] = field(default_factory=dict, compare=False)

    @property
    def path(self) -> Path | None:
        """Absolute install directory, next to the steamapps directory holding the manifest."""
        if not self.install_dir:
            return None
        return self.manifest_path.parent / COMMON_DIR / self.install_dir

    @property
    def state(self) -> StateFlag:
        return StateFlag(self.state_flags)

    @property
    def is_fully_installed(self) -> bool:
        return StateFlag.FULLY_INSTALLED in self.state

    @property
    def last_updated_at(self) -> datetime | None:
        if self.last_updated <= 0:
            return None
        try:
            return datetime.fromtimestamp(self.last_updated, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    def section(self, name: str) -> KeyValues | None:
        folded = name.casefold()
        for key, value in self.sections.items():
            if key.casefold() == folded:
                return value
        return None


@dataclass(slots=True, frozen=True)
class Shortcut:
    """A non-Steam game added to a user's library."""

    executable: str
    start_dir: str
    name: str
    icon: str = ""
    tags: tuple[str, ...] = ()
    launch_options: str = ""
    hidden: bool = False
    stored_app_id: int | None = None
    user_id: str | None = None
    source_path: Path | None = field(default=None, compare=False)
    legacy_id: int = field(init=False)
    game_id: int = field(init=False)

    def __post_init__(self) -> None:
        legacy_id = shortcut_legacy_id(self.executable, self.name)
        object.__setattr__(self, "legacy_id", legacy_id)
        object.__setattr__(self, "game_id", shortcut_game_id(legacy_id))

    @classmethod
    def create(cls, name: str, executable: str) -> Shortcut:
        """Build a shortcut the way Steam's "Add a Non-Steam Game" dialog does."""
        unquoted = executable.strip('"')
        pure_path = PureWindowsPath(unquoted) if "\\" in unquoted else PurePosixPath(unquoted)
        start_dir = str(pure_path.parent)
        if executable.startswith('"'):
            start_dir = f'"{start_dir}"'
        return cls(
            executable=executable,
            start_dir=start_dir,
            name=name,
            stored_app_id=shortcut_legacy_id(executable, name),
        )

    @property
    def game(self) -> GameId:
        return GameId(self.game_id)

    @property
    def grid_id(self) -> str:
        """File-name stem used for this shortcut's artwork in ``config/grid``."""
        return str(self.legacy_id)
