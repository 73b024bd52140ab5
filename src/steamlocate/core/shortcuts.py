from __future__ import annotations

import logging
from pathlib import Path

from steamlocate.config.platform_paths import SHORTCUTS_RELATIVE_PATH, SHORTCUTS_ROOT_KEY, USERDATA_DIR
from steamlocate.core.errors import KeyValuesDecodeError, ShortcutDecodeFailed
from steamlocate.core.keyvalues import KeyValues, decode_binary, parse_int_or_zero
from steamlocate.core.models import Shortcut

logger = logging.getLogger(__name__)


class ShortcutParser:
    """Read non-Steam game shortcuts from ``userdata/<user>/config/shortcuts.vdf``."""

    def shortcut_files(self, root: Path, user_id: str | None = None) -> list[tuple[str, Path]]:
        userdata = root / USERDATA_DIR
        if not userdata.is_dir():
            logger.debug("No userdata directory under %s", root)
            return []

        files: list[tuple[str, Path]] = []
        for user_dir in sorted(userdata.iterdir(), key=lambda path: path.name):
            if user_id is not None and user_dir.name != str(user_id):
                continue
            shortcuts_path = user_dir / SHORTCUTS_RELATIVE_PATH
            if shortcuts_path.is_file():
                files.append((user_dir.name, shortcuts_path))
        return files

    def discover(self, root: Path, user_id: str | None = None) -> list[Shortcut]:
        """All shortcuts for every user (or just ``user_id``), in file order.

        Raises ``ShortcutDecodeFailed`` on the first unreadable or corrupt file.
        """
        shortcuts: list[Shortcut] = []
        for owner, shortcuts_path in self.shortcut_files(root, user_id):
            shortcuts.extend(self.parse_file(shortcuts_path, user_id=owner))
        logger.info("Found %d shortcut(s) under %s", len(shortcuts), root)
        return shortcuts

    def parse_file(self, shortcuts_path: Path, user_id: str | None = None) -> list[Shortcut]:
        try:
            data = shortcuts_path.read_bytes()
        except OSError as exc:
            raise ShortcutDecodeFailed(shortcuts_path, f"unreadable ({exc})") from exc
        try:
            document = decode_binary(data)
        except KeyValuesDecodeError as exc:
            raise ShortcutDecodeFailed(shortcuts_path, str(exc)) from exc
        return self.from_keyvalues(document, source_path=shortcuts_path, user_id=user_id)

    def from_keyvalues(
        self,
        document: KeyValues,
        source_path: Path | None = None,
        user_id: str | None = None,
    ) -> list[Shortcut]:
        entries = document.find_map(SHORTCUTS_ROOT_KEY)
        if entries is None:
            raise ShortcutDecodeFailed(source_path or Path(), f"missing '{SHORTCUTS_ROOT_KEY}' object")

        shortcuts: list[Shortcut] = []
        for _index, entry in entries.children():
            stored_app_id = entry.find("appid")
            shortcuts.append(
                Shortcut(
                    executable=entry.find_text("Exe", ""),
                    start_dir=entry.find_text("StartDir", ""),
                    name=entry.find_text("AppName", ""),
                    icon=entry.find_text("icon", ""),
                    tags=_tags(entry),
                    launch_options=entry.find_text("LaunchOptions", ""),
                    hidden=parse_int_or_zero(entry.find("IsHidden")) != 0,
                    stored_app_id=parse_int_or_zero(stored_app_id) & 0xFFFFFFFF if stored_app_id is not None else None,
                    user_id=user_id,
                    source_path=source_path,
                )
            )
        return shortcuts


def _tags(entry: KeyValues) -> tuple[str, ...]:
    tags = entry.find_map("tags")
    if tags is None:
        return ()
    return tuple(str(tag) for tag in tags.values() if not isinstance(tag, KeyValues))


def shortcut_to_keyvalues(shortcut: Shortcut) -> KeyValues:
    """Render ``shortcut`` as one entry of the ``shortcuts`` object."""
    tags = KeyValues()
    for index, tag in enumerate(shortcut.tags):
        tags[str(index)] = tag
    entry = KeyValues()
    entry["appid"] = shortcut.stored_app_id if shortcut.stored_app_id is not None else shortcut.legacy_id
    entry["AppName"] = shortcut.name
    entry["Exe"] = shortcut.executable
    entry["StartDir"] = shortcut.start_dir
    entry["icon"] = shortcut.icon
    entry["LaunchOptions"] = shortcut.launch_options
    entry["IsHidden"] = int(shortcut.hidden)
    entry["tags"] = tags
    return entry


def shortcuts_document(shortcuts: list[Shortcut]) -> KeyValues:
    entries = KeyValues()
    for index, shortcut in enumerate(shortcuts):
        entries[str(index)] = shortcut_to_keyvalues(shortcut)
    document = KeyValues()
    document[SHORTCUTS_ROOT_KEY] = entries
    return document
