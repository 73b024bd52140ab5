"""Row builders for the inventory tables. No Tk imports, so tests can use them directly."""
from __future__ import annotations

from dataclasses import dataclass

from steamlocate.core.discovery import Snapshot
from steamlocate.core.models import Diagnostic, Shortcut, StateFlag, Title
from steamlocate.ui.table_perf import MAX_COLUMN_TEXT_LEN, normalize_row_text

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


@dataclass(slots=True, frozen=True)
class Column:
    key: str
    heading: str
    width: int
    numeric: bool = False


FOLDER_COLUMNS: tuple[Column, ...] = (
    Column("path", "Library Folder", 360),
    Column("label", "Label", 120),
    Column("titles", "Titles", 80, numeric=True),
)

TITLE_COLUMNS: tuple[Column, ...] = (
    Column("app_id", "App ID", 90, numeric=True),
    Column("name", "Name", 260),
    Column("size", "Size", 100, numeric=True),
    Column("state", "State", 160),
    Column("path", "Install Path", 360),
)

SHORTCUT_COLUMNS: tuple[Column, ...] = (
    Column("name", "Name", 220),
    Column("executable", "Executable", 320),
    Column("legacy_id", "App ID", 110, numeric=True),
    Column("game_id", "Game ID", 180, numeric=True),
    Column("tags", "Tags", 160),
)


def format_size(size: int) -> str:
    value = float(max(0, size))
    for unit in _SIZE_UNITS:
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def describe_state(state_flags: int) -> str:
    state = StateFlag(state_flags)
    names = [flag.name.replace("_", " ").title() for flag in StateFlag if flag and flag in state]
    return ", ".join(names) if names else "Invalid"


def folder_rows(snapshot: Snapshot) -> list[tuple[str, str, int]]:
    counts: dict[str, int] = {}
    for title in snapshot.title_list:
        key = str(title.library_folder)
        counts[key] = counts.get(key, 0) + 1
    return [
        (str(folder.path), folder.label or "", counts.get(str(folder.path), 0))
        for folder in snapshot.library_folders
    ]


def title_row(title: Title) -> tuple[int, str, int, str, str]:
    return (
        title.app_id,
        normalize_row_text(title.name or f"App {title.app_id}", MAX_COLUMN_TEXT_LEN),
        title.size_on_disk,
        describe_state(title.state_flags),
        str(title.path) if title.path is not None else "",
    )


def title_rows(snapshot: Snapshot) -> list[tuple[int, str, int, str, str]]:
    return [title_row(title) for title in sorted(snapshot.title_list, key=lambda item: item.app_id)]


def shortcut_rows(shortcuts: list[Shortcut]) -> list[tuple[str, str, int, int, str]]:
    return [
        (
            normalize_row_text(shortcut.name, MAX_COLUMN_TEXT_LEN),
            normalize_row_text(shortcut.executable, MAX_COLUMN_TEXT_LEN),
            shortcut.legacy_id,
            shortcut.game_id,
            ", ".join(shortcut.tags),
        )
        for shortcut in shortcuts
    ]


def diagnostic_line(diagnostic: Diagnostic) -> str:
    return f"[{diagnostic.kind.value}] {diagnostic.path}: {diagnostic.message}"


def display_value(column: Column, value) -> str:
    if column.key == "size":
        return format_size(int(value))
    return str(value)


def sort_rows(rows: list[tuple], columns: tuple[Column, ...], sort_key: str, descending: bool) -> list[tuple]:
    index = next(i for i, column in enumerate(columns) if column.key == sort_key)
    if columns[index].numeric:
        return sorted(rows, key=lambda row: int(row[index]), reverse=descending)
    return sorted(rows, key=lambda row: str(row[index]).lower(), reverse=descending)
