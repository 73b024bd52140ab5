"""Rendering constants and helpers shared by the inventory tables.

Large libraries can hold thousands of titles; rows are inserted in batches
so the window keeps repainting while a table fills.
"""
from __future__ import annotations

import sys

# Rows to insert per UI tick when populating a Treeview.
BATCH_INSERT_SIZE = 500

# Max length for display strings; longer text is truncated with a suffix.
MAX_COLUMN_TEXT_LEN = 200

TRUNCATE_SUFFIX = "…"


def normalize_row_text(value: str, max_len: int | None = None) -> str:
    """Collapse whitespace (including newlines) to single spaces and optionally truncate."""
    out = " ".join((value or "").split())
    if max_len is not None and len(out) > max_len:
        out = out[: max_len - len(TRUNCATE_SUFFIX)] + TRUNCATE_SUFFIX
    return out


def chunked_range(total: int, chunk_size: int):
    """Yield (start, end) slices covering ``range(total)``."""
    for start in range(0, total, chunk_size):
        yield start, min(start + chunk_size, total)


def get_dpi_scale(widget) -> float:
    """Scale factor from 96 DPI (1.0), used for font size and row height."""
    try:
        root = widget.winfo_toplevel()
        scale = max(1.0, root.winfo_fpixels("1i") / 96.0)
        # Some Windows/Tk setups report 96 DPI even with OS scaling.
        if sys.platform == "win32" and scale <= 1.01:
            import ctypes

            scale = max(scale, ctypes.windll.user32.GetDpiForSystem() / 96.0)
        return scale
    except Exception:  # noqa: BLE001
        return 1.0


BASE_TABLE_FONT_SIZE = 13
BASE_TABLE_ROW_HEIGHT = 30
MIN_TABLE_ROW_HEIGHT = 24
MAX_TABLE_ROW_HEIGHT = 52
MIN_TABLE_FONT_SIZE = 11
MAX_TABLE_FONT_SIZE = 20
