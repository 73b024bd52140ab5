from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys

import customtkinter as ctk

from steamlocate.core import DiscoveryOptions
from steamlocate.ui.main_window import MainWindow


def _set_windows_dpi_aware() -> None:
    """Per-monitor DPI awareness on Windows so the tables scale with the display."""
    if sys.platform != "win32":
        return
    import ctypes

    try:
        ctypes.windll.user32.SetProcessDpiAwarenessContext(-4)  # PER_MONITOR_AWARE_V2
    except (AttributeError, OSError):
        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(2)
        except (AttributeError, OSError):
            ctypes.windll.user32.SetProcessDPIAware()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="steamlocate", description="Browse the local Steam installation.")
    parser.add_argument("--steam-dir", type=Path, default=None, help="Steam root to use instead of detecting one.")
    parser.add_argument("--workers", type=int, default=min(4, os.cpu_count() or 1), help="Library folders scanned in parallel.")
    parser.add_argument("--no-shortcuts", action="store_true", help="Skip reading non-Steam shortcuts.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _set_windows_dpi_aware()
    ctk.set_appearance_mode("dark")
    ctk.set_default_color_theme("blue")

    options = DiscoveryOptions(
        steam_dir=args.steam_dir,
        max_workers=max(1, args.workers),
        include_shortcuts=not args.no_shortcuts,
    )
    app = MainWindow(options)
    app.mainloop()


if __name__ == "__main__":
    main()
