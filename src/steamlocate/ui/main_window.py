from __future__ import annotations

from pathlib import Path
from queue import Empty, Queue
import threading
import tkinter.filedialog as filedialog

import customtkinter as ctk

from steamlocate.core import DiscoveryOptions, RootNotFound, ShortcutDecodeFailed, Snapshot, SteamDiscovery
from steamlocate.core.models import Shortcut
from steamlocate.ui.inventory_rows import (
    FOLDER_COLUMNS,
    SHORTCUT_COLUMNS,
    TITLE_COLUMNS,
    folder_rows,
    format_size,
    shortcut_rows,
    title_rows,
)
from steamlocate.ui.inventory_view import InventoryTable
from steamlocate.ui.progress_log import ProgressLog


class MainWindow(ctk.CTk):
    """Top-level window.

    Discovery runs in a worker thread; results come back through
    ``result_queue`` and are applied on the Tk main loop.
    """

    def __init__(self, options: DiscoveryOptions | None = None) -> None:
        super().__init__()
        self.title("steamlocate")
        self.geometry("1280x820")
        self.minsize(960, 640)

        self.options = options or DiscoveryOptions()
        self.result_queue: Queue[tuple[str, object]] = Queue()
        self.current_snapshot: Snapshot | None = None
        self._discovery_running = False

        self._build_layout()
        self.after(100, self._poll_queue)
        self.after(200, self._on_discover)

    def _build_layout(self) -> None:
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)
        self.grid_rowconfigure(2, weight=2)
        self.grid_rowconfigure(3, weight=1)

        controls = ctk.CTkFrame(self)
        controls.grid(row=0, column=0, padx=12, pady=12, sticky="ew")
        controls.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(controls, text="📂 Steam Directory").grid(row=0, column=0, padx=(10, 6), pady=10, sticky="w")
        self.steam_dir_entry = ctk.CTkEntry(controls, placeholder_text="Leave empty to detect automatically")
        self.steam_dir_entry.grid(row=0, column=1, padx=(0, 6), pady=10, sticky="ew")
        if self.options.steam_dir is not None:
            self.steam_dir_entry.insert(0, str(self.options.steam_dir))

        ctk.CTkButton(controls, text="📁 Browse", width=90, command=self._on_browse).grid(row=0, column=2, padx=(0, 6), pady=10)
        self.discover_button = ctk.CTkButton(controls, text="🔍 Discover", command=self._on_discover)
        self.discover_button.grid(row=0, column=3, padx=(0, 6), pady=10)

        self.shortcuts_var = ctk.BooleanVar(value=self.options.include_shortcuts)
        ctk.CTkCheckBox(controls, text="Shortcuts", variable=self.shortcuts_var).grid(row=0, column=4, padx=(0, 10), pady=10)

        top = ctk.CTkFrame(self, fg_color="transparent")
        top.grid(row=1, column=0, padx=12, pady=(0, 8), sticky="nsew")
        top.grid_columnconfigure(0, weight=1)
        top.grid_columnconfigure(1, weight=1)
        top.grid_rowconfigure(0, weight=1)

        self.folder_table = InventoryTable(top, "📚 Library Folders", FOLDER_COLUMNS)
        self.folder_table.grid(row=0, column=0, padx=(0, 6), sticky="nsew")
        self.shortcut_table = InventoryTable(top, "🔗 Non-Steam Shortcuts", SHORTCUT_COLUMNS)
        self.shortcut_table.grid(row=0, column=1, padx=(6, 0), sticky="nsew")

        self.title_table = InventoryTable(self, "🎮 Installed Titles", TITLE_COLUMNS)
        self.title_table.grid(row=2, column=0, padx=12, pady=(0, 8), sticky="nsew")

        self.progress_log = ProgressLog(self)
        self.progress_log.grid(row=3, column=0, padx=12, pady=(0, 12), sticky="nsew")

    def _on_browse(self) -> None:
        selected = filedialog.askdirectory(title="Select Steam directory")
        if selected:
            self.steam_dir_entry.delete(0, "end")
            self.steam_dir_entry.insert(0, selected)

    def _on_discover(self) -> None:
        if self._discovery_running:
            return
        self._discovery_running = True
        self.discover_button.configure(state="disabled", text="⏳ Discovering...")
        self.progress_log.clear()

        raw_dir = self.steam_dir_entry.get().strip()
        options = DiscoveryOptions(
            steam_dir=Path(raw_dir) if raw_dir else None,
            max_workers=self.options.max_workers,
            include_shortcuts=bool(self.shortcuts_var.get()),
        )
        worker = threading.Thread(target=self._discover_worker, args=(options,), daemon=True)
        worker.start()

    def _discover_worker(self, options: DiscoveryOptions) -> None:
        def progress(message: str) -> None:
            self.result_queue.put(("progress", message))

        try:
            snapshot = SteamDiscovery(options).discover(progress_callback=progress)
        except RootNotFound as exc:
            self.result_queue.put(("discovery_error", str(exc)))
            return
        except Exception as exc:  # noqa: BLE001
            self.result_queue.put(("discovery_error", f"Unexpected error: {exc}"))
            return
        self.result_queue.put(("discovery_complete", snapshot))

        if not options.include_shortcuts:
            return
        try:
            shortcuts = snapshot.shortcuts()
        except ShortcutDecodeFailed as exc:
            self.result_queue.put(("shortcuts_error", str(exc)))
            return
        self.result_queue.put(("shortcuts_complete", shortcuts))

    def _poll_queue(self) -> None:
        try:
            while True:
                event_type, payload = self.result_queue.get_nowait()
                if event_type == "progress":
                    self.progress_log.log(str(payload))
                elif event_type == "discovery_complete":
                    self._on_discovery_complete(payload)  # type: ignore[arg-type]
                elif event_type == "discovery_error":
                    self._on_discovery_error(str(payload))
                elif event_type == "shortcuts_complete":
                    self._on_shortcuts_complete(payload)  # type: ignore[arg-type]
                elif event_type == "shortcuts_error":
                    self.progress_log.log(str(payload), level="error")
                    self.shortcut_table.set_rows([], "Shortcuts could not be read.")
        except Empty:
            pass
        finally:
            self.after(100, self._poll_queue)

    def _on_discovery_complete(self, snapshot: Snapshot) -> None:
        self.current_snapshot = snapshot
        self._finish_discovery()
        total_size = sum(title.size_on_disk for title in snapshot.title_list)
        self.folder_table.set_rows(
            folder_rows(snapshot),
            f"Root: {snapshot.root} | Folders: {len(snapshot.library_folders)}",
        )
        self.title_table.set_rows(
            title_rows(snapshot),
            f"Titles: {len(snapshot.titles)} | On disk: {format_size(total_size)}"
            f" | Diagnostics: {len(snapshot.diagnostics)}",
        )
        self.shortcut_table.reset()
        self.progress_log.log_diagnostics(snapshot.diagnostics)

    def _on_shortcuts_complete(self, shortcuts: list[Shortcut]) -> None:
        self.shortcut_table.set_rows(shortcut_rows(shortcuts), f"Shortcuts: {len(shortcuts)}")

    def _on_discovery_error(self, message: str) -> None:
        self._finish_discovery()
        self.current_snapshot = None
        self.folder_table.reset()
        self.title_table.reset()
        self.shortcut_table.reset()
        self.progress_log.log(message, level="error")

    def _finish_discovery(self) -> None:
        self._discovery_running = False
        self.discover_button.configure(state="normal", text="🔍 Discover")
