from __future__ import annotations

import customtkinter as ctk

from steamlocate.core.models import Diagnostic
from steamlocate.ui.inventory_rows import diagnostic_line

_LEVEL_COLORS: dict[str, str] = {
    "warning": "#f59e0b",
    "error": "#ef4444",
}


class ProgressLog(ctk.CTkFrame):
    """Discovery log: progress lines from the worker plus snapshot diagnostics."""

    def __init__(self, master, **kwargs):
        super().__init__(master, **kwargs)
        self.configure(border_width=1, border_color=("#cfd4dc", "#2f3745"))
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        header = ctk.CTkLabel(
            self,
            text="🧾 Discovery Log",
            font=ctk.CTkFont(size=14, weight="bold"),
            text_color=("#0f172a", "#f8fafc"),
        )
        header.grid(row=0, column=0, padx=10, pady=(10, 4), sticky="w")

        self.textbox = ctk.CTkTextbox(
            self,
            wrap="word",
            fg_color=("#f8fafc", "#0b1220"),
            text_color=("#0b1324", "#e5edf7"),
            border_width=1,
            border_color=("#d7dde7", "#344056"),
        )
        self.textbox.grid(row=1, column=0, padx=10, pady=(0, 10), sticky="nsew")
        for level, color in _LEVEL_COLORS.items():
            self.textbox.tag_config(level, foreground=color)
        self.textbox.configure(state="disabled")

        # Lines are buffered and flushed on a timer so bursts of progress do not stall the UI.
        self._pending: list[tuple[str, str]] = []
        self._flush_after_id: str | None = None
        self._flush_interval_ms = 120

    def log(self, message: str, level: str = "info") -> None:
        self._pending.append((message, level))
        if self._flush_after_id is None:
            self._flush_after_id = self.after(self._flush_interval_ms, self._flush)

    def log_diagnostics(self, diagnostics: tuple[Diagnostic, ...]) -> None:
        for diagnostic in diagnostics:
            self.log(diagnostic_line(diagnostic), level="warning")

    def _flush(self) -> None:
        self._flush_after_id = None
        if not self._pending:
            return
        lines, self._pending = self._pending, []
        self.textbox.configure(state="normal")
        for message, level in lines:
            tags = (level,) if level in _LEVEL_COLORS else ()
            self.textbox.insert("end", message + "\n", tags)
        self.textbox.see("end")
        self.textbox.configure(state="disabled")

    def clear(self) -> None:
        if self._flush_after_id is not None:
            self.after_cancel(self._flush_after_id)
            self._flush_after_id = None
        self._pending = []
        self.textbox.configure(state="normal")
        self.textbox.delete("1.0", "end")
        self.textbox.configure(state="disabled")
