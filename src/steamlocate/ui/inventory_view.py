"""Sortable ttk.Treeview tables for library folders, titles and shortcuts."""
from __future__ import annotations

import tkinter as tk
from tkinter import ttk

import customtkinter as ctk

from steamlocate.ui.inventory_rows import Column, display_value, sort_rows
from steamlocate.ui.table_perf import (
    BASE_TABLE_FONT_SIZE,
    BASE_TABLE_ROW_HEIGHT,
    BATCH_INSERT_SIZE,
    MAX_TABLE_FONT_SIZE,
    MAX_TABLE_ROW_HEIGHT,
    MIN_TABLE_FONT_SIZE,
    MIN_TABLE_ROW_HEIGHT,
    chunked_range,
    get_dpi_scale,
)


def _apply_dark_treeview_style(widget: ttk.Treeview, scale: float) -> int:
    """Dark theme scaled for DPI. Returns the row height in pixels."""
    font_size = max(MIN_TABLE_FONT_SIZE, min(MAX_TABLE_FONT_SIZE, round(BASE_TABLE_FONT_SIZE * scale)))
    row_height = max(MIN_TABLE_ROW_HEIGHT, min(MAX_TABLE_ROW_HEIGHT, round(BASE_TABLE_ROW_HEIGHT * scale)))
    style = ttk.Style(widget)
    style.theme_use("clam")
    style.configure(
        "Inventory.Treeview",
        background="#1e293b",
        foreground="#e2e8f0",
        fieldbackground="#1e293b",
        borderwidth=0,
        rowheight=row_height,
        font=("Segoe UI", font_size),
    )
    style.configure(
        "Inventory.Treeview.Heading",
        background="#334155",
        foreground="#f1f5f9",
        font=("Segoe UI", font_size, "bold"),
    )
    style.map(
        "Inventory.Treeview",
        background=[("selected", "#475569")],
        foreground=[("selected", "#f8fafc")],
    )
    return row_height


class InventoryTable(ctk.CTkFrame):
    """One titled table; rows are plain tuples matching ``columns``."""

    def __init__(self, master, title: str, columns: tuple[Column, ...], **kwargs):
        super().__init__(master, **kwargs)
        self.configure(border_width=1, border_color=("#cfd4dc", "#2f3745"))
        self.grid_rowconfigure(2, weight=1)
        self.grid_columnconfigure(0, weight=1)
        self._columns = columns
        self._rows: list[tuple] = []
        self._sort_key = columns[0].key
        self._sort_desc = False
        self._pending_insert_id: str | None = None

        ctk.CTkLabel(
            self,
            text=title,
            font=ctk.CTkFont(size=15, weight="bold"),
            text_color=("#0f172a", "#f8fafc"),
        ).grid(row=0, column=0, padx=10, pady=(10, 2), sticky="w")

        self.summary_label = ctk.CTkLabel(self, text="Nothing discovered yet.", anchor="w")
        self.summary_label.grid(row=1, column=0, padx=10, pady=(0, 6), sticky="ew")

        container = ctk.CTkFrame(self, fg_color=("#f8fafc", "#0b1220"))
        container.grid(row=2, column=0, padx=10, pady=(0, 10), sticky="nsew")
        container.grid_columnconfigure(0, weight=1)
        container.grid_rowconfigure(0, weight=1)

        self._tree = ttk.Treeview(
            container,
            columns=[column.key for column in columns],
            show="headings",
            selectmode="browse",
            height=8,
            style="Inventory.Treeview",
        )
        scale = get_dpi_scale(container)
        _apply_dark_treeview_style(self._tree, scale)
        for column in columns:
            self._tree.heading(column.key, text=column.heading, command=lambda key=column.key: self._on_heading_click(key))
            self._tree.column(column.key, width=column.width, minwidth=60, stretch=True, anchor="e" if column.numeric else "w")

        scrollbar = tk.Scrollbar(container, orient=tk.VERTICAL, command=self._tree.yview, width=max(14, round(14 * scale)))
        self._tree.configure(yscrollcommand=scrollbar.set)
        self._tree.grid(row=0, column=0, sticky="nsew")
        scrollbar.grid(row=0, column=1, sticky="ns")

    def set_rows(self, rows: list[tuple], summary: str) -> None:
        self._rows = list(rows)
        self.summary_label.configure(text=summary)
        self._render()

    def reset(self) -> None:
        self.set_rows([], "Nothing discovered yet.")

    def _render(self) -> None:
        if self._pending_insert_id is not None:
            self.after_cancel(self._pending_insert_id)
            self._pending_insert_id = None
        self._tree.delete(*self._tree.get_children())
        rows = sort_rows(self._rows, self._columns, self._sort_key, self._sort_desc)
        self._insert_batches(rows, chunked_range(len(rows), BATCH_INSERT_SIZE))
        self._refresh_heading_labels()

    def _insert_batches(self, rows: list[tuple], batches) -> None:
        self._pending_insert_id = None
        batch = next(batches, None)
        if batch is None:
            return
        start, end = batch
        for row in rows[start:end]:
            values = [display_value(column, value) for column, value in zip(self._columns, row)]
            self._tree.insert("", tk.END, values=values)
        self._pending_insert_id = self.after(1, self._insert_batches, rows, batches)

    def _on_heading_click(self, key: str) -> None:
        if self._sort_key == key:
            self._sort_desc = not self._sort_desc
        else:
            self._sort_key = key
            self._sort_desc = False
        self._render()

    def _refresh_heading_labels(self) -> None:
        for column in self._columns:
            label = column.heading
            if column.key == self._sort_key:
                label += " ↓" if self._sort_desc else " ↑"
            self._tree.heading(column.key, text=label)
