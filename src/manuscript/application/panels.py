"""Visibility flags for the binder and inspector side panels (never persisted)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PanelVisibility:
    binder_open: bool = True
    inspector_open: bool = False

    def toggle_binder(self) -> bool:
        self.binder_open = not self.binder_open
        return self.binder_open

    def toggle_inspector(self) -> bool:
        self.inspector_open = not self.inspector_open
        return self.inspector_open
