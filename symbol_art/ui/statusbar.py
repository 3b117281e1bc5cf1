#!/usr/bin/env python3
# symbol_art/ui/statusbar.py

from __future__ import annotations
from prompt_toolkit.widgets import Label

from symbol_art.ui.state import ArtState


class StatusBar:
    def __init__(self, state: ArtState):
        self.state = state
        # Callable text: re-evaluated on every redraw.
        self.label = Label(text=self.message, style="class:status")

    def __pt_container__(self):
        return self.label

    def message(self) -> str:
        rows = len(self.state.lines)
        turn = "turned" if self.state.turn else "upright"
        busy = " rendering..." if self.state.busy else ""
        return (
            f" threshold={self.state.threshold} {turn} rows={rows} "
            f"render={self.state.last_render_ms:.1f}ms{busy}  {self.state.info_msg}"
        )
