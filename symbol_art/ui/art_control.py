#!/usr/bin/env python3
# symbol_art/ui/art_control.py
"""prompt_toolkit UIControl that shows the latest symbol art."""

from __future__ import annotations

from typing import List

from prompt_toolkit.application import get_app_or_none
from prompt_toolkit.data_structures import Point
from prompt_toolkit.layout.controls import UIContent, UIControl

from symbol_art.pipeline import SymbolArtPipeline
from symbol_art.ui.state import ArtState


class ArtControl(UIControl):
    """Display rendered rows and re-render when inputs change."""

    def __init__(self, state: ArtState, pipeline: SymbolArtPipeline):
        self.state = state
        self.pipeline = pipeline
        self._window = None
        self._scroll = 0

    # -------- UIControl interface --------

    def is_focusable(self) -> bool:
        return True

    def preferred_width(self, max_available_width: int) -> int:
        return max_available_width

    def create_content(self, width: int, height: int) -> UIContent:
        lines: List[str] = self.state.lines
        top = min(self._scroll, max(0, len(lines) - 1))
        visible = lines[top:]

        return UIContent(
            get_line=lambda i: [("", visible[i])] if 0 <= i < len(visible) else [("", "")],
            line_count=max(1, len(visible)),
            cursor_position=Point(x=0, y=0),
        )

    def bind_window(self, window) -> None:
        """Remember the Window that hosts this control for focus management."""

        self._window = window

    def focus(self) -> None:
        app = get_app_or_none()
        if app and self._window is not None:
            app.layout.focus(self._window)

    # -------- render requests --------

    def request_render(self) -> None:
        """Push current state into the pipeline and start a render."""
        self.pipeline.turn = self.state.turn
        self.pipeline.set_threshold(self.state.threshold)
        self.state.busy = True
        self.pipeline.refresh_async(self._on_done)

    def _on_done(self, lines: List[str], elapsed_ms: float) -> None:
        self.state.set_lines(lines, elapsed_ms)
        app = get_app_or_none()
        if app:
            app.invalidate()

    # -------- user actions --------

    def scroll(self, delta: int) -> None:
        self._scroll = max(0, min(len(self.state.lines) - 1, self._scroll + delta))

    def shutdown(self) -> None:
        self.pipeline.close()
