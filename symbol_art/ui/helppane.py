#!/usr/bin/env python3
# symbol_art/ui/helppane.py

from __future__ import annotations

from prompt_toolkit.layout import HSplit, Window
from prompt_toolkit.widgets import Frame, TextArea

_HELP_TEXT = (
    "Key Bindings:\n"
    "  + / -     Raise/lower threshold\n"
    "  t         Turn output by 90 degrees\n"
    "  r         Re-roll symbols\n"
    "  ↑ ↓       Scroll\n"
    "  s         Save output to file\n"
    "  h         Toggle this help\n"
    "  q         Quit\n"
    "\n"
    "Info:\n"
    "  Pixels with gray <= threshold use the dark symbols,\n"
    "  all others the light symbols. Each render picks symbols\n"
    "  at random, so re-rolling gives a different picture.\n"
)


class HelpPane:
    def __init__(self):
        self._visible = False
        self.text_area = TextArea(
            text=_HELP_TEXT,
            style="class:help",
            read_only=True,
            focusable=False,
        )
        self.frame = Frame(self.text_area, title="Help", style="class:help")
        self.container = HSplit([self.frame])

    def __pt_container__(self):
        return self.container if self._visible else Window(height=0)

    @property
    def visible(self) -> bool:
        return self._visible

    def toggle(self) -> None:
        self._visible = not self._visible
