#!/usr/bin/env python3
# symbol_art/actions.py
"""
Shared action functions used by both keybindings and toolbar buttons.
Each action modifies ArtState and triggers an ArtControl re-render.
"""

from __future__ import annotations

import logging

from symbol_art.export import format_lines
from symbol_art.ui.art_control import ArtControl
from symbol_art.ui.state import ArtState

log = logging.getLogger(__name__)


def change_threshold(state: ArtState, control: ArtControl, delta: int):
    t = state.threshold_delta(delta)
    state.set_info(f"Threshold {t}")
    control.request_render()


def toggle_turn(state: ArtState, control: ArtControl):
    turned = state.toggle_turn()
    state.set_info("Turned" if turned else "Upright")
    control.request_render()


def reroll(state: ArtState, control: ArtControl):
    state.set_info("Re-roll")
    control.request_render()


def save_output(state: ArtState, path: str = "") -> str:
    out = state.cfg["output"]
    fmt = out.get("format", "text")
    path = path or ("symbol_art.html" if fmt == "html" else "symbol_art.txt")
    text = format_lines(state.lines, fmt, out.get("font_size", 12), out.get("line_height", 16))
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
    except OSError as e:
        log.warning("Save failed: %s", e)
        state.set_info(f"Save failed: {e}")
        return ""
    state.set_info(f"Saved {path}")
    return path
