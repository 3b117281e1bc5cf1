#!/usr/bin/env python3
# symbol_art/ui/state.py
"""Mutable runtime state for the Symbol Art viewer."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import List

from symbol_art.config import Config
from symbol_art.pipeline import NOT_COMPUTED


@dataclass
class ArtState:
    cfg: Config

    # Render inputs
    threshold: int = field(init=False)
    turn: bool = field(init=False)
    source: str = ""

    # Output
    lines: List[str] = field(default_factory=lambda: [NOT_COMPUTED])
    last_render_ms: float = 0.0
    busy: bool = False
    info_msg: str = ""

    # Internal lock for multi-thread updates
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self):
        s = self.cfg["symbols"]
        self.threshold = int(s.get("threshold"))
        self.turn = bool(s.get("turn"))

    # ------------- setters -------------

    def threshold_delta(self, dt: int) -> int:
        with self._lock:
            self.threshold = max(0, min(255, self.threshold + int(dt)))
            return self.threshold

    def toggle_turn(self) -> bool:
        with self._lock:
            self.turn = not self.turn
            return self.turn

    def set_lines(self, lines: List[str], render_ms: float = 0.0) -> None:
        with self._lock:
            self.lines = list(lines)
            self.last_render_ms = render_ms
            self.busy = False

    def set_info(self, msg: str) -> None:
        with self._lock:
            self.info_msg = msg
