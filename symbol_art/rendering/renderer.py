#!/usr/bin/env python3
# symbol_art/rendering/renderer.py
"""
Symbol renderer: binary raster -> list of text rows.

- Every white (255) pixel becomes a random symbol from the light pool,
  every other pixel a random symbol from the dark pool.
- ``turn`` rotates the output by 90 degrees by changing the scan order,
  not by rotating the raster: rows walk the original x axis, columns walk
  the original y axis from bottom to top.

``render_symbols`` works on plain data (size, flat RGBA bytes, pools, flag)
so it can run in a worker process that shares nothing with the caller.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from symbol_art.errors import PreconditionError
from symbol_art.imaging.pixel_buffer import PixelBuffer
from symbol_art.rendering.symbols import PoolLike, SymbolPool, default_symbol_sets, to_pool

__all__ = [
    "render_symbols",
    "scan_order",
    "SymbolRenderer",
]

WHITE = 255

# (rows, cols, sample) where sample(gray, row, col) reads the (H, W) gray grid
ScanOrder = Tuple[range, range, Callable[[np.ndarray, int, int], int]]


def scan_order(width: int, height: int, turn: bool) -> ScanOrder:
    """Return the row range, column range and sampler for one orientation."""
    if turn:
        return range(width), range(height - 1, -1, -1), lambda g, r, c: g[c, r]
    return range(height), range(width), lambda g, r, c: g[r, c]


def render_symbols(
    width: int,
    height: int,
    data: bytes,
    light: Sequence[str],
    dark: Sequence[str],
    turn: bool = False,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    Render a binary RGBA raster given as flat bytes.

    Returns one string per output row: ``height`` rows of ``width`` symbols,
    or ``width`` rows of ``height`` symbols when ``turn`` is set.
    """
    if len(light) < 1 or len(dark) < 1:
        raise PreconditionError("no symbols supplied")

    img = PixelBuffer(width, height, data)
    gray = img.gray_array()
    rows, cols, sample = scan_order(width, height, turn)
    choice = (rng or random).choice

    out: List[str] = []
    for r in rows:
        buf = []
        for c in cols:
            if sample(gray, r, c) == WHITE:
                buf.append(choice(light))
            else:
                buf.append(choice(dark))
        out.append("".join(buf))
    return out


@dataclass
class SymbolRenderer:
    """
    Object front end over ``render_symbols`` with named symbol presets.
    """
    presets: Dict[str, Tuple[str, str]] = field(default_factory=default_symbol_sets)
    rng: Optional[random.Random] = None

    def get_pools(self, name: str) -> Tuple[SymbolPool, SymbolPool]:
        try:
            light, dark = self.presets[name]
        except KeyError:
            raise PreconditionError(f"unknown symbol preset {name!r}") from None
        return to_pool(light), to_pool(dark)

    def render(
        self,
        binary: PixelBuffer,
        light: PoolLike,
        dark: PoolLike,
        turn: bool = False,
    ) -> List[str]:
        w, h = binary.size()
        return render_symbols(w, h, binary.tobytes(), to_pool(light), to_pool(dark), turn, self.rng)
