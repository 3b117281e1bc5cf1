#!/usr/bin/env python3
# symbol_art/imaging/binarize.py
"""
Threshold filter: forces every pixel to pure black or pure white.
"""

from __future__ import annotations

import logging

import numpy as np

from symbol_art.errors import PreconditionError
from symbol_art.imaging.pixel_buffer import PixelBuffer

__all__ = ["binarize", "check_threshold"]

log = logging.getLogger(__name__)


def check_threshold(threshold) -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, np.integer)):
        raise PreconditionError(f"threshold must be an integer, got {threshold!r}")
    if not 0 <= threshold <= 255:
        raise PreconditionError(f"threshold {threshold} outside 0..255")
    return int(threshold)


def binarize(src: PixelBuffer, threshold: int) -> PixelBuffer:
    """
    Return a new raster of the same size where gray <= threshold becomes
    (0, 0, 0, 255) and everything else (255, 255, 255, 255).
    The source is not modified.
    """
    t = check_threshold(threshold)
    w, h = src.size()
    log.debug("Binarize %dx%d at threshold %d", w, h, t)

    gray = src.gray_array()
    v = np.where(gray <= t, 0, 255).astype(np.uint8)
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., 0] = v
    out[..., 1] = v
    out[..., 2] = v
    out[..., 3] = 255
    return PixelBuffer(w, h, out)
