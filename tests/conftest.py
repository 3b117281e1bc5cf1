"""Shared fixtures for the symbol_art test suite."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from symbol_art.config import Config
from symbol_art.imaging.pixel_buffer import Pixel, PixelBuffer
from symbol_art.offload import OffloadRunner


def _gray_buffer(rows: Sequence[Sequence[int]]) -> PixelBuffer:
    """Build an opaque raster from a row-major grid of gray values."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    buf = PixelBuffer.new(width, height)
    for j, row in enumerate(rows):
        for i, v in enumerate(row):
            buf.set_pixel(i, j, Pixel(v, v, v, 255))
    return buf


@pytest.fixture()
def gray_buffer() -> Callable[[Sequence[Sequence[int]]], PixelBuffer]:
    return _gray_buffer


@pytest.fixture()
def cfg(tmp_path) -> Config:
    """Default config bound to a throwaway path."""
    return Config.load(str(tmp_path / "symbol_art.json"), create_if_missing=False)


@pytest.fixture()
def runner():
    r = OffloadRunner()
    yield r
    r.close()

