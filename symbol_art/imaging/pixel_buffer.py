#!/usr/bin/env python3
# symbol_art/imaging/pixel_buffer.py
"""
Pixel-addressable RGBA raster.

The buffer is a flat uint8 array of length W*H*4; pixel (i, j) lives at
offset (j*W + i)*4 in R, G, B, A order. Index checks are left to the caller
except that out-of-range coordinates raise IndexError instead of silently
reading a neighbouring row.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

import numpy as np
from PIL import Image

from symbol_art.errors import PreconditionError

__all__ = ["Pixel", "PixelBuffer"]


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


class PixelBuffer:
    """Fixed-size RGBA raster with get/set pixel and grayscale accessors."""

    def __init__(self, width: int, height: int, data=None):
        if width < 0 or height < 0:
            raise PreconditionError(f"invalid raster size {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        n = self.width * self.height * 4
        if data is None:
            self.data = np.zeros(n, dtype=np.uint8)
        else:
            arr = np.frombuffer(data, dtype=np.uint8) if isinstance(data, (bytes, bytearray, memoryview)) \
                else np.asarray(data, dtype=np.uint8)
            arr = arr.reshape(-1).copy()
            if arr.size != n:
                raise PreconditionError(
                    f"buffer length {arr.size} does not match {self.width}x{self.height}x4"
                )
            self.data = arr

    # -------------
    # Constructors
    # -------------

    @classmethod
    def new(cls, width: int, height: int) -> "PixelBuffer":
        """Transparent black raster."""
        return cls(width, height)

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        arr = np.asarray(img, dtype=np.uint8)
        return cls(img.width, img.height, arr)

    def to_image(self) -> Image.Image:
        arr = self.data.reshape(self.height, self.width, 4)
        return Image.fromarray(arr)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.data)

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    # -------------
    # Accessors
    # -------------

    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _offset(self, i: int, j: int) -> int:
        if not (0 <= i < self.width and 0 <= j < self.height):
            raise IndexError(f"pixel ({i}, {j}) outside {self.width}x{self.height}")
        return (j * self.width + i) * 4

    def get_pixel(self, i: int, j: int) -> Pixel:
        idx = self._offset(i, j)
        r, g, b, a = self.data[idx:idx + 4].tolist()
        return Pixel(r, g, b, a)

    def set_pixel(self, i: int, j: int, px: Pixel) -> None:
        idx = self._offset(i, j)
        self.data[idx:idx + 4] = (px.r, px.g, px.b, px.a)

    def get_gray(self, i: int, j: int) -> int:
        """Unweighted mean of R, G, B, truncated. Alpha is ignored."""
        px = self.get_pixel(i, j)
        return (px.r + px.g + px.b) // 3

    def set_gray(self, i: int, j: int, v: int) -> None:
        # Output is always opaque; source alpha is dropped.
        self.set_pixel(i, j, Pixel(v, v, v, 255))

    def gray_array(self) -> np.ndarray:
        """(H, W) int array of get_gray values for the whole raster."""
        rgba = self.data.reshape(self.height, self.width, 4).astype(np.uint16)
        return rgba[..., :3].sum(axis=2) // 3

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size() == other.size() and np.array_equal(self.data, other.data)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
