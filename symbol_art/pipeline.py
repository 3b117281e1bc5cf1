#!/usr/bin/env python3
# symbol_art/pipeline.py
"""
End-to-end conversion: load -> binarize -> offloaded render -> lines.

The pipeline keeps the last good output in ``output_lines``. A failed
stage replaces it with a single line holding the error message; output is
only ever replaced as a whole.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from symbol_art.acquire import ImageLoader
from symbol_art.config import Config
from symbol_art.errors import PreconditionError, SymbolArtError
from symbol_art.imaging.binarize import binarize, check_threshold
from symbol_art.imaging.pixel_buffer import PixelBuffer
from symbol_art.offload import CancelledError, OffloadRunner, RenderHandle, RenderJob
from symbol_art.rendering.symbols import PoolLike, SymbolPool, to_pool

__all__ = ["SymbolArtPipeline", "NOT_COMPUTED"]

log = logging.getLogger(__name__)

NOT_COMPUTED = "Not computed!"


class SymbolArtPipeline:
    def __init__(
        self,
        cfg: Optional[Config] = None,
        runner: Optional[OffloadRunner] = None,
        loader: Optional[ImageLoader] = None,
    ):
        self.cfg = cfg if cfg is not None else Config()
        s = self.cfg["symbols"]
        self.threshold: int = s["threshold"]
        self.turn: bool = s["turn"]
        self.light: SymbolPool = to_pool(s["light"])
        self.dark: SymbolPool = to_pool(s["dark"])

        self.runner = runner if runner is not None else OffloadRunner()
        self._loader = loader
        self.source: Optional[PixelBuffer] = None
        self.binary: Optional[PixelBuffer] = None
        self.output_lines: List[str] = [NOT_COMPUTED]

    @property
    def loader(self) -> ImageLoader:
        if self._loader is None:
            self._loader = ImageLoader.from_config(self.cfg)
        return self._loader

    # -------------
    # Inputs
    # -------------

    def load(self, source: str) -> PixelBuffer:
        self.source = self.loader.load(source)
        self.binary = None
        return self.source

    def set_source(self, buffer: PixelBuffer) -> None:
        self.source = buffer
        self.binary = None

    def set_symbols(self, light: Optional[PoolLike] = None, dark: Optional[PoolLike] = None) -> None:
        if light is not None:
            self.light = to_pool(light)
        if dark is not None:
            self.dark = to_pool(dark)

    def set_threshold(self, threshold: int) -> None:
        self.threshold = check_threshold(threshold)
        self.binary = None

    # -------------
    # Stages
    # -------------

    def update_binary(self) -> PixelBuffer:
        if self.source is None:
            raise PreconditionError("Image not loaded!")
        log.info("Update binary image %s at threshold %d", self.source.size(), self.threshold)
        self.binary = binarize(self.source, self.threshold)
        return self.binary

    def compute(self) -> RenderHandle:
        """Dispatch a render of the current binary image; cancels any pending one."""
        if self.binary is None:
            self.update_binary()
        job = RenderJob.from_buffer(self.binary, self.light, self.dark, self.turn)
        return self.runner.submit(job)

    def refresh(self, timeout: Optional[float] = None) -> List[str]:
        """Binarize and render synchronously; errors become the output text."""
        try:
            self.update_binary()
            lines = self.compute().result(timeout)
        except CancelledError:
            log.info("Render superseded; keeping previous output")
            return self.output_lines
        except SymbolArtError as e:
            lines = [str(e)]
        self.output_lines = lines
        return lines

    def refresh_async(self, on_done: Callable[[List[str], float], None]) -> Optional[RenderHandle]:
        """
        Non-blocking refresh. ``on_done(lines, elapsed_ms)`` is called from the
        monitor thread with the output and the render time of the handle that
        produced it; superseded renders never call it.
        """
        try:
            self.update_binary()
            handle = self.compute()
        except SymbolArtError as e:
            self.output_lines = [str(e)]
            on_done(self.output_lines, 0.0)
            return None

        def _finish(h: RenderHandle) -> None:
            if h.cancelled():
                return
            err = h.exception()
            self.output_lines = [str(err)] if err is not None else h.result()
            on_done(self.output_lines, h.elapsed_ms)

        handle.add_done_callback(_finish)
        return handle

    def close(self) -> None:
        self.runner.close()
