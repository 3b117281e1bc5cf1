"""Tests for the end-to-end pipeline facade."""

from __future__ import annotations

import threading

import pytest
from PIL import Image

from symbol_art.config import Config
from symbol_art.errors import AcquisitionError, PreconditionError
from symbol_art.pipeline import NOT_COMPUTED, SymbolArtPipeline

TIMEOUT = 60


@pytest.fixture()
def pipeline(cfg: Config, runner):
    cfg.update({"symbols": {"light": "□", "dark": "■", "threshold": 100}})
    p = SymbolArtPipeline(cfg, runner=runner)
    yield p
    p.close()


class TestPipeline:
    def test_initial_output(self, pipeline: SymbolArtPipeline) -> None:
        assert pipeline.output_lines == [NOT_COMPUTED]

    def test_update_binary_without_image(self, pipeline: SymbolArtPipeline) -> None:
        with pytest.raises(PreconditionError, match="Image not loaded!"):
            pipeline.update_binary()

    def test_refresh_without_image_reports_error(self, pipeline: SymbolArtPipeline) -> None:
        assert pipeline.refresh(TIMEOUT) == ["Image not loaded!"]
        assert pipeline.output_lines == ["Image not loaded!"]

    def test_refresh_renders(self, pipeline: SymbolArtPipeline, gray_buffer) -> None:
        pipeline.set_source(gray_buffer([[0, 255]]))
        assert pipeline.refresh(TIMEOUT) == ["■□"]
        pipeline.turn = True
        assert pipeline.refresh(TIMEOUT) == ["■", "□"]

    def test_threshold_change_rebinarizes(self, pipeline: SymbolArtPipeline, gray_buffer) -> None:
        pipeline.set_source(gray_buffer([[150, 150]]))
        assert pipeline.refresh(TIMEOUT) == ["□□"]
        pipeline.set_threshold(150)
        assert pipeline.binary is None
        assert pipeline.refresh(TIMEOUT) == ["■■"]

    def test_empty_pool_replaces_output_with_error(self, pipeline: SymbolArtPipeline, gray_buffer) -> None:
        pipeline.set_source(gray_buffer([[0]]))
        assert pipeline.refresh(TIMEOUT) == ["■"]
        pipeline.set_symbols(light="")
        assert pipeline.refresh(TIMEOUT) == ["no symbols supplied"]

    def test_invalid_threshold(self, pipeline: SymbolArtPipeline) -> None:
        with pytest.raises(PreconditionError):
            pipeline.set_threshold(300)

    def test_refresh_async_callback(self, pipeline: SymbolArtPipeline, gray_buffer) -> None:
        got = []
        done = threading.Event()
        pipeline.set_source(gray_buffer([[255]]))

        def on_done(lines, elapsed_ms):
            got.append((lines, elapsed_ms))
            done.set()

        handle = pipeline.refresh_async(on_done)
        assert handle is not None
        assert done.wait(TIMEOUT)
        assert got == [(["□"], handle.elapsed_ms)]
        assert handle.elapsed_ms > 0

    def test_refresh_async_error_is_immediate(self, pipeline: SymbolArtPipeline) -> None:
        got = []
        assert pipeline.refresh_async(lambda lines, ms: got.append((lines, ms))) is None
        assert got == [(["Image not loaded!"], 0.0)]

    def test_load_uses_loader(self, pipeline: SymbolArtPipeline, tmp_path) -> None:
        p = tmp_path / "img.png"
        Image.new("L", (3, 1), 255).save(p)
        buf = pipeline.load(str(p))
        assert buf.size() == (3, 1)
        assert pipeline.refresh(TIMEOUT) == ["□□□"]

    def test_load_failure_propagates(self, pipeline: SymbolArtPipeline, tmp_path) -> None:
        with pytest.raises(AcquisitionError):
            pipeline.load(str(tmp_path / "missing.png"))
