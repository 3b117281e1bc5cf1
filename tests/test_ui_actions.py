"""Tests for viewer state and the shared key/toolbar actions."""

from __future__ import annotations

from prompt_toolkit.formatted_text import fragment_list_to_text, to_formatted_text
from prompt_toolkit.layout import HSplit, Window

from symbol_art import actions
from symbol_art.config import Config
from symbol_art.ui.art_control import ArtControl
from symbol_art.ui.state import ArtState
from symbol_art.ui.statusbar import StatusBar


class FakeControl:
    def __init__(self):
        self.renders = 0

    def request_render(self) -> None:
        self.renders += 1


class TestArtState:
    def test_initial_from_config(self, cfg: Config) -> None:
        cfg.update({"symbols": {"threshold": 42, "turn": True}})
        state = ArtState(cfg)
        assert state.threshold == 42
        assert state.turn is True

    def test_threshold_clamped(self, cfg: Config) -> None:
        state = ArtState(cfg)
        assert state.threshold_delta(500) == 255
        assert state.threshold_delta(-1000) == 0

    def test_set_lines_clears_busy(self, cfg: Config) -> None:
        state = ArtState(cfg)
        state.busy = True
        state.set_lines(["ab"], 3.5)
        assert state.lines == ["ab"]
        assert state.last_render_ms == 3.5
        assert not state.busy


class TestActions:
    def test_change_threshold_renders(self, cfg: Config) -> None:
        state, control = ArtState(cfg), FakeControl()
        actions.change_threshold(state, control, -5)
        assert state.threshold == 195
        assert control.renders == 1
        assert state.info_msg == "Threshold 195"

    def test_toggle_turn_and_reroll(self, cfg: Config) -> None:
        state, control = ArtState(cfg), FakeControl()
        actions.toggle_turn(state, control)
        assert state.turn is True
        actions.reroll(state, control)
        assert control.renders == 2

    def test_save_output_text(self, cfg: Config, tmp_path) -> None:
        state = ArtState(cfg)
        state.lines = ["■□", "□■"]
        path = actions.save_output(state, str(tmp_path / "out.txt"))
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "■□\n□■\n"
        assert state.info_msg == f"Saved {path}"

    def test_save_output_html(self, cfg: Config, tmp_path) -> None:
        cfg.update({"output": {"format": "html"}})
        state = ArtState(cfg)
        state.lines = ["x"]
        actions.save_output(state, str(tmp_path / "out.html"))
        assert "font-size:12pt" in (tmp_path / "out.html").read_text(encoding="utf-8")

    def test_save_output_failure_reported(self, cfg: Config, tmp_path) -> None:
        state = ArtState(cfg)
        assert actions.save_output(state, str(tmp_path / "no" / "such" / "dir.txt")) == ""
        assert state.info_msg.startswith("Save failed")


class TestStatusBar:
    @staticmethod
    def _shown(bar: StatusBar) -> str:
        control = bar.label.formatted_text_control
        return fragment_list_to_text(to_formatted_text(control.text))

    def test_text_follows_state(self, cfg: Config) -> None:
        state = ArtState(cfg)
        bar = StatusBar(state)
        HSplit([Window(), bar])
        assert "threshold=200 upright rows=1 render=0.0ms" in self._shown(bar)

        state.threshold_delta(+5)
        state.toggle_turn()
        state.set_lines(["a", "b", "c"], 12.0)
        state.set_info("Saved out.txt")
        shown = self._shown(bar)
        assert "threshold=205 turned rows=3 render=12.0ms" in shown
        assert shown.endswith("Saved out.txt")

    def test_busy_marker(self, cfg: Config) -> None:
        state = ArtState(cfg)
        bar = StatusBar(state)
        state.busy = True
        assert "rendering..." in self._shown(bar)
        state.set_lines(["x"])
        assert "rendering..." not in self._shown(bar)


class FakePipeline:
    """Finishes each render synchronously with a fixed timing."""

    def __init__(self):
        self.turn = False
        self.threshold = None

    def set_threshold(self, t: int) -> None:
        self.threshold = t

    def refresh_async(self, on_done):
        on_done(["done"], 7.5)


class TestArtControl:
    def test_render_time_from_finished_render(self, cfg: Config) -> None:
        state = ArtState(cfg)
        state.toggle_turn()
        pipeline = FakePipeline()
        control = ArtControl(state, pipeline)  # type: ignore[arg-type]
        control.request_render()
        assert pipeline.turn is True
        assert pipeline.threshold == 200
        assert state.lines == ["done"]
        assert state.last_render_ms == 7.5
        assert not state.busy
