#!/usr/bin/env python3
# symbol_art/ui/app.py
"""Compose the prompt_toolkit application for the symbol art viewer."""

from prompt_toolkit.application import Application
from prompt_toolkit.layout import Layout, HSplit, Window
from prompt_toolkit.key_binding import KeyBindings

from symbol_art import actions
from symbol_art.config import Config
from symbol_art.pipeline import SymbolArtPipeline
from symbol_art.styles import make_style
from symbol_art.ui.art_control import ArtControl
from symbol_art.ui.helppane import HelpPane
from symbol_art.ui.state import ArtState
from symbol_art.ui.statusbar import StatusBar
from symbol_art.ui.toolbar import Toolbar


class SymbolArtApp:
    def __init__(self, cfg: Config, pipeline: SymbolArtPipeline):
        self.cfg = cfg
        self.state = ArtState(cfg)
        self.state.lines = list(pipeline.output_lines)
        self.pipeline = pipeline
        self.art_control = ArtControl(self.state, pipeline)
        self.status = StatusBar(self.state)
        self.help_pane = HelpPane()
        self.toolbar = Toolbar(self.state, self.art_control, self.help_pane)

        self.art_window = Window(
            content=self.art_control,
            dont_extend_width=False,
            wrap_lines=False,
        )
        self.art_control.bind_window(self.art_window)
        self.root = HSplit([
            self.art_window,
            self.toolbar,
            self.status,
            self.help_pane,     # height 0 when hidden
        ])

        self.kb = self._build_key_bindings()
        self.app = Application(
            layout=Layout(self.root, focused_element=self.art_window),
            key_bindings=self.kb,
            full_screen=True,
            style=make_style(cfg),
            mouse_support=True,
        )

    def _build_key_bindings(self):
        kb = KeyBindings()
        step = int(self.cfg["ui"].get("threshold_step", 5))

        @kb.add("q")
        def _(event):
            event.app.exit()

        @kb.add("+")
        @kb.add("=")
        def _(event):
            actions.change_threshold(self.state, self.art_control, +step)

        @kb.add("-")
        def _(event):
            actions.change_threshold(self.state, self.art_control, -step)

        @kb.add("t")
        def _(event):
            actions.toggle_turn(self.state, self.art_control)

        @kb.add("r")
        def _(event):
            actions.reroll(self.state, self.art_control)

        @kb.add("s")
        def _(event):
            actions.save_output(self.state)

        @kb.add("up")
        def _(event):
            self.art_control.scroll(-1)

        @kb.add("down")
        def _(event):
            self.art_control.scroll(1)

        @kb.add("h")
        def _(event):
            self.help_pane.toggle()
            event.app.invalidate()

        return kb

    def run(self):
        try:
            if self.pipeline.source is not None:
                self.art_control.request_render()
            self.app.run()
        finally:
            self.art_control.shutdown()
