#!/usr/bin/env python3
# symbol_art/ui/toolbar.py

from __future__ import annotations

from prompt_toolkit.application.current import get_app
from prompt_toolkit.layout import HSplit, VSplit, Window
from prompt_toolkit.widgets import Box, Label

from symbol_art import actions
from symbol_art.ui.art_control import ArtControl
from symbol_art.ui.buttons import make_button
from symbol_art.ui.helppane import HelpPane
from symbol_art.ui.state import ArtState


class Toolbar:
    """Clickable controls for threshold, orientation, re-roll and help."""

    def __init__(self, state: ArtState, art_control: ArtControl, help_pane: HelpPane):
        self.state = state
        self.art_control = art_control
        self.help_pane = help_pane
        step = int(state.cfg["ui"].get("threshold_step", 5))

        self.btn_lower = make_button("-", lambda: self._threshold(-step))
        self.btn_raise = make_button("+", lambda: self._threshold(+step))
        self.btn_turn = make_button("Turn (t)", self._turn)
        self.btn_reroll = make_button("Re-roll (r)", self._reroll)
        self.btn_save = make_button("Save (s)", self._save)
        self.btn_help = make_button("Help (h)", self._help)
        self.btn_quit = make_button("Quit (q)", self._quit)

        self._container = Box(
            body=HSplit(
                [
                    Label("Toolbar  Click buttons or use keys"),
                    VSplit(
                        [
                            Label("Threshold:"),
                            self.btn_lower,
                            self.btn_raise,
                            Window(width=1, char="|"),
                            self.btn_turn,
                            self.btn_reroll,
                            Window(width=1, char="|"),
                            self.btn_save,
                            self.btn_help,
                            self.btn_quit,
                        ],
                        padding=1,
                    ),
                ]
            ),
            style="class:toolbar",
            padding=1,
            height=3,
        )

    def __pt_container__(self):
        return self._container

    def _threshold(self, delta: int) -> None:
        actions.change_threshold(self.state, self.art_control, delta)
        self.art_control.focus()

    def _turn(self) -> None:
        actions.toggle_turn(self.state, self.art_control)
        self.art_control.focus()

    def _reroll(self) -> None:
        actions.reroll(self.state, self.art_control)
        self.art_control.focus()

    def _save(self) -> None:
        actions.save_output(self.state)
        self.art_control.focus()

    def _help(self) -> None:
        self.help_pane.toggle()
        self.state.set_info("Help toggled")
        get_app().invalidate()
        self.art_control.focus()

    def _quit(self) -> None:
        get_app().exit()
