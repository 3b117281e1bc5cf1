#!/usr/bin/env python3
# symbol_art/styles.py
"""
Style definitions for the Symbol Art viewer.
Provides light, dark, and auto themes for prompt_toolkit.
"""

import os

from prompt_toolkit.styles import Style
from symbol_art.config import Config

def make_style(cfg: Config) -> Style:
    theme = cfg["ui"].get("theme", "auto")

    base_dark = {
        "toolbar": "bg:#202020 #ffffff",
        "status": "bg:#303030 #cccccc",
        "help": "bg:#202020 #dddddd",
        "button": "bg:#444444 #ffffff",
    }
    base_light = {
        "toolbar": "bg:#dddddd #000000",
        "status": "bg:#cccccc #000000",
        "help": "bg:#eeeeee #000000",
        "button": "bg:#bbbbbb #000000",
    }

    if theme == "light":
        return Style.from_dict(base_light)
    if theme == "dark":
        return Style.from_dict(base_dark)

    # Auto-detect via environment
    if os.getenv("TERM_THEME", "").lower() == "light":
        return Style.from_dict(base_light)
    return Style.from_dict(base_dark)
