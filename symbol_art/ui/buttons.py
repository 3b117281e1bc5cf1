#!/usr/bin/env python3
# symbol_art/ui/buttons.py
"""
Minimal flat button primitives for the viewer toolbar.
"""

from prompt_toolkit.widgets import Button
from prompt_toolkit.formatted_text import HTML

def make_button(label: str, handler, style: str = "class:button") -> Button:
    """
    Create a button with a consistent minimalist look.
    """
    btn = Button(text=HTML(f"<b>{label}</b>"), handler=handler)
    btn.window.style = style
    return btn
