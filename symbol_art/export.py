#!/usr/bin/env python3
# symbol_art/export.py
"""
Output formatting for rendered rows: plain text or inline-styled HTML.
"""

from __future__ import annotations

import html
from typing import Sequence

__all__ = ["as_text", "as_html", "format_lines"]


def as_text(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def as_html(lines: Sequence[str], font_size: int = 12, line_height: int = 16) -> str:
    parts = [f'<div style="font-size:{font_size}pt;line-height:{line_height}pt">']
    for line in lines:
        parts.append(
            '<div style="text-overflow: unset; white-space: nowrap;">'
            f"{html.escape(line)}</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def format_lines(lines: Sequence[str], fmt: str = "text", font_size: int = 12, line_height: int = 16) -> str:
    if fmt == "text":
        return as_text(lines)
    if fmt == "html":
        return as_html(lines, font_size, line_height)
    raise ValueError("not implemented")
