#!/usr/bin/env python3
# symbol_art/rendering/symbols.py
"""
Symbol pools and named presets.

A pool is an ordered tuple of symbols. Strings are split into visible
symbols: combining marks, variation selectors and skin tone modifiers stay
with the character before them, ZWJ sequences and regional indicator pairs
(flags) are kept whole. Modifiers with nothing to attach to are dropped.
This covers common emoji; pass a list to force any other grouping.
"""

from __future__ import annotations

import unicodedata
from typing import Dict, Iterable, List, Tuple, Union

SymbolPool = Tuple[str, ...]
PoolLike = Union[str, Iterable[str]]

__all__ = [
    "SymbolPool",
    "to_pool",
    "split_symbols",
    "default_symbol_sets",
]

_ZWJ = "‍"


def _is_extender(ch: str) -> bool:
    cp = ord(ch)
    return (
        unicodedata.category(ch) in ("Mn", "Me")
        or 0xFE00 <= cp <= 0xFE0F          # variation selectors
        or 0xE0100 <= cp <= 0xE01EF
        or 0x1F3FB <= cp <= 0x1F3FF        # skin tones
        or 0xE0020 <= cp <= 0xE007F        # tag sequences
        or ch == _ZWJ
    )


def _is_regional(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def split_symbols(text: str) -> List[str]:
    out: List[str] = []
    glue = False
    for ch in text:
        if _is_extender(ch):
            if out:
                out[-1] += ch
                glue = ch == _ZWJ
            continue
        if glue or (_is_regional(ch) and out and len(out[-1]) == 1 and _is_regional(out[-1])):
            out[-1] += ch
        else:
            out.append(ch)
        glue = False
    return out


def to_pool(symbols: PoolLike) -> SymbolPool:
    """Normalize a string or iterable of strings to a pool. May be empty."""
    if isinstance(symbols, str):
        return tuple(split_symbols(symbols))
    return tuple(s for s in symbols if s)


def default_symbol_sets() -> Dict[str, Tuple[str, str]]:
    # (light, dark) pairs; "sea" matches the config defaults.
    return {
        "sea": ("🍀😀", "🐳🐬🐋🐟"),
        "blocks": ("□", "■"),
        "shades": (" ░", "▓█"),
        "ascii": (" .", "#@"),
        "stars": ("·", "★☆"),
    }
