#!/usr/bin/env python3
# symbol_art/config.py
"""
Config loader/saver and defaults for Symbol Art.

Goals:
- Single JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.

Usage:
    from symbol_art.config import Config, DEFAULT_CONFIG
    cfg = Config.load()                 # ~/.config/symbol_art/symbol_art.json
    threshold = cfg["symbols"]["threshold"]
    cfg["symbols"]["turn"] = True
    cfg.save()
"""

from __future__ import annotations

import copy
import json
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "symbols": {
        "light": "🍀😀",                   # drawn for white pixels
        "dark": "🐳🐬🐋🐟",               # drawn for black pixels
        "threshold": 200,                 # gray <= threshold is dark
        "turn": False,                    # rotate output by 90 degrees
    },
    "image": {
        "url": "https://imgur.com/6cf1KE0",
        "max_width": 120,                 # downscale wider images; 0 keeps size
    },
    "network": {
        "user_agent": "symbol-art/1.0 (+https://example.invalid)",
        "connect_timeout_s": 5.0,
        "read_timeout_s": 15.0,
        "retries": 2,
        "fallback_exts": [".jpg", ".jpeg", ".tif"],
    },
    "output": {
        "format": "text",                 # text | html
        "font_size": 12,                  # pt, html only
        "line_height": 16,
    },
    "ui": {
        "theme": "auto",                  # auto | light | dark
        "threshold_step": 5,
    },
    "logging": {
        "level": "INFO",
        "http_debug": False,
        "file": None,                     # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "SymbolArt")
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "SymbolArt")
    return os.path.join(os.path.expanduser("~/.config"), "symbol_art")

def _default_config_path() -> str:
    """Resolve default config path, honoring SYMBOL_ART_CONFIG env override."""
    env = os.environ.get("SYMBOL_ART_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "symbol_art.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True, ensure_ascii=False)
            f.write("\n")
        if platform.system() == "Windows":
            if os.path.exists(path):
                os.remove(path)
        os.replace(tmp, path)
    except Exception:
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise

def _coerce_num(v: Any, default: float, minmax: Optional[Tuple[float, float]] = None) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"): return True
        if s in ("0", "false", "no", "off"): return False
    return default

def _coerce_symbols(v: Any, default: str) -> str:
    # An empty pool is a render-time precondition failure, not a config error.
    if isinstance(v, str):
        return v
    if isinstance(v, list) and all(isinstance(s, str) for s in v):
        return "".join(v)
    return default

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = copy.deepcopy(_deep_merge(DEFAULT_CONFIG, cfg or {}))

    # symbols
    s = c["symbols"]
    s["light"] = _coerce_symbols(s.get("light"), DEFAULT_CONFIG["symbols"]["light"])
    s["dark"] = _coerce_symbols(s.get("dark"), DEFAULT_CONFIG["symbols"]["dark"])
    s["threshold"] = _coerce_int(s.get("threshold"), DEFAULT_CONFIG["symbols"]["threshold"], (0, 255))
    s["turn"] = _coerce_bool(s.get("turn"), DEFAULT_CONFIG["symbols"]["turn"])

    # image
    im = c["image"]
    im["url"] = str(im.get("url") or DEFAULT_CONFIG["image"]["url"])
    im["max_width"] = _coerce_int(im.get("max_width"), DEFAULT_CONFIG["image"]["max_width"], (0, 4096))

    # network
    n = c["network"]
    n["user_agent"] = str(n.get("user_agent") or DEFAULT_CONFIG["network"]["user_agent"])
    n["connect_timeout_s"] = _coerce_num(n.get("connect_timeout_s"), 5.0, (0.2, 60.0))
    n["read_timeout_s"]    = _coerce_num(n.get("read_timeout_s"), 15.0, (0.5, 120.0))
    n["retries"]           = _coerce_int(n.get("retries"), 2, (0, 10))
    exts = n.get("fallback_exts")
    if not isinstance(exts, list) or not all(isinstance(e, str) and e.startswith(".") for e in exts):
        n["fallback_exts"] = DEFAULT_CONFIG["network"]["fallback_exts"][:]

    # output
    o = c["output"]
    if o.get("format") not in ("text", "html"):
        o["format"] = DEFAULT_CONFIG["output"]["format"]
    o["font_size"]   = _coerce_int(o.get("font_size"), 12, (1, 200))
    o["line_height"] = _coerce_int(o.get("line_height"), 16, (1, 400))

    # ui
    ui = c["ui"]
    if ui.get("theme") not in ("auto", "light", "dark"):
        ui["theme"] = DEFAULT_CONFIG["ui"]["theme"]
    ui["threshold_step"] = _coerce_int(ui.get("threshold_step"), 5, (1, 64))

    # logging
    lg = c["logging"]
    if lg.get("level") not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
        lg["level"] = DEFAULT_CONFIG["logging"]["level"]
    lg["http_debug"] = _coerce_bool(lg.get("http_debug"), DEFAULT_CONFIG["logging"]["http_debug"])
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), DEFAULT_CONFIG["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), DEFAULT_CONFIG["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate({}))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = True) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate({})
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("config root must be an object")
        except (OSError, ValueError):
            # Corrupt file. Backup and regenerate.
            backup = cfg_path + ".corrupt.bak"
            try:
                shutil.copyfile(cfg_path, backup)
            except OSError:
                pass
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)

    # Convenience getters
    @property
    def threshold(self) -> int:
        return self.data["symbols"]["threshold"]

    @property
    def turn(self) -> bool:
        return self.data["symbols"]["turn"]


__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "_default_config_path",
]
