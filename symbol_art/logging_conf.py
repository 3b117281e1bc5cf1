#!/usr/bin/env python3
# symbol_art/logging_conf.py
"""
Central logging setup for Symbol Art.
Supports console and optional rotating file logs.
"""

import logging
from logging.handlers import RotatingFileHandler
from symbol_art.config import Config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(cfg: Config, quiet: bool = False) -> None:
    """Configure the root logger from the ``logging`` config section.

    ``quiet`` drops console output below WARNING; the full-screen UI uses it
    so log lines do not scribble over the layout.
    """
    level_name = cfg["logging"].get("level", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if quiet:
        for h in logging.getLogger().handlers:
            h.setLevel(logging.WARNING)

    log_file = cfg["logging"].get("file")
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(cfg["logging"].get("rotate_bytes", 5 * 1024 * 1024)),
            backupCount=int(cfg["logging"].get("rotate_keep", 3)),
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)

    if cfg["logging"].get("http_debug"):
        logging.getLogger("urllib3").setLevel(logging.DEBUG)
        logging.getLogger("requests").setLevel(logging.DEBUG)
