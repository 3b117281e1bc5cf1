#!/usr/bin/env python3
# symbol_art/errors.py
"""
Error taxonomy shared by every pipeline stage.

- PreconditionError: bad caller input (empty symbol pool, threshold out of
  range, malformed raster). Raised before any work is done.
- AcquisitionError: the image could not be fetched or decoded.
- ExecutionError: the worker process crashed or the job could not be sent.
"""

from __future__ import annotations

__all__ = [
    "SymbolArtError",
    "PreconditionError",
    "AcquisitionError",
    "ExecutionError",
]


class SymbolArtError(Exception):
    """Base class for all symbol_art failures."""


class PreconditionError(SymbolArtError, ValueError):
    pass


class AcquisitionError(SymbolArtError):
    pass


class ExecutionError(SymbolArtError):
    pass
