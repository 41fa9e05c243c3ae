# core/errors.py
# Error kinds raised by the grid-world trainer. Every one of them aborts the run.
from __future__ import annotations


class GridWorldError(Exception):
    """Base class for all run-aborting errors."""


class ConfigError(GridWorldError, ValueError):
    """Grid size, layout or hyperparameters outside the allowed range."""


class TableIOError(GridWorldError, OSError):
    """A Q-table file could not be opened, read or written."""


class FormatError(GridWorldError, ValueError):
    """A Q-table file is truncated or structurally malformed."""


class DimensionMismatch(GridWorldError, ValueError):
    """A Q-table was paired with an environment of a different size."""
