"""Error types raised by boxwhisker.

Library functions raise these; BoxWhiskerVisual is the boundary that turns
ConfigurationError and DataError into a single host warning per render cycle.
"""

from __future__ import annotations


class BoxWhiskerError(Exception):
    """Base class for all boxwhisker errors."""


class ConfigurationError(BoxWhiskerError, ValueError):
    """Quantile probabilities (or other options) are out of range or out of order."""


class DataError(BoxWhiskerError, ValueError):
    """An observation in the active group set is not numeric."""


class InsufficientDataError(BoxWhiskerError, ValueError):
    """A statistic or scale was requested over zero values."""


class DuplicateLabelError(DataError):
    """Two groups map to the same string label, so one would hide the other."""
