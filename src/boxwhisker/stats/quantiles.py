"""
Quantile helpers (pure numpy).

All estimators here operate on values that are already sorted ascending, the way
the box statistics consume them. The quantile estimator is R-7 (linear
interpolation between closest ranks):

    pos  = (n - 1) * p
    lo   = floor(pos)
    frac = pos - lo
    Q    = a[lo] + frac * (a[lo + 1] - a[lo])      (clamped at the array ends)

which is numpy's ``method="linear"``.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

import numpy as np

from boxwhisker.errors import DataError, InsufficientDataError


def quantile(sorted_values: Sequence[float], p: float) -> float:
    """
    R-7 quantile of an ascending sequence.

    Args:
        sorted_values: Values sorted ascending (not checked).
        p: Probability in [0, 1].

    Returns:
        Interpolated quantile as a Python float.

    Raises:
        ValueError: If p is outside [0, 1].
        InsufficientDataError: If sorted_values is empty.
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"quantile probability must be in [0, 1], got {p!r}")
    a = np.asarray(sorted_values, dtype=float)
    if a.size == 0:
        raise InsufficientDataError("quantile of an empty sequence")
    return float(np.quantile(a, p, method="linear"))


def median(sorted_values: Sequence[float]) -> float:
    """Median of an ascending sequence (R-7 at p=0.5)."""
    return quantile(sorted_values, 0.5)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Raises InsufficientDataError on empty input."""
    a = np.asarray(values, dtype=float)
    if a.size == 0:
        raise InsufficientDataError("mean of an empty sequence")
    return float(np.mean(a))


def to_number(value: Any) -> float:
    """
    Parse one observation as a float.

    Numbers and numeric strings are accepted. Anything else, including NaN,
    raises DataError.
    """
    if isinstance(value, bool):
        return float(value)
    try:
        x = float(value)
    except (TypeError, ValueError) as e:
        raise DataError(f"non-numeric observation {value!r}") from e
    if math.isnan(x):
        raise DataError(f"non-numeric observation {value!r}")
    return x


def sorted_points(values: Iterable[Any], *, unique: bool = False) -> np.ndarray:
    """
    Parse, sort ascending and optionally drop adjacent duplicates.

    Args:
        values: Raw observations.
        unique: If True, keep only the first of each run of equal values.

    Returns:
        1-D float array.

    Raises:
        DataError: If any value is not numeric.
    """
    a = np.sort(np.array([to_number(v) for v in values], dtype=float))
    if unique and a.size > 1:
        keep = np.concatenate(([True], a[1:] != a[:-1]))
        a = a[keep]
    return a
