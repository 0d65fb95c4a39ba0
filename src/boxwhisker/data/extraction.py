"""
Host data extraction (pure pandas).

The host hands over a wide categorical table:

    index   -> group labels (one box per row)
    columns -> numeric series keys ("group keys", e.g. minutes of the day)
    cells   -> observations

Steps:
  1. Keep only series whose key is divisible by the time bucket.
  2. Walk each row left to right and collect its observations. Missing cells
     (None / NaN) are skipped; anything else that does not parse as a number
     makes the whole frame invalid (DataError).
"""

from __future__ import annotations

import math
from typing import Any

import pandas as pd

from boxwhisker.errors import ConfigurationError, DataError, DuplicateLabelError
from boxwhisker.stats.quantiles import to_number
from boxwhisker.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIME_BUCKET = 60


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NA or value is pd.NaT


def _series_key(column: Any) -> float | None:
    try:
        key = float(column)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(key) else key


def filter_time_bucket(frame: pd.DataFrame, bucket: float = DEFAULT_TIME_BUCKET) -> pd.DataFrame:
    """
    Keep the columns whose numeric key is a multiple of ``bucket``.

    Columns whose key is not numeric are dropped.

    Raises:
        ConfigurationError: If bucket is not a positive number.
    """
    try:
        bucket = float(bucket)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"time bucket must be a positive number, got {bucket!r}") from e
    if not bucket > 0:
        raise ConfigurationError(f"time bucket must be a positive number, got {bucket!r}")

    keep = []
    for column in frame.columns:
        key = _series_key(column)
        if key is not None and key % bucket == 0:
            keep.append(column)
    logger.debug(f"time bucket {bucket:g}: keeping {len(keep)} of {len(frame.columns)} series")
    return frame.loc[:, keep]


def extract_groups(frame: pd.DataFrame, bucket: float = DEFAULT_TIME_BUCKET) -> dict[str, list[float]]:
    """
    Collect per-group observations from a wide frame.

    Args:
        frame: Wide frame (index = group labels, columns = series keys).
        bucket: Time bucket for the series filter.

    Returns:
        Dict label -> observations, in row order. Rows with no observation in
        the kept series map to an empty list.

    Raises:
        DataError: If any kept cell is not numeric.
        DuplicateLabelError: If two rows share a label (after str()).
        ConfigurationError: If the bucket is invalid.
    """
    kept = filter_time_bucket(frame, bucket)
    labels = kept.index.map(str)
    if labels.has_duplicates:
        dupes = sorted(set(labels[labels.duplicated()]))
        raise DuplicateLabelError(f"group labels repeat across rows: {dupes}")

    groups: dict[str, list[float]] = {}
    for label, row in zip(kept.index, kept.itertuples(index=False, name=None)):
        values = groups[str(label)] = []
        for value in row:
            if _is_missing(value):
                continue
            try:
                values.append(to_number(value))
            except DataError:
                logger.warning(f"non-numeric observation {value!r} in group {label!r}")
                raise
    return groups


def pivot_long_frame(
    df: pd.DataFrame,
    label_col: str,
    key_col: str,
    value_col: str,
) -> pd.DataFrame:
    """
    Turn long rows (label, key, value) into the wide shape extract_groups() reads.

    Label and key order follow first appearance. Repeated (label, key) pairs keep
    the last value.

    Raises:
        ValueError: If a required column is missing.
    """
    for col in (label_col, key_col, value_col):
        if col not in df.columns:
            raise ValueError(f"df must contain required column {col!r}")
    labels = list(dict.fromkeys(df[label_col].tolist()))
    keys = list(dict.fromkeys(df[key_col].tolist()))
    deduped = df.drop_duplicates(subset=[label_col, key_col], keep="last")
    wide = deduped.pivot(index=label_col, columns=key_col, values=value_col)
    return wide.reindex(index=labels, columns=keys)
