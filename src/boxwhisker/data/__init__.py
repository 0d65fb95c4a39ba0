"""Host data extraction for box charts."""

from boxwhisker.data.extraction import (
    DEFAULT_TIME_BUCKET,
    extract_groups,
    filter_time_bucket,
    pivot_long_frame,
)

__all__ = [
    "DEFAULT_TIME_BUCKET",
    "extract_groups",
    "filter_time_bucket",
    "pivot_long_frame",
]
