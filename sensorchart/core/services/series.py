"""
Series Extraction and Smoothing.

An extracted series is a DataFrame with columns ['unique_id', 'ds', 'y'],
ordered by 'ds', one per SeriesConfig and refresh cycle.
"""

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from sensorchart.core.domain.chart import SeriesConfig
from sensorchart.core.domain.records import ParsedRecord

logger = logging.getLogger(__name__)

SERIES_COLUMNS = ["unique_id", "ds", "y"]


def to_number(value: Any) -> float | None:
    """
    Coerce a sensor value to a finite float.

    Numbers and numeric strings pass; None, booleans, NaN, infinities,
    integers beyond float range and anything non-numeric return None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, np.number)):
            number = float(value)
        elif isinstance(value, str):
            number = float(pd.to_numeric(value.strip(), errors="coerce"))
        else:
            return None
    except (OverflowError, ValueError, TypeError):
        return None
    if not np.isfinite(number):
        return None
    return number


def extract_series(records: Sequence[ParsedRecord], config: SeriesConfig) -> pd.DataFrame:
    """
    Pull (instant, value) pairs for one series out of a filtered record set.

    Record order is preserved; records without a usable value are skipped.
    """
    instants = []
    values = []
    skipped = 0
    for record in records:
        if not record.is_valid:
            continue
        value = to_number(record.get(config.value_field))
        if value is None:
            skipped += 1
            continue
        instants.append(record.instant)
        values.append(value)

    if skipped:
        logger.debug(f"Skipped {skipped} records without a numeric '{config.value_field}'")

    if not values:
        return pd.DataFrame(columns=SERIES_COLUMNS)

    return pd.DataFrame({
        "unique_id": config.value_field,
        "ds": pd.DatetimeIndex(instants),
        "y": np.asarray(values, dtype=float),
    })


def smooth(values: pd.Series, radius: int) -> pd.Series:
    """
    Centered moving average over sequence position.

    Each output is the mean of the inputs at most ``radius`` positions away;
    the window shrinks at both ends. A radius of 0 returns ``values`` itself.
    """
    if radius < 0:
        raise ValueError(f"Smoothing radius must be non-negative, got {radius}")
    if radius == 0:
        return values
    return values.rolling(window=2 * radius + 1, center=True, min_periods=1).mean()


def smooth_series(series: pd.DataFrame, radius: int) -> pd.DataFrame:
    """Apply ``smooth`` to the 'y' column, returning a new frame."""
    if radius == 0 or series.empty:
        return series
    smoothed = series.copy()
    smoothed["y"] = smooth(series["y"].reset_index(drop=True), radius).to_numpy()
    return smoothed
