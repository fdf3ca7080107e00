"""
Window Filter - Restricts records to a trailing time window.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

import pandas as pd

from sensorchart.core.domain.records import ParsedRecord


def as_utc(now: datetime | None = None) -> pd.Timestamp:
    """Current (or given) time as a UTC timestamp; naive input is taken as UTC."""
    if now is None:
        return pd.Timestamp.now(tz="UTC")
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def window_start(now: datetime, hours: float) -> pd.Timestamp:
    """Cutoff instant of a trailing window ending at ``now``."""
    return as_utc(now) - timedelta(hours=hours)


def filter_window(
    records: Iterable[ParsedRecord],
    hours: float,
    max_points: int | None = None,
    now: datetime | None = None,
) -> list[ParsedRecord]:
    """
    Keep valid records no older than ``hours``, oldest first.

    Sorting is stable, so records sharing an instant keep their input order.
    When ``max_points`` is positive only the most recent that many survive.
    """
    cutoff = window_start(as_utc(now), hours)

    kept = [r for r in records if r.is_valid and r.instant >= cutoff]
    kept.sort(key=lambda r: r.instant)

    if max_points and max_points > 0 and len(kept) > max_points:
        kept = kept[-max_points:]
    return kept
