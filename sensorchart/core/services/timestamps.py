"""
Timestamp Normalizer - Converts raw timestamp strings into UTC instants.

When a format hint is configured, a fixed list of layout matchers is tried
first, in this order:
1. dotted_date_t_time      DD.MM.YYYYTHH:MM:SS
2. iso_date_space_time     YYYY-MM-DD HH:MM:SS
3. dotted_date_space_time  DD.MM.YYYY HH:MM:SS
4. iso_8601                YYYY-MM-DDTHH:MM:SS[.mmm][Z]

A layout matches when it occurs anywhere in the string, so surrounding text
such as a weekday or a zone name is ignored. The first matching layout
rewrites the string into a canonical form for the general parser (pandas);
the ISO layout hands the whole string over, keeping any offset. Without a
hint, or when nothing matches, the raw string is handed to the general
parser directly.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import pandas as pd

from sensorchart.core.domain.records import ParsedRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimestampMatcher:
    """A named layout: regex plus a rewrite into parser-friendly text."""

    name: str
    pattern: re.Pattern[str]
    rewrite: Callable[[re.Match[str]], str]

    def match(self, text: str) -> str | None:
        """Return the canonical text if this layout occurs in the string."""
        found = self.pattern.search(text)
        if found is None:
            return None
        return self.rewrite(found)


def _from_dotted(m: re.Match[str]) -> str:
    day, month, year, hour, minute, second = m.groups()
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}"


def _from_iso_date(m: re.Match[str]) -> str:
    year, month, day, hour, minute, second = m.groups()
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}"


def _verbatim(m: re.Match[str]) -> str:
    return m.string


MATCHERS: tuple[TimestampMatcher, ...] = (
    TimestampMatcher(
        "dotted_date_t_time",
        re.compile(r"(\d{2})\.(\d{2})\.(\d{4})T(\d{2}):(\d{2}):(\d{2})"),
        _from_dotted,
    ),
    TimestampMatcher(
        "iso_date_space_time",
        re.compile(r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})"),
        _from_iso_date,
    ),
    TimestampMatcher(
        "dotted_date_space_time",
        re.compile(r"(\d{2})\.(\d{2})\.(\d{4}) (\d{2}):(\d{2}):(\d{2})"),
        _from_dotted,
    ),
    TimestampMatcher(
        "iso_8601",
        re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{3})?Z?"),
        _verbatim,
    ),
)


def canonicalize(text: str) -> str | None:
    """Rewrite text via the first matching layout, or None if none match."""
    for matcher in MATCHERS:
        canonical = matcher.match(text)
        if canonical is not None:
            return canonical
    return None


def parse_instant(text: str, tz: str = "UTC") -> pd.Timestamp | None:
    """
    General date parser.

    Naive results are read as wall-clock time in ``tz``; every result is
    returned in UTC. Returns None when pandas cannot make an instant of it.
    """
    try:
        ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None

    if ts.tzinfo is None:
        ts = ts.tz_localize(tz, ambiguous="NaT", nonexistent="NaT")
        if pd.isna(ts):
            return None
    return ts.tz_convert("UTC")


def normalize_timestamp(
    value: Any,
    format_hint: str | None = None,
    tz: str = "UTC",
) -> pd.Timestamp | None:
    """
    Convert a raw time field into an absolute instant.

    Args:
        value: Raw field value; anything but a non-empty string fails
        format_hint: Enables the fixed layout matchers when set
        tz: Zone for timestamps that carry no offset

    Returns:
        UTC timestamp, or None on failure
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None

    if format_hint:
        canonical = canonicalize(text)
        if canonical is not None:
            return parse_instant(canonical, tz)
    return parse_instant(text, tz)


def parse_records(
    raw_records: Iterable[Any],
    time_field: str = "timestamp",
    format_hint: str | None = None,
    tz: str = "UTC",
) -> list[ParsedRecord]:
    """
    Attach a normalized instant to every record.

    Entries that are not objects are dropped. Records whose timestamp fails
    to parse are kept with ``instant=None`` so the caller can count them.
    """
    parsed = []
    for entry in raw_records:
        if not isinstance(entry, Mapping):
            logger.debug(f"Skipping non-object entry: {entry!r}")
            continue
        instant = normalize_timestamp(entry.get(time_field), format_hint, tz)
        if instant is None:
            logger.debug(
                f"Invalid timestamp in '{time_field}': {entry.get(time_field)!r} "
                f"(format '{format_hint or 'auto'}')"
            )
        parsed.append(ParsedRecord(fields=entry, instant=instant))
    return parsed
