"""
Record Domain Models - Raw sensor records and their parsed form.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pandas as pd

RawRecord = Mapping[str, Any]


@dataclass(frozen=True)
class ParsedRecord:
    """A raw record plus its normalized instant (None when parsing failed)."""

    fields: RawRecord
    instant: pd.Timestamp | None

    @property
    def is_valid(self) -> bool:
        return self.instant is not None

    def get(self, key: str) -> Any | None:
        """Look up a field without assuming it is present."""
        return self.fields.get(key)
