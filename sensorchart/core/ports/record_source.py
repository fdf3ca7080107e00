"""
RecordSource Port - Interface for retrieving raw sensor records.
Implementations read JSON over HTTP or from a local file.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from sensorchart.core.domain.errors import RetrievalError
from sensorchart.core.domain.records import RawRecord


def normalize_payload(data: Any) -> list[RawRecord]:
    """
    Coerce a decoded JSON document into a list of records.

    An array is passed through as-is (non-object entries are dropped later,
    record by record); a single object becomes a one-element list.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    raise RetrievalError("Invalid data format: Expected an array or a single object.")


class RecordSource(BaseModel, ABC):
    """
    Abstract interface for sensor record retrieval.
    Also serves as a Pydantic Model for configuration validation.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @abstractmethod
    async def fetch(self) -> list[RawRecord]:
        """
        Retrieve the current record set.

        Returns:
            List of raw records (mappings of field name to scalar)

        Raises:
            RetrievalError: on network, status, read, decode or shape failures
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None
