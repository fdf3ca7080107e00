"""
File Record Source - Reads sensor records from a local JSON file.
"""

import asyncio
import json
import logging
from pathlib import Path

from sensorchart.core.domain.errors import RetrievalError
from sensorchart.core.domain.records import RawRecord
from sensorchart.core.ports.record_source import RecordSource, normalize_payload

logger = logging.getLogger(__name__)


class FileRecordSource(RecordSource):
    """
    Record source for a JSON file on disk. The file is re-read on every fetch.
    """
    path: Path

    async def fetch(self) -> list[RawRecord]:
        logger.info(f"Reading data from local file: {self.path}")
        try:
            content = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            raise RetrievalError(f"Cannot read {self.path}: {e}") from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise RetrievalError(f"Malformed JSON in {self.path}: {e}") from e

        return normalize_payload(data)
