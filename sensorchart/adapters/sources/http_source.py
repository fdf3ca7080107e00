"""
HTTP Record Source - Fetches sensor records from a JSON endpoint.
"""

import logging

import httpx
from pydantic import PrivateAttr

from sensorchart.core.domain.errors import RetrievalError
from sensorchart.core.domain.records import RawRecord
from sensorchart.core.ports.record_source import RecordSource, normalize_payload

logger = logging.getLogger(__name__)


class HttpRecordSource(RecordSource):
    """
    Record source for JSON served over HTTP(S).
    Configured via Pydantic model fields.
    """
    url: str
    timeout: float = 30.0
    headers: dict[str, str] = {}

    _client: httpx.AsyncClient | None = PrivateAttr(default=None)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
            )
        return self._client

    async def fetch(self) -> list[RawRecord]:
        """GET the URL and decode its JSON body."""
        client = await self._get_client()
        logger.info(f"Fetching data from URL: {self.url}")

        try:
            response = await client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RetrievalError(f"HTTP error! status: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RetrievalError(f"Request to {self.url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise RetrievalError(f"Malformed JSON from {self.url}: {e}") from e

        return normalize_payload(data)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
