"""HTTP access to the upstream grid sources."""

from __future__ import annotations

import logging
import os

import httpx

from gridwatch.ingest.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class SourceClient:
    """Fetches upstream payloads as text. One request per call, no retries."""

    def __init__(self, *, session: httpx.AsyncClient | None = None, timeout: float | None = None) -> None:
        if session is None and timeout is None:
            timeout = float(os.environ.get("HTTP_TIMEOUT", DEFAULT_TIMEOUT))
        self.session = session or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": "GridwatchBot/1.0"},
        )

    async def close(self) -> None:
        await self.session.aclose()

    async def fetch(self, url: str) -> str:
        logger.info("Fetching %s", url)
        try:
            response = await self.session.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc
        return response.text
