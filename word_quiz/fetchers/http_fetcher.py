from __future__ import annotations

import logging
import time

import httpx

from word_quiz.errors import FetchFailure
from word_quiz.fetchers.base import ContentFetcher

log = logging.getLogger("word_quiz.fetch")

NO_CACHE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


class HttpFetcher(ContentFetcher):
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def url_for(self, source_id: str, bust_cache: bool = False) -> str:
        url = f"{self.base_url}/{source_id.lstrip('/')}"
        if bust_cache:
            url += f"?v={int(time.time() * 1000)}"
        return url

    async def fetch(self, source_id: str, bust_cache: bool = False) -> str:
        url = self.url_for(source_id, bust_cache)
        t0 = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, headers=NO_CACHE_HEADERS)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.warning("GET %s -> %d", url, e.response.status_code)
            raise FetchFailure(f"{source_id}: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.warning("GET %s failed: %s", url, e)
            raise FetchFailure(f"{source_id}: {e}") from e
        log.info("GET %s (%.2fs, %d bytes)", url, time.monotonic() - t0, len(resp.content))
        return resp.text

    def name(self) -> str:
        return f"http/{self.base_url}"
