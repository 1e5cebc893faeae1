"""HumanMark - URL content fetcher.

Downloads referenced content before it reaches the analyzers, streaming the
body so oversized payloads are cut off at their category's size limit.
"""

from __future__ import annotations

import logging

import httpx

from humanmark.core.classifier import from_url
from humanmark.core.errors import ContentFetchError
from humanmark.models.enums import ContentCategory

logger = logging.getLogger(__name__)

MB = 1024 * 1024

SIZE_LIMITS = {
    ContentCategory.TEXT: 1 * MB,
    ContentCategory.IMAGE: 50 * MB,
    ContentCategory.AUDIO: 100 * MB,
    ContentCategory.VIDEO: 500 * MB,
}


class FetchedContent:
    __slots__ = ("url", "data", "mime_type")

    def __init__(self, url: str, data: bytes, mime_type: str | None) -> None:
        self.url = url
        self.data = data
        self.mime_type = mime_type


class ContentFetcher:
    def __init__(
        self,
        default_limit: int = 100 * MB,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.default_limit = default_limit
        self.timeout = timeout
        self._client = client

    def limit_for(self, url: str) -> int:
        return SIZE_LIMITS.get(from_url(url), self.default_limit)

    async def fetch(self, url: str) -> FetchedContent:
        limit = self.limit_for(url)
        client = self._client or httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        try:
            async with client.stream("GET", url) as resp:
                resp.raise_for_status()
                chunks: list[bytes] = []
                received = 0
                async for chunk in resp.aiter_bytes():
                    received += len(chunk)
                    if received > limit:
                        raise ContentFetchError(f"content at {url} exceeds {limit} bytes")
                    chunks.append(chunk)
                mime_type = resp.headers.get("content-type")
        except httpx.HTTPStatusError as exc:
            logger.warning("Fetch %s returned HTTP %d", url, exc.response.status_code)
            raise ContentFetchError(f"failed to fetch {url}: HTTP {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            logger.warning("Fetch %s failed: %s", url, exc)
            raise ContentFetchError(f"failed to fetch {url}: {exc}") from exc
        finally:
            if self._client is None:
                await client.aclose()
        logger.debug("Fetched %d bytes from %s", received, url)
        return FetchedContent(url=url, data=b"".join(chunks), mime_type=mime_type)

    async def shutdown(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
