# fragnav/fetcher.py
import logging
from typing import Optional

import httpx

from .config import Config
from .errors import FetchError

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, max-age=0",
    "Pragma": "no-cache",
}


class ContentFetcher:
    """
    Retrieves raw fragment content (markup plus embedded code) for an address.

    Every request bypasses caches, so navigating to the same address twice
    always reaches the content store. Failures never propagate: they are
    logged and reported as None.

    :param base_url: Prefix for relative addresses (falls back to `fetch.base_url`).
    :param timeout: Seconds per request (falls back to `fetch.timeout`).
    :param transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = Config()
        self.base_url = base_url if base_url is not None else (config.base_url or "")
        self.timeout = timeout if timeout is not None else config.fetch_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=NO_CACHE_HEADERS,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def fetch(self, address: str) -> Optional[str]:
        try:
            response = await self.client.get(address)
            if not response.is_success:
                raise FetchError(address, response.status_code)
            return response.text
        except FetchError as e:
            logger.error("❌ [Fetcher] %s", e)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("❌ [Fetcher] %s", FetchError(address, detail=str(e) or type(e).__name__))
        return None

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
