# src/idx_wrapper/services/page_fetch_service.py
import asyncio
import logging
import time
from typing import Dict, Optional

import aiohttp

from idx_wrapper.model import FetchResult

logger = logging.getLogger(__name__)


class PageFetchService:
    """
    Fetches the client page that is turned into a wrapper.
    Manages the aiohttp session and maps transport errors onto a FetchResult
    instead of raising.
    """

    def __init__(self, config: Dict, user_agent: Optional[str] = None):
        self.config = config

        session_config = config.get('session', {})
        self.timeout = float(session_config.get('time_out', 30))
        self.max_redirects = int(session_config.get('max_redirects', 10))
        self.user_agent = user_agent or session_config.get('user_agent', 'IDXWrapperCreator/1.0')

        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
            default_headers = {
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.user_agent
            }
            self.session = aiohttp.ClientSession(
                timeout=timeout_obj, headers=default_headers
            )
            logger.debug("PageFetchService: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("PageFetchService: Session closed.")

    async def fetch(self, url: str) -> FetchResult:
        """
        GETs `url`, following redirects, and returns status and body.

        Transport failures come back as status -1 (client/timeout errors) or
        -2 (anything else) with `error` set; they never raise.
        """
        start_time = time.perf_counter()

        if not self.session or self.session.closed:
            await self.initialize()

        try:
            async with self.session.get(
                    url,
                    allow_redirects=True,
                    max_redirects=self.max_redirects
            ) as response:
                body = await self._read_content(response)
                return FetchResult(
                    url=url,
                    status_code=response.status,
                    body=body,
                    final_url=str(response.url),
                    elapsed_time=round(time.perf_counter() - start_time, 4)
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Transport error while fetching %s: %r", url, e)
            status, error = -1, str(e) or type(e).__name__
        except Exception as e:
            logger.error("Internal fetch error for %s: %s", url, e, exc_info=True)
            status, error = -2, str(e) or type(e).__name__

        return FetchResult(
            url=url,
            status_code=status,
            error=error,
            elapsed_time=round(time.perf_counter() - start_time, 4)
        )

    async def _read_content(self, response) -> Optional[str]:
        """Helper to read response body text safely."""
        try:
            return await response.text()
        except UnicodeDecodeError:
            # Fallback decoding
            content_bytes = await response.read()
            return content_bytes.decode('utf-8', errors='replace')
