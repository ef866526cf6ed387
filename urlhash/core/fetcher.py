"""
HTTP fetcher enforcing the status-code and body-size policy.
"""

import asyncio
import logging
from typing import Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout, ClientError

from .errors import HTTPStatusError, ResponseTooLargeError, TransportError

MAX_BODY_SIZE = 10 * 1024
DEFAULT_USER_AGENT = "urlhash/1.0"


class Fetcher:
    """
    Fetches raw response bodies.

    One session is shared by every fetch issued while the fetcher is open;
    each call otherwise owns its request from start to finish.
    """

    def __init__(self, request_timeout: float = 30, max_body_size: int = MAX_BODY_SIZE,
                 user_agent: str = DEFAULT_USER_AGENT, connection_limit: int = 10):
        self.request_timeout = request_timeout
        self.max_body_size = max_body_size
        self.user_agent = user_agent
        self.connection_limit = connection_limit

        self.logger = logging.getLogger(__name__)
        self.session: Optional[ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Open the HTTP session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.request_timeout),
                headers={'User-Agent': self.user_agent},
                connector=aiohttp.TCPConnector(limit=self.connection_limit),
            )
            self.logger.debug("Fetcher session started")

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("Fetcher session closed")

    async def fetch(self, url: str) -> bytes:
        """
        Fetch a single URL.

        Args:
            url: Absolute http(s) URL

        Returns:
            The raw response body

        Raises:
            HTTPStatusError: status outside 200-299
            ResponseTooLargeError: declared Content-Length above max_body_size
            TransportError: connection, timeout or read failure
        """
        if self.session is None:
            raise RuntimeError("Fetcher is not started")

        try:
            async with self.session.get(url) as response:
                if not 200 <= response.status <= 299:
                    raise HTTPStatusError(response.status)

                # Content-Length is not always sent; without it the body is read in full
                declared = response.content_length
                if declared is not None and declared > self.max_body_size:
                    raise ResponseTooLargeError(self.max_body_size, declared)

                body = await response.read()
                self.logger.debug(f"Fetched {url}: {response.status} ({len(body)} bytes)")
                return body

        except asyncio.TimeoutError:
            self.logger.warning(f"Timeout fetching {url}")
            raise TransportError("Request timeout")

        except ClientError as e:
            self.logger.info(f"Client error fetching {url}: {e}")
            raise TransportError(str(e) or e.__class__.__name__) from e

        except ValueError as e:
            # yarl rejects some malformed URLs before any connection is made
            self.logger.info(f"Invalid URL {url}: {e}")
            raise TransportError(str(e)) from e
