"""
HTTP transport.

Thin async wrapper around aiohttp exposing the one capability the upload
protocol needs: POST a request and get back status, headers and body.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Union
import asyncio
import time
import aiohttp

from .config import ClientConfig
from ..logging import get_logger

Body = Union[bytes, bytearray, memoryview]

# Errors a transport may raise instead of returning a response
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


@dataclass(frozen=True)
class HttpResponse:
    """
    Response of a single HTTP call.

    Attributes:
        status: HTTP status code
        body: Raw response body
        headers: Response headers
    """
    status: int
    body: bytes = b''
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True for any status in the 2xx range."""
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (invalid bytes are replaced)."""
        return self.body.decode('utf-8', errors='replace')


class HttpTransport(Protocol):
    """Protocol for the request-sending capability used by the client."""

    async def post(
        self,
        url: str,
        headers: Dict[str, str],
        data: Optional[Body] = None
    ) -> HttpResponse:
        """
        Send a POST request.

        Args:
            url: Absolute request URL
            headers: Request headers
            data: Optional request body

        Returns:
            The response; non-2xx statuses are returned, not raised
        """
        ...

    async def get(self, url: str, headers: Dict[str, str]) -> HttpResponse:
        """Send a GET request."""
        ...


class AiohttpTransport:
    """
    aiohttp-backed transport.

    The session is created lazily from the client configuration and is
    reused for every request until :meth:`close` is called.

    Example:
        >>> async with AiohttpTransport(ClientConfig()) as transport:
        ...     response = await transport.post(url, headers={})
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            config: Client configuration (uses defaults if not provided)
            session: Optional externally owned session
        """
        self._config = config or ClientConfig.default()
        self._session = session
        self._owns_session = False
        self._logger = get_logger('spupload.http')

    async def __aenter__(self) -> 'AiohttpTransport':
        await self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._owns_session = False

    async def post(
        self,
        url: str,
        headers: Dict[str, str],
        data: Optional[Body] = None
    ) -> HttpResponse:
        """Send a POST request and read the whole response body."""
        return await self._request('POST', url, headers, data)

    async def get(self, url: str, headers: Dict[str, str]) -> HttpResponse:
        """Send a GET request and read the whole response body."""
        return await self._request('GET', url, headers, None)

    async def _request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[Body]
    ) -> HttpResponse:
        session = await self._get_session()
        size = len(data) if data is not None else 0

        start = time.time()
        self._logger.debug(f"{method} {url} ({size} bytes)")
        async with session.request(
            method,
            url,
            data=data,
            headers=headers,
            **self._config.get_request_kwargs()
        ) as response:
            body = await response.read()
            elapsed = time.time() - start
            self._logger.debug(f"{method} {url} -> HTTP {response.status} in {elapsed:.2f}s")
            return HttpResponse(
                status=response.status,
                body=body,
                headers=dict(response.headers)
            )
