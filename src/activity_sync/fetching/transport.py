"""Transport boundary for the fetch engine.

A transport is any async callable turning an ``httpx.Request`` into an
``httpx.Response``. Tests inject canned transports; production uses
``HttpxTransport``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx

from activity_sync.logging import get_logger

from .exceptions import TransportError

logger = get_logger(__name__)

Transport = Callable[[httpx.Request], Awaitable[httpx.Response]]


class HttpxTransport:
    """Transport backed by a shared ``httpx.AsyncClient``.

    Usage:
        async with HttpxTransport() as transport:
            result = await fetch_with_retry(request, transport=transport)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Optional pre-configured client (caller keeps ownership)
            timeout: Request timeout in seconds when creating our own client
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        try:
            response = await self._client.send(request)
            await response.aread()
        except httpx.TransportError as e:
            raise TransportError(f"{type(e).__name__}: {e}", request=request) from e
        logger.debug("{} {} -> {}", request.method, request.url, response.status_code)
        return response

    async def close(self) -> None:
        """Close the underlying client if we created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()
