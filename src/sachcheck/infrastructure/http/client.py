"""HTTP client factory shared by the provider SDK clients."""

from typing import Optional

from httpx import AsyncClient, Limits, Timeout

DEFAULT_TIMEOUT_SECONDS = 60.0


class HTTPClientFactory:
    """Factory for creating HTTP clients with consistent configuration."""

    @staticmethod
    def create(timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> AsyncClient:
        """Create a new AsyncClient with sensible defaults.

        Args:
            timeout_seconds: Request timeout in seconds. Connecting gets at
                most 10 seconds of it.

        Returns:
            Configured AsyncClient instance.
        """
        timeout = Timeout(timeout_seconds, connect=min(10.0, timeout_seconds))
        limits = Limits(max_keepalive_connections=5, max_connections=20)
        return AsyncClient(timeout=timeout, limits=limits)


def get_async_client(timeout_seconds: Optional[float] = None) -> AsyncClient:
    """Create an AsyncClient for one event loop.

    A client is bound to the loop it first runs on. The CLI runs one loop per
    invocation and the web UI one background loop per server process, so each
    gets its own client.

    Args:
        timeout_seconds: Optional timeout override.

    Returns:
        New AsyncClient instance. Call ``aclose()`` when the loop finishes.
    """
    timeout = timeout_seconds if timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS
    return HTTPClientFactory.create(timeout)
