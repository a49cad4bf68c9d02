"""HTTP client infrastructure."""

from .client import HTTPClientFactory, get_async_client

__all__ = ["get_async_client", "HTTPClientFactory"]
