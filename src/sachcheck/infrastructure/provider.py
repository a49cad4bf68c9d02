"""Shared construction and error translation for the generative-AI provider."""

import logging
from typing import Optional

import openai
from httpx import AsyncClient
from openai import AsyncOpenAI

from ..domain.errors import CredentialError, SachCheckError, TransportError

logger = logging.getLogger(__name__)

# Errors worth another attempt; everything else fails fast.
TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)

_CREDENTIAL_ERRORS = (
    openai.AuthenticationError,
    openai.PermissionDeniedError,
    openai.NotFoundError,
)


def create_openai_client(
    api_key: Optional[str],
    http_client: Optional[AsyncClient] = None,
    base_url: Optional[str] = None,
) -> AsyncOpenAI:
    """Create the provider SDK client.

    SDK-level retries are disabled; callers apply their own retry policy so
    that credential failures are never retried.

    Args:
        api_key: Provider API key. May be None; calls then fail with a
            CredentialError before reaching the network.
        http_client: Optional shared httpx client.
        base_url: Optional API base URL override.

    Returns:
        Configured AsyncOpenAI instance.
    """
    return AsyncOpenAI(
        api_key=api_key or "missing-api-key",
        base_url=base_url,
        http_client=http_client,
        max_retries=0,
    )


def translate_error(exc: Exception) -> SachCheckError:
    """Map a provider exception onto the application's error kinds."""
    if isinstance(exc, SachCheckError):
        return exc
    if isinstance(exc, _CREDENTIAL_ERRORS):
        return CredentialError(
            f"The provider rejected the API key or model: {exc}"
        )
    if isinstance(exc, openai.APITimeoutError):
        return TransportError("The request to the provider timed out.")
    if isinstance(exc, openai.APIConnectionError):
        return TransportError("Could not reach the provider. Please check your internet.")
    if isinstance(exc, openai.APIStatusError):
        return TransportError(f"Provider error ({exc.status_code}): {exc.message}")
    logger.debug("Untyped provider failure", exc_info=exc)
    return TransportError(str(exc) or exc.__class__.__name__)
