"""Logging and tracing setup."""

import logging
from typing import Any, Optional

import logfire

_configured = False


def init_logging(level: str = "INFO") -> None:
    """Initialize standard logging and logfire (no-op if token not present)."""
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logfire.configure(send_to_logfire="if-token-present", console=False)
    _configured = True


def instrument_client(client: Optional[Any]) -> None:
    """Attach logfire tracing to an OpenAI client."""
    if client is None:
        return
    try:
        logfire.instrument_openai(client)
    except Exception:
        # Instrumentation is best-effort; do not fail initialization if it errors.
        logging.getLogger(__name__).debug("logfire instrumentation unavailable", exc_info=True)
