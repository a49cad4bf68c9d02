"""A long-lived event loop for the Streamlit script thread to call into."""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Coroutine, Optional, TypeVar

from ...domain.errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundLoop:
    """Runs one asyncio loop on a daemon thread.

    Streamlit reruns the script on every interaction, but recordings,
    provider clients and their connection pools must outlive a rerun, so all
    async work is submitted here instead of to a fresh ``asyncio.run``.
    """

    def __init__(self) -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="sachcheck-loop", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def run(self, coro: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
        """Run ``coro`` on the loop and block until it finishes.

        Raises:
            TransportError: ``timeout`` elapsed first; ``coro`` is cancelled.
        """
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result(timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            logger.warning("Background task timed out after %.0fs", timeout)
            raise TransportError("The request to the provider timed out.") from None

    def stop(self) -> None:
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
