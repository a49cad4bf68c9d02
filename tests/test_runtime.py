"""Tests for the background event loop used by the web UI."""

import asyncio

import pytest

from sachcheck.domain.errors import ErrorKind, TransportError
from sachcheck.interfaces.streamlit.runtime import BackgroundLoop


def test_runs_coroutines_on_one_loop() -> None:
    background = BackgroundLoop()

    async def current_loop() -> asyncio.AbstractEventLoop:
        return asyncio.get_running_loop()

    try:
        assert background.run(current_loop()) is background.run(current_loop())
    finally:
        background.stop()


def test_exceptions_propagate_to_caller() -> None:
    background = BackgroundLoop()

    async def boom() -> None:
        raise ValueError("boom")

    try:
        with pytest.raises(ValueError):
            background.run(boom(), timeout=1.0)
    finally:
        background.stop()


def test_timeout_cancels_and_reports_transport_error() -> None:
    background = BackgroundLoop()
    cancelled = []

    async def slow() -> None:
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    async def ping() -> str:
        return "pong"

    try:
        with pytest.raises(TransportError) as excinfo:
            background.run(slow(), timeout=0.05)
        assert excinfo.value.kind is ErrorKind.TRANSPORT
        assert background.run(ping(), timeout=1.0) == "pong"
        assert cancelled == [True]
    finally:
        background.stop()
