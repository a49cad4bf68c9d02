"""Test doubles for the microphone, the streaming session and the model."""

import asyncio
import json
from typing import Any, AsyncIterator, Callable, List, Optional

import numpy as np

from sachcheck.domain.errors import DeviceUnavailableError
from sachcheck.infrastructure.speech.realtime import StreamEvent, StreamEventType


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the loop until ``predicate`` holds."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


class FakeCapture:
    """Stands in for the microphone; frames are pushed by the test."""

    def __init__(self, fail_open: bool = False, fail_detach: bool = False) -> None:
        self.fail_open = fail_open
        self.fail_detach = fail_detach
        self.opened = False
        self.closed = False
        self.detached = False
        self._on_frame: Optional[Callable[[np.ndarray], None]] = None

    def open(self) -> None:
        if self.fail_open:
            raise DeviceUnavailableError("Microphone access is required for voice search.")
        self.opened = True

    def start(self, on_frame: Callable[[np.ndarray], None]) -> None:
        self._on_frame = on_frame

    def detach(self) -> None:
        self._on_frame = None
        self.detached = True
        if self.fail_detach:
            raise RuntimeError("driver refused to stop")

    def close(self) -> None:
        self.closed = True

    def emit(self, samples: Any) -> None:
        if self._on_frame is not None:
            self._on_frame(np.asarray(samples, dtype=np.float32))


class FakeStream:
    """A transcription stream whose events are fed by the test."""

    def __init__(self, opened: bool = True, fail_send: bool = False, fail_close: bool = False) -> None:
        self.fail_send = fail_send
        self.fail_close = fail_close
        self.sent: List[str] = []
        self.closed = False
        self._pending: List[Optional[StreamEvent]] = []
        self._queue: Optional["asyncio.Queue[Optional[StreamEvent]]"] = None
        if opened:
            self.emit(StreamEvent(StreamEventType.OPENED))

    def emit(self, event: Optional[StreamEvent]) -> None:
        if self._queue is None:
            self._pending.append(event)
        else:
            self._queue.put_nowait(event)

    def transcript(self, text: str) -> None:
        self.emit(StreamEvent(StreamEventType.TRANSCRIPT, text))

    async def send_audio(self, frame: str) -> None:
        if self.fail_send:
            raise ConnectionError("socket closed")
        self.sent.append(frame)

    async def events(self) -> AsyncIterator[StreamEvent]:
        self._queue = asyncio.Queue()
        for event in self._pending:
            self._queue.put_nowait(event)
        self._pending.clear()
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event

    async def close(self) -> None:
        self.closed = True
        self.emit(None)
        if self.fail_close:
            raise ConnectionError("close handshake failed")


class FakeTranscriber:
    """Hands out FakeStreams and remembers them."""

    def __init__(self, **stream_options: Any) -> None:
        self.stream_options = stream_options
        self.streams: List[FakeStream] = []
        self.error: Optional[Exception] = None

    async def connect(self) -> FakeStream:
        if self.error is not None:
            raise self.error
        stream = FakeStream(**self.stream_options)
        self.streams.append(stream)
        return stream

    @property
    def stream(self) -> FakeStream:
        return self.streams[-1]


def verification_json(verdict: str = "False", explanation: str = "Claim is **false**.", sources: Any = None) -> str:
    return json.dumps(
        {
            "verdict": verdict,
            "explanation": explanation,
            "sources": sources if sources is not None else [{"title": "Ref", "uri": "https://ref.example/a"}],
        }
    )

