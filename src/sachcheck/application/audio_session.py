"""Live microphone capture streamed to a realtime transcription session.

An ``AudioSession`` lives from one start command to the matching stop. Its
lifecycle is an explicit state machine::

    IDLE -> OPENING -> STREAMING -> CLOSING -> IDLE
              |            |           ^
              +--> ERROR <-+-----------+

``OPENING`` holds the microphone and waits for the remote side to confirm
the session. ``STREAMING`` moves captured frames out and transcript
fragments in. Any stop, remote close or transport failure goes through
``CLOSING``, which releases every resource even if some releases fail. A
session is single use: once back in ``IDLE`` it cannot be restarted.
"""

import asyncio
import contextlib
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Protocol

import numpy as np

from ..domain.errors import SachCheckError, SessionStateError, TransportError
from ..infrastructure.audio.pcm import encode_frame
from ..infrastructure.speech.realtime import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

TranscriptHandler = Callable[[str], None]


class SessionState(str, Enum):
    IDLE = "idle"
    OPENING = "opening"
    STREAMING = "streaming"
    CLOSING = "closing"
    ERROR = "error"


_TRANSITIONS: Dict[SessionState, FrozenSet[SessionState]] = {
    SessionState.IDLE: frozenset({SessionState.OPENING}),
    SessionState.OPENING: frozenset({SessionState.STREAMING, SessionState.CLOSING, SessionState.ERROR}),
    SessionState.STREAMING: frozenset({SessionState.CLOSING, SessionState.ERROR}),
    SessionState.ERROR: frozenset({SessionState.CLOSING}),
    SessionState.CLOSING: frozenset({SessionState.IDLE}),
}


class Capture(Protocol):
    def open(self) -> None: ...
    def start(self, on_frame: Callable[[np.ndarray], None]) -> None: ...
    def detach(self) -> None: ...
    def close(self) -> None: ...


class TranscriptionStream(Protocol):
    async def send_audio(self, frame: str) -> None: ...
    def events(self) -> Any: ...
    async def close(self) -> None: ...


class Transcriber(Protocol):
    async def connect(self) -> TranscriptionStream: ...


class FrameBuffer:
    """Bounded FIFO of encoded frames waiting to be sent.

    When full, the oldest frame is discarded to make room, so a slow network
    loses old audio instead of stalling capture.
    """

    def __init__(self, capacity: int = 32) -> None:
        self.capacity = max(1, int(capacity))
        self._queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self.dropped = 0
        self._closed = False

    def push(self, frame: str) -> None:
        if self._closed:
            return
        while self._queue.qsize() >= self.capacity:
            self._queue.get_nowait()
            self.dropped += 1
        self._queue.put_nowait(frame)

    async def pop(self) -> Optional[str]:
        """Next frame in capture order, or None once the buffer is closed."""
        if self._closed and self._queue.empty():
            return None
        return await self._queue.get()

    def close(self) -> None:
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    def __len__(self) -> int:
        return self._queue.qsize()


class AudioSession:
    """One recording: microphone capture feeding a streaming transcription."""

    def __init__(
        self,
        capture: Capture,
        transcriber: Transcriber,
        on_transcript: Optional[TranscriptHandler] = None,
        frame_buffer_capacity: int = 32,
        open_timeout: float = 10.0,
    ) -> None:
        self._capture = capture
        self._transcriber = transcriber
        self._on_transcript = on_transcript
        self._frame_buffer_capacity = frame_buffer_capacity
        self._open_timeout = open_timeout

        self._state = SessionState.IDLE
        self._used = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stream: Optional[TranscriptionStream] = None
        self._frames: Optional[FrameBuffer] = None
        self._sender: Optional["asyncio.Task[None]"] = None
        self._receiver: Optional["asyncio.Task[None]"] = None
        self._settled: Optional[asyncio.Event] = None
        self._closed: Optional[asyncio.Event] = None
        self._fragments: List[str] = []
        self._transcript = ""
        self.frames_sent = 0
        self.last_error: Optional[SachCheckError] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not SessionState.IDLE

    @property
    def transcript(self) -> str:
        return self._transcript

    @property
    def fragments(self) -> List[str]:
        return list(self._fragments)

    @property
    def frames_dropped(self) -> int:
        return self._frames.dropped if self._frames is not None else 0

    def _transition(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise SessionStateError(f"Illegal audio session transition {self._state.value} -> {target.value}")
        logger.debug("Audio session %s -> %s", self._state.value, target.value)
        self._state = target

    async def start(self) -> None:
        """Open the microphone and the streaming session.

        Returns once frames are streaming.

        Raises:
            SessionStateError: The session was already started.
            DeviceUnavailableError: The microphone could not be acquired.
            CredentialError: The streaming session was refused.
            TransportError: The streaming session could not be established.
        """
        if self._used:
            raise SessionStateError("Audio sessions are single use; create a new one.")
        self._transition(SessionState.OPENING)
        self._used = True
        self._loop = asyncio.get_running_loop()
        self._settled = asyncio.Event()
        self._closed = asyncio.Event()

        try:
            self._capture.open()
            self._stream = await self._transcriber.connect()
            self._receiver = asyncio.create_task(self._receive())
            await asyncio.wait_for(self._settled.wait(), self._open_timeout)
        except asyncio.TimeoutError:
            error = TransportError("The streaming session was not confirmed in time.")
            await self._teardown(error)
            raise error from None
        except SachCheckError as e:
            await self._teardown(e)
            raise
        except Exception as e:
            await self._teardown(TransportError(f"Could not start the audio session: {e}"))
            raise
        except BaseException:
            # cancelled while opening
            await self._teardown()
            raise

        if self._state is not SessionState.STREAMING and self.last_error is not None:
            raise self.last_error

    async def stop(self) -> None:
        """Stop recording and release everything.

        Raises:
            SessionStateError: The session is idle.
        """
        if self._state is SessionState.IDLE:
            raise SessionStateError("Cannot stop an idle audio session.")
        if self._state is SessionState.CLOSING:
            assert self._closed is not None
            await self._closed.wait()
            return
        await self._teardown()

    async def wait_closed(self) -> None:
        """Wait until a started session is back in IDLE."""
        if self._closed is None:
            return
        await self._closed.wait()

    def _begin_streaming(self) -> None:
        self._transition(SessionState.STREAMING)
        self._frames = FrameBuffer(self._frame_buffer_capacity)
        self._sender = asyncio.create_task(self._send_frames())
        self._capture.start(self._on_device_frame)
        assert self._settled is not None
        self._settled.set()

    def _on_device_frame(self, samples: np.ndarray) -> None:
        """Runs on the audio driver's thread."""
        loop = self._loop
        if loop is None or self._state is not SessionState.STREAMING:
            return
        frame = encode_frame(samples)
        try:
            loop.call_soon_threadsafe(self._enqueue_frame, frame)
        except RuntimeError:
            # Loop already closed; the session is being torn down.
            return

    def _enqueue_frame(self, frame: str) -> None:
        if self._state is SessionState.STREAMING and self._frames is not None:
            self._frames.push(frame)

    def _append_fragment(self, text: str) -> None:
        self._fragments.append(text)
        self._transcript = f"{self._transcript} {text}".strip()
        if self._on_transcript is not None:
            self._on_transcript(self._transcript)

    async def _send_frames(self) -> None:
        assert self._frames is not None and self._stream is not None
        while True:
            frame = await self._frames.pop()
            if frame is None:
                return
            try:
                await self._stream.send_audio(frame)
            except Exception as e:
                logger.warning("Audio frame send failed; closing session: %s", e)
                await self._teardown(TransportError(f"Audio upload failed: {e}"))
                return
            self.frames_sent += 1

    async def _receive(self) -> None:
        assert self._stream is not None
        error: Optional[SachCheckError] = None
        try:
            async for event in self._stream.events():
                if not self._handle_event(event):
                    error = TransportError(event.text or "Streaming session error.")
                    break
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Streaming session failed: %s", e)
            error = TransportError(f"Streaming session failed: {e}")
        await self._teardown(error)

    def _handle_event(self, event: StreamEvent) -> bool:
        """Apply one event; False means the session must end with an error."""
        if event.type is StreamEventType.OPENED:
            if self._state is SessionState.OPENING:
                self._begin_streaming()
        elif event.type is StreamEventType.TRANSCRIPT:
            if self._state is SessionState.STREAMING:
                self._append_fragment(event.text)
        elif event.type is StreamEventType.ERROR:
            logger.error("Live session error: %s", event.text)
            return False
        return True

    async def _teardown(self, error: Optional[SachCheckError] = None) -> None:
        if self._state in (SessionState.CLOSING, SessionState.IDLE):
            return
        if error is not None:
            self.last_error = error
            self._transition(SessionState.ERROR)
        self._transition(SessionState.CLOSING)

        current = asyncio.current_task()
        await self._release("frame hook", self._capture.detach)
        await self._release("microphone", self._capture.close)
        await self._release("processing context", lambda: self._stop_processing(current))
        await self._release("streaming session", lambda: self._close_stream(current))

        logger.info(
            "Audio session closed: %d frames sent, %d dropped", self.frames_sent, self.frames_dropped
        )
        self._transition(SessionState.IDLE)
        if self._settled is not None:
            self._settled.set()
        if self._closed is not None:
            self._closed.set()

    async def _release(self, name: str, action: Callable[[], Any]) -> None:
        try:
            outcome = action()
            if asyncio.iscoroutine(outcome):
                await outcome
        except Exception:
            logger.warning("Failed to release %s during audio session teardown", name, exc_info=True)

    async def _stop_processing(self, current: Optional["asyncio.Task[Any]"]) -> None:
        if self._frames is not None:
            self._frames.close()
        await _cancel(self._sender, current)

    async def _close_stream(self, current: Optional["asyncio.Task[Any]"]) -> None:
        try:
            if self._stream is not None:
                await self._stream.close()
        finally:
            await _cancel(self._receiver, current)


async def _cancel(task: Optional["asyncio.Task[Any]"], current: Optional["asyncio.Task[Any]"]) -> None:
    if task is None or task is current or task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


SessionFactory = Callable[[TranscriptHandler], AudioSession]


class VoiceInputController:
    """Owns at most one active AudioSession for a UI.

    Starting while a session is active does nothing; each start after that
    builds a fresh session.
    """

    def __init__(self, session_factory: SessionFactory, on_transcript: Optional[TranscriptHandler] = None) -> None:
        self._session_factory = session_factory
        self._on_transcript = on_transcript
        self._session: Optional[AudioSession] = None
        self.sessions_started = 0
        self.transcript = ""

    @property
    def session(self) -> Optional[AudioSession]:
        return self._session

    @property
    def is_recording(self) -> bool:
        return self._session is not None and self._session.is_active

    def _handle_transcript(self, text: str) -> None:
        self.transcript = text
        if self._on_transcript is not None:
            self._on_transcript(text)

    async def start(self) -> Optional[AudioSession]:
        """Start recording.

        Returns:
            The new session, or None when one is already active.
        """
        if self.is_recording:
            logger.debug("Recording already active; ignoring start")
            return None
        self.transcript = ""
        session = self._session_factory(self._handle_transcript)
        self._session = session
        self.sessions_started += 1
        await session.start()
        return session

    async def stop(self) -> str:
        """Stop recording if active and return the transcript gathered."""
        session = self._session
        if session is not None and session.is_active:
            await session.stop()
        return self.transcript

    async def toggle(self) -> Optional[AudioSession]:
        if self.is_recording:
            await self.stop()
            return None
        return await self.start()


async def record_until(
    controller: VoiceInputController, wait_for_stop: Callable[[], Awaitable[Any]]
) -> str:
    """Record until ``wait_for_stop`` completes or the session ends on its own.

    Returns:
        The transcript gathered during the recording.
    """
    session = await controller.start()
    if session is None:
        return controller.transcript
    stopper = asyncio.ensure_future(wait_for_stop())
    closed = asyncio.ensure_future(session.wait_closed())
    try:
        await asyncio.wait({stopper, closed}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for pending in (stopper, closed):
            pending.cancel()
    return await controller.stop()
