"""Tests for speech synthesis and the realtime transcription adapter."""

from types import SimpleNamespace
from typing import Any, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from sachcheck.domain.errors import CredentialError, TransportError
from sachcheck.infrastructure.speech.realtime import (
    TRANSCRIPT_EVENT,
    RealtimeTranscriber,
    RealtimeTranscriptionStream,
    StreamEvent,
    StreamEventType,
)
from sachcheck.infrastructure.speech.synthesizer import SpeechSynthesizer


class FakeConnection:
    """Async-iterable realtime connection replaying canned events."""

    def __init__(self, events: List[Any]) -> None:
        self._events = events
        self.session = SimpleNamespace(update=AsyncMock())
        self.input_audio_buffer = SimpleNamespace(append=AsyncMock())
        self.close = AsyncMock()

    def __aiter__(self) -> "FakeConnection":
        self._iter = iter(self._events)
        return self

    async def __anext__(self) -> Any:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


@pytest.fixture
def speech_client() -> MagicMock:
    client = MagicMock()
    client.audio.speech.create = AsyncMock(return_value=SimpleNamespace(content=b"\x01\x00\x02\x00"))
    return client


async def test_synthesize_strips_markup(speech_client: MagicMock) -> None:
    synth = SpeechSynthesizer(speech_client, model="tts", voice="coral", api_key="test-key")

    pcm = await synth.synthesize("• **Modi** said it")

    assert pcm == b"\x01\x00\x02\x00"
    kwargs = speech_client.audio.speech.create.call_args.kwargs
    assert kwargs["input"] == "Read: Modi said it"
    assert kwargs["response_format"] == "pcm"
    assert kwargs["voice"] == "coral"


async def test_synthesize_without_key(speech_client: MagicMock) -> None:
    synth = SpeechSynthesizer(speech_client, model="tts", voice="coral")
    with pytest.raises(CredentialError):
        await synth.synthesize("hello")


async def test_synthesize_blank_text_skips_call(speech_client: MagicMock) -> None:
    synth = SpeechSynthesizer(speech_client, model="tts", voice="coral", api_key="test-key")
    assert await synth.synthesize("** •") == b""
    speech_client.audio.speech.create.assert_not_called()


async def test_stream_maps_provider_events() -> None:
    connection = FakeConnection(
        [
            SimpleNamespace(type="session.created"),
            SimpleNamespace(type="input_audio_buffer.speech_started"),
            SimpleNamespace(type=TRANSCRIPT_EVENT, transcript="hello"),
            SimpleNamespace(type=TRANSCRIPT_EVENT, transcript="  "),
            SimpleNamespace(type="error", error=SimpleNamespace(message="quota exceeded")),
        ]
    )
    stream = RealtimeTranscriptionStream(connection)

    events = [event async for event in stream.events()]

    assert events == [
        StreamEvent(StreamEventType.OPENED),
        StreamEvent(StreamEventType.TRANSCRIPT, "hello"),
        StreamEvent(StreamEventType.ERROR, "quota exceeded"),
    ]


async def test_stream_sends_frames_and_closes() -> None:
    connection = FakeConnection([])
    stream = RealtimeTranscriptionStream(connection)

    await stream.send_audio("AAAA")
    await stream.close()

    connection.input_audio_buffer.append.assert_awaited_once_with(audio="AAAA")
    connection.close.assert_awaited_once()


async def test_connect_configures_transcription_session() -> None:
    connection = FakeConnection([])
    client = MagicMock()
    client.realtime.connect.return_value.enter = AsyncMock(return_value=connection)
    transcriber = RealtimeTranscriber(
        client, model="rt", transcription_model="stt", sample_rate=24000, api_key="test-key"
    )

    stream = await transcriber.connect()

    assert isinstance(stream, RealtimeTranscriptionStream)
    client.realtime.connect.assert_called_once_with(model="rt")
    session = connection.session.update.call_args.kwargs["session"]
    audio_input = session["audio"]["input"]
    assert audio_input["format"] == {"type": "audio/pcm", "rate": 24000}
    assert audio_input["transcription"] == {"model": "stt"}
    assert audio_input["turn_detection"]["create_response"] is False


async def test_connect_failure_is_transport_error() -> None:
    client = MagicMock()
    client.realtime.connect.return_value.enter = AsyncMock(side_effect=OSError("handshake failed"))
    transcriber = RealtimeTranscriber(client, model="rt", transcription_model="stt", api_key="test-key")

    with pytest.raises(TransportError):
        await transcriber.connect()


async def test_failed_session_setup_closes_connection() -> None:
    connection = FakeConnection([])
    connection.session.update.side_effect = OSError("socket reset")
    client = MagicMock()
    client.realtime.connect.return_value.enter = AsyncMock(return_value=connection)
    transcriber = RealtimeTranscriber(client, model="rt", transcription_model="stt", api_key="test-key")

    with pytest.raises(TransportError):
        await transcriber.connect()

    connection.close.assert_awaited_once()


async def test_connect_without_key() -> None:
    transcriber = RealtimeTranscriber(MagicMock(), model="rt", transcription_model="stt")
    with pytest.raises(CredentialError):
        await transcriber.connect()
