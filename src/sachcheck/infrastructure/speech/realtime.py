"""Realtime streaming transcription over the provider's websocket API."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Optional

from openai import AsyncOpenAI

from ...domain.errors import CredentialError
from ..provider import translate_error

logger = logging.getLogger(__name__)

TRANSCRIPT_EVENT = "conversation.item.input_audio_transcription.completed"


class StreamEventType(str, Enum):
    OPENED = "opened"
    TRANSCRIPT = "transcript"
    ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    """A provider event reduced to what an audio session acts on."""

    type: StreamEventType
    text: str = ""


class RealtimeTranscriptionStream:
    """An open streaming session: PCM frames go out, transcript fragments come back."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    async def send_audio(self, frame: str) -> None:
        """Send one base64-encoded 16-bit PCM frame."""
        await self._connection.input_audio_buffer.append(audio=frame)

    async def events(self) -> AsyncIterator[StreamEvent]:
        """Yield session events until the remote side closes the connection."""
        async for event in self._connection:
            event_type = getattr(event, "type", "")
            if event_type == "session.created":
                yield StreamEvent(StreamEventType.OPENED)
            elif event_type == TRANSCRIPT_EVENT:
                text = getattr(event, "transcript", "") or ""
                if text.strip():
                    yield StreamEvent(StreamEventType.TRANSCRIPT, text)
            elif event_type == "error":
                error = getattr(event, "error", None)
                yield StreamEvent(StreamEventType.ERROR, getattr(error, "message", "") or str(error))
            else:
                logger.debug("Ignoring realtime event %s", event_type)

    async def close(self) -> None:
        await self._connection.close()


class RealtimeTranscriber:
    """Opens realtime sessions configured for input-audio transcription only."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        transcription_model: str,
        sample_rate: int = 24000,
        api_key: Optional[str] = None,
    ) -> None:
        self._client = client
        self.model = model
        self.transcription_model = transcription_model
        self.sample_rate = sample_rate
        self.api_key = api_key

    def _session_config(self) -> dict:
        return {
            "type": "realtime",
            "output_modalities": ["text"],
            "audio": {
                "input": {
                    "format": {"type": "audio/pcm", "rate": self.sample_rate},
                    "transcription": {"model": self.transcription_model},
                    "turn_detection": {"type": "server_vad", "create_response": False},
                }
            },
        }

    async def connect(self) -> RealtimeTranscriptionStream:
        """Open a streaming session.

        Returns:
            The open stream. Establishment is confirmed by its first OPENED event.

        Raises:
            CredentialError: No key is configured or the provider rejected it.
            TransportError: The websocket could not be opened.
        """
        if not self.api_key:
            raise CredentialError("No API key configured. Please connect your key.")
        try:
            connection = await self._client.realtime.connect(model=self.model).enter()
        except Exception as e:
            logger.warning("Could not open realtime session: %s", e)
            raise translate_error(e) from e
        try:
            await connection.session.update(session=self._session_config())
        except Exception as e:
            logger.warning("Could not configure realtime session: %s", e)
            try:
                await connection.close()
            except Exception:
                logger.warning("Failed to close realtime session", exc_info=True)
            raise translate_error(e) from e
        return RealtimeTranscriptionStream(connection)
