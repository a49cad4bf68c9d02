"""Text-to-speech for reading verdicts aloud."""

import logging
from typing import Optional

from openai import AsyncOpenAI

from ...domain.errors import CredentialError
from ...utils.sanitization import strip_speech_markup
from ..provider import translate_error

logger = logging.getLogger(__name__)


class SpeechSynthesizer:
    """Turns explanation text into 24 kHz mono 16-bit PCM."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        voice: str,
        api_key: Optional[str] = None,
    ) -> None:
        self._client = client
        self.model = model
        self.voice = voice
        self.api_key = api_key

    async def synthesize(self, text: str) -> bytes:
        """Synthesize speech for ``text``.

        Bold and bullet markers are removed before sending.

        Returns:
            Raw PCM bytes; empty when the provider returns no audio.

        Raises:
            CredentialError: No key is configured or the provider rejected it.
            TransportError: The provider could not be reached or failed.
        """
        if not self.api_key:
            raise CredentialError("No API key configured. Please connect your key.")
        clean = strip_speech_markup(text)
        if not clean:
            return b""
        try:
            response = await self._client.audio.speech.create(
                model=self.model,
                voice=self.voice,
                input=f"Read: {clean}",
                response_format="pcm",
            )
        except Exception as e:
            logger.warning("Speech synthesis failed: %s", e)
            raise translate_error(e) from e
        return response.content or b""
