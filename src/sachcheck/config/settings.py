"""Application settings and configuration management."""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from ..domain.models import Language


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    @property
    def api_key(self) -> Optional[str]:
        """Generative-AI provider API key."""
        return os.getenv("SACHCHECK_API_KEY") or os.getenv("OPENAI_API_KEY")

    @property
    def has_credential(self) -> bool:
        """Whether a usable-looking API key is configured."""
        key = self.api_key
        return bool(key) and len(key) > 5

    @property
    def base_url(self) -> Optional[str]:
        """Optional override for the provider's API base URL."""
        return os.getenv("SACHCHECK_BASE_URL") or None

    @property
    def llm_model(self) -> str:
        """Model used for claim verification."""
        return os.getenv("LLM_MODEL", "gpt-4.1-mini")

    @property
    def tts_model(self) -> str:
        """Text-to-speech model identifier."""
        return os.getenv("TTS_MODEL", "gpt-4o-mini-tts")

    @property
    def tts_voice(self) -> str:
        """Prebuilt voice used to read verdicts aloud."""
        return os.getenv("TTS_VOICE", "coral")

    @property
    def realtime_model(self) -> str:
        """Model behind the live audio streaming session."""
        return os.getenv("REALTIME_MODEL", "gpt-realtime")

    @property
    def transcription_model(self) -> str:
        """Model transcribing the streamed microphone audio."""
        return os.getenv("TRANSCRIPTION_MODEL", "gpt-4o-mini-transcribe")

    @property
    def http_timeout_seconds(self) -> float:
        """HTTP client timeout in seconds."""
        return float(os.getenv("HTTP_TIMEOUT_SECONDS", "60.0"))

    @property
    def capture_sample_rate(self) -> int:
        """Microphone capture and upload sample rate in Hz."""
        return int(os.getenv("CAPTURE_SAMPLE_RATE", "24000"))

    @property
    def capture_frame_size(self) -> int:
        """Samples per captured audio frame."""
        return int(os.getenv("CAPTURE_FRAME_SIZE", "4096"))

    @property
    def frame_buffer_capacity(self) -> int:
        """Frames held for upload before the oldest are dropped."""
        return int(os.getenv("FRAME_BUFFER_CAPACITY", "32"))

    @property
    def result_cache_size(self) -> int:
        """Maximum cached verdicts; 0 keeps every verdict for the process lifetime."""
        return int(os.getenv("RESULT_CACHE_SIZE", "0"))

    @property
    def default_language(self) -> Language:
        """Language selected when the app starts."""
        raw = os.getenv("DEFAULT_LANGUAGE", Language.HINDI.value)
        try:
            return Language(raw.strip().title())
        except ValueError:
            return Language.HINDI

    @property
    def log_level(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()
