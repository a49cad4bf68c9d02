"""Wiring of services from settings, shared by the CLI and the web UI."""

from dataclasses import dataclass
from typing import Optional

from httpx import AsyncClient

from ..config.logging_setup import instrument_client
from ..config.settings import Settings
from ..infrastructure.llm.client import LLMClient
from ..infrastructure.llm.parser import LLMResponseParser
from ..infrastructure.provider import create_openai_client
from ..infrastructure.speech.realtime import RealtimeTranscriber
from ..infrastructure.speech.synthesizer import SpeechSynthesizer
from .audio_session import AudioSession, SessionFactory, TranscriptHandler
from .cache import VerificationCache
from .fact_checker import FactCheckerService


@dataclass
class Services:
    """Everything an interface needs to talk to the provider."""

    fact_checker: FactCheckerService
    synthesizer: SpeechSynthesizer
    transcriber: RealtimeTranscriber
    session_factory: SessionFactory


def create_session_factory(settings: Settings, transcriber: RealtimeTranscriber) -> SessionFactory:
    """Build AudioSessions that capture from the default microphone."""

    def _factory(on_transcript: TranscriptHandler) -> AudioSession:
        # sounddevice loads PortAudio on import; only pay for it when recording.
        from ..infrastructure.audio.capture import MicrophoneCapture

        capture = MicrophoneCapture(
            sample_rate=settings.capture_sample_rate,
            frame_size=settings.capture_frame_size,
        )
        return AudioSession(
            capture=capture,
            transcriber=transcriber,
            on_transcript=on_transcript,
            frame_buffer_capacity=settings.frame_buffer_capacity,
        )

    return _factory


def create_services(
    settings: Settings,
    http_client: Optional[AsyncClient] = None,
    cache: Optional[VerificationCache] = None,
) -> Services:
    """Create and configure services with dependency injection.

    Args:
        settings: Application settings.
        http_client: Optional shared httpx client for provider calls.
        cache: Verdict cache to reuse; a new one is created when omitted.

    Returns:
        Wired Services.
    """
    api_key = settings.api_key if settings.has_credential else None
    client = create_openai_client(api_key, http_client=http_client, base_url=settings.base_url)
    instrument_client(client)

    transcriber = RealtimeTranscriber(
        client,
        model=settings.realtime_model,
        transcription_model=settings.transcription_model,
        sample_rate=settings.capture_sample_rate,
        api_key=api_key,
    )
    return Services(
        fact_checker=FactCheckerService(
            llm_client=LLMClient(client, model=settings.llm_model, api_key=api_key),
            response_parser=LLMResponseParser(),
            cache=cache if cache is not None else VerificationCache(settings.result_cache_size),
        ),
        synthesizer=SpeechSynthesizer(
            client, model=settings.tts_model, voice=settings.tts_voice, api_key=api_key
        ),
        transcriber=transcriber,
        session_factory=create_session_factory(settings, transcriber),
    )
