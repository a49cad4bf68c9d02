"""Speech synthesis and streaming transcription."""

from .realtime import RealtimeTranscriber, RealtimeTranscriptionStream, StreamEvent, StreamEventType
from .synthesizer import SpeechSynthesizer

__all__ = [
    "RealtimeTranscriber",
    "RealtimeTranscriptionStream",
    "SpeechSynthesizer",
    "StreamEvent",
    "StreamEventType",
]
