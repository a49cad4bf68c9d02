"""Application layer - use cases and session state."""

from .audio_session import AudioSession, FrameBuffer, SessionState, VoiceInputController
from .cache import VerificationCache
from .chat import ChatController, ErrorSurface, UIError
from .fact_checker import FactCheckerService

__all__ = [
    "AudioSession",
    "ChatController",
    "ErrorSurface",
    "FactCheckerService",
    "FrameBuffer",
    "SessionState",
    "UIError",
    "VerificationCache",
    "VoiceInputController",
]
