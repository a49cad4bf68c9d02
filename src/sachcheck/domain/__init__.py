"""Domain layer - Core business entities and models."""

from .errors import (
    CredentialError,
    DeviceUnavailableError,
    ErrorKind,
    MalformedResponseError,
    NoAnswerError,
    SachCheckError,
    SessionStateError,
    TransportError,
)
from .models import (
    ChatMessage,
    ChatTranscript,
    FactCheckResult,
    GroundingSource,
    ImageAttachment,
    Language,
    Role,
    VerificationRequest,
    Verdict,
)

__all__ = [
    "ChatMessage",
    "ChatTranscript",
    "CredentialError",
    "DeviceUnavailableError",
    "ErrorKind",
    "FactCheckResult",
    "GroundingSource",
    "ImageAttachment",
    "Language",
    "MalformedResponseError",
    "NoAnswerError",
    "Role",
    "SachCheckError",
    "SessionStateError",
    "TransportError",
    "VerificationRequest",
    "Verdict",
]
