"""Structured error types raised across the application.

Every error surfaced to an interface carries an ``ErrorKind`` so that the UI
can branch on it instead of inspecting message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a failure, used by interfaces to pick an error surface."""

    CREDENTIAL = "credential"
    TRANSPORT = "transport"
    PARSE = "parse"
    DEVICE = "device"


class SachCheckError(Exception):
    """Base class for all application errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message: str, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class CredentialError(SachCheckError):
    """Missing, invalid or unauthorized API key, or an unknown model."""

    kind = ErrorKind.CREDENTIAL


class TransportError(SachCheckError):
    """The remote service could not be reached or answered with an error."""

    kind = ErrorKind.TRANSPORT


class NoAnswerError(TransportError):
    """The remote call succeeded but returned no response text."""


class MalformedResponseError(SachCheckError):
    """The response text could not be decoded as the expected JSON."""

    kind = ErrorKind.PARSE


class DeviceUnavailableError(SachCheckError):
    """Microphone permission was denied or no input device exists."""

    kind = ErrorKind.DEVICE


class SessionStateError(RuntimeError):
    """An audio session was asked to make a transition its state forbids."""
