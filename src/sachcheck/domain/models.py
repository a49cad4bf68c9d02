"""Core domain models for the fact-checking application."""

import base64
import re
import uuid
from datetime import datetime
from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Language(str, Enum):
    """Languages the verdicts and UI are produced in."""

    HINDI = "Hindi"
    ENGLISH = "English"
    BHOJPURI = "Bhojpuri"


class Verdict(str, Enum):
    """Represents the truthfulness verdict of a claim."""

    TRUE = "True"
    FALSE = "False"
    MISLEADING = "Misleading"
    UNVERIFIED = "Unverified"


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class GroundingSource(BaseModel):
    """A web reference supporting a verdict."""

    model_config = ConfigDict(frozen=True)

    title: str = "Source"
    uri: str = "#"


class FactCheckResult(BaseModel):
    """Verdict, explanation and evidence produced for a claim."""

    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    explanation: str
    sources: List[GroundingSource] = Field(default_factory=list)


_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(;base64)?,(?P<data>.*)$", re.DOTALL)


class ImageAttachment(BaseModel):
    """An image attached to a verification request, held as base64."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = "image/jpeg"
    data: str

    @classmethod
    def from_data_uri(cls, uri: str) -> "ImageAttachment":
        """Build from a ``data:`` URI; a bare base64 payload is accepted too."""
        match = _DATA_URI_RE.match(uri)
        if not match:
            return cls(data=uri)
        return cls(mime_type=match.group("mime") or "image/jpeg", data=match.group("data"))

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: Optional[str] = None) -> "ImageAttachment":
        return cls(
            mime_type=mime_type or "image/jpeg",
            data=base64.b64encode(raw).decode("ascii"),
        )

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class VerificationRequest(BaseModel):
    """A claim to verify, in a target language, with an optional image."""

    model_config = ConfigDict(frozen=True)

    language: Language
    query: str
    image: Optional[ImageAttachment] = None

    @field_validator("query")
    @classmethod
    def normalize_query(cls, v: str) -> str:
        """Trim surrounding whitespace; inner text is kept as typed."""
        return v.strip()

    @property
    def has_image(self) -> bool:
        return self.image is not None


class ChatMessage(BaseModel):
    """One entry in the conversation log. Never mutated once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    content: str = ""
    image: Optional[ImageAttachment] = None
    result: Optional[FactCheckResult] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ChatTranscript:
    """Append-only, chronologically ordered conversation history."""

    def __init__(self, messages: Optional[List[ChatMessage]] = None) -> None:
        self._messages: List[ChatMessage] = list(messages or [])

    def append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    @property
    def last(self) -> Optional[ChatMessage]:
        return self._messages[-1] if self._messages else None

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]
