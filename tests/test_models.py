"""Tests for domain models."""

import pytest
from pydantic import ValidationError

from sachcheck.domain.models import (
    ChatMessage,
    ChatTranscript,
    FactCheckResult,
    GroundingSource,
    ImageAttachment,
    Language,
    Role,
    Verdict,
    VerificationRequest,
)


def test_image_attachment_from_data_uri() -> None:
    image = ImageAttachment.from_data_uri("data:image/png;base64,aGVsbG8=")

    assert image.mime_type == "image/png"
    assert image.data == "aGVsbG8="
    assert image.to_data_uri() == "data:image/png;base64,aGVsbG8="


def test_image_attachment_accepts_bare_payload() -> None:
    image = ImageAttachment.from_data_uri("aGVsbG8=")
    assert image.mime_type == "image/jpeg"
    assert image.data == "aGVsbG8="


def test_request_trims_query() -> None:
    request = VerificationRequest(language=Language.ENGLISH, query="  claim  ")
    assert request.query == "claim"
    assert not request.has_image


def test_results_are_immutable() -> None:
    result = FactCheckResult(verdict=Verdict.TRUE, explanation="x")
    with pytest.raises(ValidationError):
        result.verdict = Verdict.FALSE  # type: ignore[misc]


def test_source_placeholders() -> None:
    assert GroundingSource() == GroundingSource(title="Source", uri="#")


def test_messages_get_unique_ids() -> None:
    a = ChatMessage(role=Role.USER, content="a")
    b = ChatMessage(role=Role.USER, content="a")
    assert a.id != b.id


def test_transcript_iteration_is_a_snapshot() -> None:
    transcript = ChatTranscript([ChatMessage(role=Role.ASSISTANT, content="hi")])
    seen = []
    for message in transcript:
        seen.append(message)
        if len(transcript) < 3:
            transcript.append(ChatMessage(role=Role.USER, content="more"))

    assert len(seen) == 1
    assert len(transcript) == 2
    assert transcript.last.content == "more"
