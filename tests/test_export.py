"""Tests for conversation export."""

import json

from sachcheck.application.chat import welcome_message
from sachcheck.domain.models import (
    ChatMessage,
    FactCheckResult,
    GroundingSource,
    Language,
    Role,
    Verdict,
)
from sachcheck.utils.export import generate_json, generate_pdf


def _conversation() -> list:
    return [
        welcome_message(Language.ENGLISH),
        ChatMessage(role=Role.USER, content="Is **X** true? <maybe>"),
        ChatMessage(
            role=Role.ASSISTANT,
            result=FactCheckResult(
                verdict=Verdict.FALSE,
                explanation="• **X** is false & misleading",
                sources=[GroundingSource(title="Ref", uri="https://ref.example/?a=1&b=2")],
            ),
        ),
    ]


def test_generate_json() -> None:
    data = json.loads(generate_json(_conversation(), Language.ENGLISH))

    assert data["language"] == "English"
    assert [m["role"] for m in data["messages"]] == ["assistant", "user", "assistant"]
    result = data["messages"][2]["result"]
    assert result["verdict"] == "False"
    assert result["sources"] == [{"title": "Ref", "uri": "https://ref.example/?a=1&b=2"}]


def test_generate_pdf() -> None:
    pdf = generate_pdf(_conversation(), Language.ENGLISH)
    assert pdf.startswith(b"%PDF")
