"""Tests for LLMResponseParser and degraded verification results."""

import json
from unittest.mock import MagicMock

import pytest
from fakes import verification_json

from sachcheck.application.fact_checker import FactCheckerService
from sachcheck.domain.errors import ErrorKind, MalformedResponseError, NoAnswerError
from sachcheck.domain.models import GroundingSource, Language, Verdict
from sachcheck.infrastructure.llm.client import RawVerification
from sachcheck.infrastructure.llm.parser import LLMResponseParser


@pytest.fixture
def parser() -> LLMResponseParser:
    return LLMResponseParser()


def test_parse_valid_json(parser: LLMResponseParser) -> None:
    result = parser.parse(verification_json())

    assert result.verdict is Verdict.FALSE
    assert result.explanation == "Claim is **false**."
    assert [s.title for s in result.sources] == ["Ref"]


def test_parse_json_wrapped_in_prose(parser: LLMResponseParser) -> None:
    text = f"Here is my answer:\n```json\n{verification_json('True')}\n```"
    assert parser.parse(text).verdict is Verdict.TRUE


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", Verdict.TRUE),
        (" MISLEADING ", Verdict.MISLEADING),
        ("Partly true", Verdict.UNVERIFIED),
        (None, Verdict.UNVERIFIED),
    ],
)
def test_verdict_normalization(parser: LLMResponseParser, raw: object, expected: Verdict) -> None:
    text = json.dumps({"verdict": raw, "explanation": "x"})
    assert parser.parse(text).verdict is expected


def test_missing_explanation_gets_placeholder(parser: LLMResponseParser) -> None:
    result = parser.parse('{"verdict": "True"}')
    assert result.explanation == "Verification failed."


def test_source_placeholders(parser: LLMResponseParser) -> None:
    result = parser.parse('{"verdict": "True", "explanation": "x", "sources": [{"url": "https://a.example"}, {}, "junk"]}')

    assert result.sources == [
        GroundingSource(title="Source", uri="https://a.example"),
        GroundingSource(title="Source", uri="#"),
    ]


def test_grounding_sources_fill_in_when_model_names_none(parser: LLMResponseParser) -> None:
    grounding = [GroundingSource(title=f"G{i}", uri=f"https://g{i}.example") for i in range(5)]
    result = parser.parse(verification_json(sources=[]), grounding)

    assert [s.title for s in result.sources] == ["G0", "G1", "G2"]


def test_model_sources_win_over_grounding(parser: LLMResponseParser) -> None:
    grounding = [GroundingSource(title="G", uri="https://g.example")]
    result = parser.parse(verification_json(), grounding)
    assert [s.title for s in result.sources] == ["Ref"]


@pytest.mark.parametrize("text", [None, "", "   \n"])
def test_empty_response_raises_no_answer(parser: LLMResponseParser, text: object) -> None:
    with pytest.raises(NoAnswerError):
        parser.parse(text)  # type: ignore[arg-type]


def test_non_json_raises_malformed(parser: LLMResponseParser) -> None:
    with pytest.raises(MalformedResponseError) as exc_info:
        parser.parse("The claim is false.")
    assert exc_info.value.kind is ErrorKind.PARSE


def test_json_array_raises_malformed(parser: LLMResponseParser) -> None:
    with pytest.raises(MalformedResponseError):
        parser.parse('["True"]')


async def test_malformed_output_becomes_unverified(service: FactCheckerService, llm_client: MagicMock) -> None:
    llm_client.verify.return_value = RawVerification(text="{broken")

    result = await service.fact_check("claim", Language.ENGLISH)

    assert result.verdict is Verdict.UNVERIFIED
    assert result.explanation == "Error processing claim."
    assert result.sources == []


async def test_empty_output_becomes_no_answer(service: FactCheckerService, llm_client: MagicMock) -> None:
    llm_client.verify.return_value = RawVerification(text=None)

    result = await service.fact_check("claim", Language.ENGLISH)

    assert result.verdict is Verdict.UNVERIFIED
    assert result.explanation == "No answer received."


async def test_image_only_request_uses_placeholder_query(service: FactCheckerService, llm_client: MagicMock) -> None:
    await service.fact_check("   ", Language.HINDI)

    args = llm_client.verify.await_args.args
    assert args[0] == "Image analysis"
    assert args[1] is Language.HINDI
