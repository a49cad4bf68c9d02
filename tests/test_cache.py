"""Tests for VerificationCache and cached verification."""

from unittest.mock import MagicMock

from sachcheck.application.cache import VerificationCache
from sachcheck.application.fact_checker import FactCheckerService
from sachcheck.domain.models import (
    FactCheckResult,
    ImageAttachment,
    Language,
    Verdict,
    VerificationRequest,
)
from sachcheck.infrastructure.llm.client import RawVerification


def _request(query: str = "Is X true?", language: Language = Language.ENGLISH, image: bool = False) -> VerificationRequest:
    attachment = ImageAttachment.from_bytes(b"\x89PNG", "image/png") if image else None
    return VerificationRequest(language=language, query=query, image=attachment)


def test_key_includes_language_query_and_image_flag() -> None:
    assert VerificationCache.key_for(_request()) == "English-Is X true?-txt"
    assert VerificationCache.key_for(_request(image=True)) == "English-Is X true?-img"
    assert VerificationCache.key_for(_request(language=Language.HINDI)) == "Hindi-Is X true?-txt"


def test_language_and_image_are_part_of_identity() -> None:
    cache = VerificationCache()
    result = FactCheckResult(verdict=Verdict.TRUE, explanation="ok")
    cache.put(_request(), result)

    assert cache.get(_request()) == result
    assert cache.get(_request(language=Language.HINDI)) is None
    assert cache.get(_request(image=True)) is None
    assert cache.hits == 1
    assert cache.misses == 2


def test_bounded_cache_evicts_least_recently_used() -> None:
    cache = VerificationCache(max_entries=2)
    result = FactCheckResult(verdict=Verdict.TRUE, explanation="ok")
    cache.put(_request("a"), result)
    cache.put(_request("b"), result)
    cache.get(_request("a"))
    cache.put(_request("c"), result)

    assert _request("a") in cache
    assert _request("b") not in cache
    assert _request("c") in cache
    assert len(cache) == 2


def test_unbounded_cache_keeps_everything() -> None:
    cache = VerificationCache()
    result = FactCheckResult(verdict=Verdict.TRUE, explanation="ok")
    for i in range(50):
        cache.put(_request(f"claim {i}"), result)
    assert len(cache) == 50


async def test_repeated_request_skips_remote_call(service: FactCheckerService, llm_client: MagicMock) -> None:
    first = await service.fact_check("Is X true?", Language.ENGLISH)
    second = await service.fact_check("Is X true?", Language.ENGLISH)

    assert first == second
    assert llm_client.verify.await_count == 1
    assert service.cache.hits == 1


async def test_different_query_misses(service: FactCheckerService, llm_client: MagicMock) -> None:
    await service.fact_check("Is X true?", Language.ENGLISH)
    await service.fact_check("Is Y true?", Language.ENGLISH)

    assert llm_client.verify.await_count == 2


async def test_degraded_results_are_not_cached(service: FactCheckerService, llm_client: MagicMock) -> None:
    llm_client.verify.return_value = RawVerification(text="not json at all")

    result = await service.fact_check("Is X true?", Language.ENGLISH)
    await service.fact_check("Is X true?", Language.ENGLISH)

    assert result.verdict is Verdict.UNVERIFIED
    assert llm_client.verify.await_count == 2
    assert len(service.cache) == 0
