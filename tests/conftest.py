"""Shared fixtures for the test suite."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import verification_json

from sachcheck.application.cache import VerificationCache
from sachcheck.application.fact_checker import FactCheckerService
from sachcheck.infrastructure.llm.client import LLMClient, RawVerification
from sachcheck.infrastructure.llm.parser import LLMResponseParser


@pytest.fixture
def llm_client() -> MagicMock:
    """An LLMClient whose remote call returns a False verdict citing "Ref"."""
    client = MagicMock(spec=LLMClient)
    client.verify = AsyncMock(return_value=RawVerification(text=verification_json()))
    return client


@pytest.fixture
def cache() -> VerificationCache:
    return VerificationCache()


@pytest.fixture
def service(llm_client: MagicMock, cache: VerificationCache) -> FactCheckerService:
    return FactCheckerService(llm_client=llm_client, response_parser=LLMResponseParser(), cache=cache)
