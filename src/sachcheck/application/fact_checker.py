"""Fact-checking service - Core business logic."""

import logging
from typing import Optional

from ..domain.errors import MalformedResponseError, NoAnswerError
from ..domain.models import (
    FactCheckResult,
    ImageAttachment,
    Language,
    VerificationRequest,
    Verdict,
)
from ..infrastructure.llm.client import LLMClient
from ..infrastructure.llm.parser import LLMResponseParser
from .cache import VerificationCache

logger = logging.getLogger(__name__)

IMAGE_ONLY_QUERY = "Image analysis"
NO_ANSWER_EXPLANATION = "No answer received."
PROCESSING_ERROR_EXPLANATION = "Error processing claim."


class FactCheckerService:
    """Service for performing fact-checking analysis.

    Answers repeated requests from the cache and otherwise coordinates the
    remote verification call and response parsing.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        response_parser: LLMResponseParser,
        cache: VerificationCache,
    ) -> None:
        """Initialize fact-checking service.

        Args:
            llm_client: Client for the remote verification call.
            response_parser: Parser for model responses.
            cache: Verdict cache shared by all calls on this service.
        """
        self.llm_client = llm_client
        self.response_parser = response_parser
        self.cache = cache

    async def verify(self, request: VerificationRequest) -> FactCheckResult:
        """Produce a verdict for a request.

        Empty or malformed model output degrades to an Unverified result,
        which is returned but not cached.

        Args:
            request: The claim to verify.

        Returns:
            FactCheckResult, possibly from the cache.

        Raises:
            CredentialError: The API key is missing or rejected.
            TransportError: The remote call failed.
        """
        cached = self.cache.get(request)
        if cached is not None:
            return cached

        raw = await self.llm_client.verify(request.query, request.language, request.image)

        try:
            result = self.response_parser.parse(raw.text, raw.grounding_sources)
        except NoAnswerError:
            logger.warning("Empty response for %r", request.query[:80])
            return FactCheckResult(verdict=Verdict.UNVERIFIED, explanation=NO_ANSWER_EXPLANATION)
        except MalformedResponseError:
            logger.exception("Fact check parse error")
            return FactCheckResult(
                verdict=Verdict.UNVERIFIED, explanation=PROCESSING_ERROR_EXPLANATION
            )

        self.cache.put(request, result)
        return result

    async def fact_check(
        self,
        query: str,
        language: Language,
        image: Optional[ImageAttachment] = None,
    ) -> FactCheckResult:
        """Verify a claim given as plain arguments.

        An image submitted without text is checked as "Image analysis".
        """
        text = query.strip() or IMAGE_ONLY_QUERY
        return await self.verify(VerificationRequest(language=language, query=text, image=image))
