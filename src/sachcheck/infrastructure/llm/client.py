"""LLM client infrastructure."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from openai import AsyncOpenAI
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...domain.errors import CredentialError
from ...domain.models import GroundingSource, ImageAttachment, Language
from ..provider import TRANSIENT_ERRORS, translate_error

logger = logging.getLogger(__name__)

FACT_CHECK_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "verdict": {"type": "string", "enum": ["True", "False", "Misleading"]},
        "explanation": {"type": "string"},
        "sources": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "uri": {"type": "string"},
                },
                "required": ["title", "uri"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["verdict", "explanation", "sources"],
    "additionalProperties": False,
}


def fact_check_instructions(language: Language) -> str:
    """Return the system instruction for a verification call.

    Args:
        language: Language the explanation must be written in.

    Returns:
        Instruction string for the fact-checking model.
    """
    return f"""
Professional fact-checker for Indian context.
Context: Indian political/Kisan news.
Language: {language.value}.

Search the web before answering and base the verdict on what you find.

CRITICAL FORMATTING:
1. Start with a very brief intro.
2. Provide news points as clear, SEPARATE bullet points using the '•' symbol.
3. Each news point MUST be on its own new line.
4. Use bolding **Example** for key entities.
5. No wall of text. Clear separation between "News 1", "News 2", etc.

Return JSON: {{verdict: "True"|"False"|"Misleading", explanation: "...", sources: [{{title: "...", uri: "..."}}]}}
"""


@dataclass(frozen=True)
class RawVerification:
    """Unparsed output of a verification call."""

    text: Optional[str]
    grounding_sources: List[GroundingSource] = field(default_factory=list)


class LLMClient:
    """Client for the provider's structured fact-checking call."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        api_key: Optional[str] = None,
    ) -> None:
        """Initialize LLM client.

        Args:
            client: Provider SDK client.
            model: Model identifier.
            api_key: The credential the client was built with. None means no
                key is configured and every call raises CredentialError.
        """
        self._client = client
        self.model = model
        self.api_key = api_key

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
    )
    async def _create_response(self, **kwargs: Any) -> Any:
        return await self._client.responses.create(**kwargs)

    def _build_input(self, query: str, image: Optional[ImageAttachment]) -> List[Dict[str, Any]]:
        content: List[Dict[str, Any]] = [{"type": "input_text", "text": query}]
        if image is not None:
            content.append({"type": "input_image", "image_url": image.to_data_uri()})
        return [{"role": "user", "content": content}]

    async def verify(
        self,
        query: str,
        language: Language,
        image: Optional[ImageAttachment] = None,
    ) -> RawVerification:
        """Ask the model for a grounded verdict on a claim.

        Args:
            query: Claim text or link to check.
            language: Target language of the explanation.
            image: Optional image to analyze alongside the text.

        Returns:
            RawVerification with the response text and any web citations.

        Raises:
            CredentialError: No key is configured or the provider rejected it.
            TransportError: The provider could not be reached or failed.
        """
        if not self.api_key:
            raise CredentialError("No API key configured. Please connect your key.")

        try:
            response = await self._create_response(
                model=self.model,
                instructions=fact_check_instructions(language),
                input=self._build_input(query, image),
                tools=[{"type": "web_search"}],
                text={
                    "format": {
                        "type": "json_schema",
                        "name": "fact_check",
                        "schema": FACT_CHECK_SCHEMA,
                        "strict": True,
                    }
                },
            )
        except Exception as e:
            logger.warning("Verification call failed: %s", e)
            raise translate_error(e) from e

        return RawVerification(
            text=getattr(response, "output_text", None),
            grounding_sources=extract_grounding_sources(response),
        )


def extract_grounding_sources(response: Any) -> List[GroundingSource]:
    """Collect web citations attached to the response text, in order.

    Args:
        response: Provider response object.

    Returns:
        Unique sources by URI. Missing titles become "Source".
    """
    sources: List[GroundingSource] = []
    seen: Set[str] = set()
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                uri = getattr(annotation, "url", None) or "#"
                if uri in seen:
                    continue
                seen.add(uri)
                sources.append(
                    GroundingSource(title=getattr(annotation, "title", None) or "Source", uri=uri)
                )
    return sources
