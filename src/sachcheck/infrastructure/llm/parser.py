"""LLM response parsing and validation."""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from ...domain.errors import MalformedResponseError, NoAnswerError
from ...domain.models import FactCheckResult, GroundingSource, Verdict

logger = logging.getLogger(__name__)

MAX_GROUNDING_SOURCES = 3

_VERDICTS = {
    "true": Verdict.TRUE,
    "false": Verdict.FALSE,
    "misleading": Verdict.MISLEADING,
}


class LLMResponseParser:
    """Parser for LLM responses into FactCheckResult objects."""

    @staticmethod
    def _find_first_json(text: str) -> Optional[str]:
        """Find the first JSON object in text.

        Uses json.JSONDecoder().raw_decode for safe parsing of nested structures.

        Args:
            text: Text potentially containing JSON.

        Returns:
            JSON string or None if not found.
        """
        decoder = json.JSONDecoder()

        for start in range(len(text)):
            if text[start] != "{":
                continue
            try:
                _, idx = decoder.raw_decode(text[start:])
                return text[start : start + idx]
            except ValueError:
                continue

        return None

    @staticmethod
    def _normalize_verdict(raw: Any) -> Verdict:
        if not isinstance(raw, str):
            return Verdict.UNVERIFIED
        return _VERDICTS.get(raw.strip().lower(), Verdict.UNVERIFIED)

    @staticmethod
    def _normalize_sources(raw: Any) -> List[GroundingSource]:
        """Keep well-formed source entries; fill missing fields with placeholders."""
        if not isinstance(raw, list):
            return []
        sources: List[GroundingSource] = []
        for item in raw:
            if not isinstance(item, dict):
                logger.debug("Skipping non-object source entry: %r", item)
                continue
            title = item.get("title") or "Source"
            uri = item.get("uri") or item.get("url") or "#"
            sources.append(GroundingSource(title=str(title).strip(), uri=str(uri).strip()))
        return sources

    def parse(
        self,
        response_text: Optional[str],
        grounding_sources: Sequence[GroundingSource] = (),
    ) -> FactCheckResult:
        """Parse raw model output into a FactCheckResult.

        Args:
            response_text: Raw text response from the model.
            grounding_sources: Citations supplied alongside the response, used
                when the model names no sources itself.

        Returns:
            FactCheckResult.

        Raises:
            NoAnswerError: The response text is missing or blank.
            MalformedResponseError: No decodable JSON object in the text.
        """
        if response_text is None or not response_text.strip():
            raise NoAnswerError("The model returned no answer.")

        logger.debug("LLM response (truncated 1000 chars): %s", response_text[:1000])

        try:
            obj = json.loads(response_text)
        except json.JSONDecodeError:
            json_str = self._find_first_json(response_text)
            if json_str is None:
                raise MalformedResponseError("Model output is not valid JSON.")
            obj = json.loads(json_str)

        if not isinstance(obj, dict):
            raise MalformedResponseError("Model output is not a JSON object.")

        data: Dict[str, Any] = obj
        explanation = data.get("explanation")
        if not isinstance(explanation, str) or not explanation.strip():
            explanation = "Verification failed."

        sources = self._normalize_sources(data.get("sources"))
        if not sources:
            sources = list(grounding_sources)[:MAX_GROUNDING_SOURCES]

        return FactCheckResult(
            verdict=self._normalize_verdict(data.get("verdict")),
            explanation=explanation.strip(),
            sources=sources,
        )
