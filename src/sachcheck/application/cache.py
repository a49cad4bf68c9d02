"""In-memory cache of verdicts keyed by request identity."""

import logging
from collections import OrderedDict
from typing import Optional

from ..domain.models import FactCheckResult, VerificationRequest

logger = logging.getLogger(__name__)


class VerificationCache:
    """Maps request identity to a previously computed verdict.

    Identity is ``(language, query text, has-image)`` with exact text
    equality, so rephrased claims miss. Entries live for the process
    lifetime. With ``max_entries`` set, the least recently used entry is
    evicted once the bound is reached; 0 means unbounded.

    Usage:
        ```python
        cache = VerificationCache()
        service = FactCheckerService(llm_client, parser, cache)
        ```
    """

    def __init__(self, max_entries: int = 0) -> None:
        self.max_entries = max(0, int(max_entries))
        self._entries: "OrderedDict[str, FactCheckResult]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(request: VerificationRequest) -> str:
        """Deterministic identity key for a request."""
        kind = "img" if request.has_image else "txt"
        return f"{request.language.value}-{request.query}-{kind}"

    def get(self, request: VerificationRequest) -> Optional[FactCheckResult]:
        key = self.key_for(request)
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
            return None
        self.hits += 1
        self._entries.move_to_end(key)
        logger.debug("Cache hit for %s", key)
        return result

    def put(self, request: VerificationRequest, result: FactCheckResult) -> None:
        key = self.key_for(request)
        self._entries[key] = result
        self._entries.move_to_end(key)
        if self.max_entries and len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cached verdict %s", evicted)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, request: object) -> bool:
        if not isinstance(request, VerificationRequest):
            return False
        return self.key_for(request) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
