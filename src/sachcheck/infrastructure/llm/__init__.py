"""LLM infrastructure implementations."""

from .client import LLMClient, RawVerification, fact_check_instructions
from .parser import LLMResponseParser

__all__ = ["LLMClient", "LLMResponseParser", "RawVerification", "fact_check_instructions"]
