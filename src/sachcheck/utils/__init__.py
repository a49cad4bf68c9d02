"""Utility functions and helpers."""

from .sanitization import safe_href, sanitize_html, sanitize_query, strip_speech_markup

__all__ = ["safe_href", "sanitize_html", "sanitize_query", "strip_speech_markup"]
