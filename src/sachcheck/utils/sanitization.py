"""Input sanitization utilities for security."""

import re
from typing import Optional
from urllib.parse import urlparse

from bleach.sanitizer import Cleaner

MAX_QUERY_LENGTH = 2000

_ALLOWED_SCHEMES = ("http", "https", "mailto")
_HREF_RE = re.compile(r'href="([^"]*)"')

# Only what the explanation and source renderers emit.
_CLEANER = Cleaner(
    tags={"p", "br", "strong", "em", "a", "ul", "li", "span", "div"},
    attributes={
        "a": ["href", "title", "class"],
        "p": ["class"],
        "span": ["class"],
        "strong": ["class"],
        "div": ["class"],
    },
    protocols=set(_ALLOWED_SCHEMES),
    strip=True,
)


def sanitize_query(query: str) -> str:
    """Sanitize claim text before it is sent to the provider.

    Removes control characters (newlines and tabs become spaces) and angle
    brackets while preserving punctuation and non-Latin scripts.

    Args:
        query: Raw query string.

    Returns:
        Sanitized query string (max 2000 characters).
    """
    if not isinstance(query, str):
        return ""
    q = re.sub(r"[\t\r\n]+", " ", query).strip()
    q = re.sub(r"[\x00-\x1f<>]", "", q)
    return q[:MAX_QUERY_LENGTH]


def strip_speech_markup(text: str) -> str:
    """Remove bold and bullet markers so they are not read aloud."""
    if not isinstance(text, str):
        return ""
    return text.replace("**", "").replace("•", "").strip()


def _is_allowed_href(href: Optional[str]) -> bool:
    """Check if href uses an allowed URL scheme.

    Args:
        href: URL string to check.

    Returns:
        True if scheme is allowed (http, https, mailto, or empty).
    """
    if not href:
        return False
    try:
        parsed = urlparse(href)
    except ValueError:
        return False
    return parsed.scheme in _ALLOWED_SCHEMES or parsed.scheme == ""


def safe_href(href: Optional[str]) -> str:
    """Return ``href`` if its scheme is allowed, otherwise ``#``."""
    return href if href and _is_allowed_href(href) else "#"


def _secure_link(match: "re.Match[str]") -> str:
    href = match.group(1)
    if not _is_allowed_href(href):
        return 'href="#"'
    return f'href="{href}" target="_blank" rel="noopener noreferrer"'


def sanitize_html(content: str) -> str:
    """Sanitize HTML before it is rendered with ``unsafe_allow_html``.

    Tags and attributes outside a small allow-list are stripped, links must
    use an allowed scheme, and surviving links open in a new tab without an
    opener reference.
    """
    if not isinstance(content, str) or not content:
        return ""
    return _HREF_RE.sub(_secure_link, _CLEANER.clean(content))
