"""Explanation text formatting shared by the web UI and the CLI."""

import html
import re
from dataclasses import dataclass
from typing import List

from ..domain.models import FactCheckResult, Language, Verdict
from ..strings import verdict_label
from ..utils.sanitization import safe_href, sanitize_html

_ITEM_MARKER = r"(?:News|Point|दावा|खबर)\s+\d+[:.]"
_SPLIT_RE = re.compile(rf"\n|(?={_ITEM_MARKER})", re.IGNORECASE)
_ITEM_RE = re.compile(rf"^{_ITEM_MARKER}", re.IGNORECASE)
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


@dataclass(frozen=True)
class ExplanationLine:
    text: str
    is_bullet: bool


def split_explanation(explanation: str) -> List[ExplanationLine]:
    """Break an explanation into display lines.

    Lines split on newlines and before "News 1:" / "Point 2." style markers,
    so run-together items still render separately.
    """
    lines: List[ExplanationLine] = []
    for raw in _SPLIT_RE.split(explanation or ""):
        text = raw.strip()
        if not text:
            continue
        is_bullet = text.startswith(("•", "-")) or bool(_ITEM_RE.match(text))
        lines.append(ExplanationLine(text=text, is_bullet=is_bullet))
    return lines


def _strip_bullet(text: str) -> str:
    return text.lstrip("•-").strip()


def inline_html(text: str) -> str:
    """Escape text and turn ``**entity**`` into highlighted spans."""
    escaped = html.escape(text)
    return _BOLD_RE.sub(r'<strong class="entity">\1</strong>', escaped)


def explanation_html(explanation: str) -> str:
    """Render an explanation as sanitized HTML with bullet items."""
    parts: List[str] = []
    for line in split_explanation(explanation):
        if line.is_bullet:
            parts.append(f'<div class="bullet">{inline_html(_strip_bullet(line.text))}</div>')
        else:
            parts.append(f'<p class="intro">{inline_html(line.text)}</p>')
    return sanitize_html("".join(parts))


def explanation_markdown(explanation: str) -> str:
    """Render an explanation as Markdown (bold markers are already Markdown)."""
    out: List[str] = []
    for line in split_explanation(explanation):
        if line.is_bullet:
            out.append(f"- {_strip_bullet(line.text)}")
        else:
            out.append(line.text)
            out.append("")
    return "\n".join(out).strip()


def sources_html(result: FactCheckResult) -> str:
    """Render evidence sources as links labeled with their titles."""
    links = [
        f'<a class="source" href="{html.escape(safe_href(s.uri), quote=True)}">{html.escape(s.title)}</a>'
        for s in result.sources
    ]
    return sanitize_html(" ".join(links))


_VERDICT_CLASSES = {
    Verdict.TRUE: "true",
    Verdict.FALSE: "false",
    Verdict.MISLEADING: "misleading",
}


def verdict_css_class(result: FactCheckResult) -> str:
    return _VERDICT_CLASSES.get(result.verdict, "unverified")


def result_text(result: FactCheckResult, language: Language) -> str:
    """Plain-text rendering used for copying and exports."""
    lines = [verdict_label(result.verdict, language), "", result.explanation]
    if result.sources:
        lines.append("")
        lines.extend(f"{s.title} - {s.uri}" for s in result.sources)
    return "\n".join(lines)
