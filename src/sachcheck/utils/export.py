"""PDF and JSON export of a conversation."""

import html
import io
import json
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from ..domain.models import ChatMessage, Language, Role
from ..strings import verdict_label

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


def _markup(text: str) -> str:
    """Escape text for a reportlab Paragraph, keeping **bold** emphasis."""
    escaped = html.escape(text, quote=False)
    return _BOLD_RE.sub(r"<b>\1</b>", escaped).replace("\n", "<br/>")


def transcript_to_dict(messages: Iterable[ChatMessage], language: Language) -> Dict[str, Any]:
    """Serializable view of a conversation."""
    entries: List[Dict[str, Any]] = []
    for message in messages:
        entry: Dict[str, Any] = {
            "id": message.id,
            "role": message.role.value,
            "content": message.content,
            "timestamp": message.timestamp.isoformat(),
            "has_image": message.image is not None,
        }
        if message.result is not None:
            entry["result"] = message.result.model_dump(mode="json")
        entries.append(entry)
    return {
        "exported_at": datetime.now().isoformat(),
        "language": language.value,
        "messages": entries,
    }


def generate_json(messages: Iterable[ChatMessage], language: Language) -> str:
    return json.dumps(transcript_to_dict(messages, language), indent=2, ensure_ascii=False)


def generate_pdf(messages: Iterable[ChatMessage], language: Language) -> bytes:
    """Generate a PDF document from a conversation.

    Args:
        messages: Conversation messages in order.
        language: Language used for verdict labels.

    Returns:
        PDF file contents.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        name="TitleStyle",
        parent=styles["Heading1"],
        fontSize=22,
        textColor=colors.darkblue,
        alignment=1,  # Center alignment
        fontName="Helvetica-Bold",
    )

    heading_style = ParagraphStyle(
        name="HeadingStyle",
        parent=styles["Heading2"],
        fontSize=14,
        textColor=colors.blue,
        fontName="Helvetica-Bold",
    )

    normal_style = ParagraphStyle(
        name="NormalStyle",
        parent=styles["Normal"],
        fontSize=11,
        leading=14,
        fontName="Helvetica",
    )

    reference_style = ParagraphStyle(
        name="ReferenceStyle",
        parent=styles["Normal"],
        fontSize=9,
        leading=12,
        fontName="Times-Italic",
        textColor=colors.black,
    )

    story: List[Any] = [
        Paragraph("<b>SachCheck Conversation</b>", title_style),
        Spacer(1, 0.4 * inch),
    ]

    for message in messages:
        stamp = message.timestamp.strftime("%Y-%m-%d %H:%M")
        if message.role is Role.USER:
            story.append(Paragraph(f"<b>You</b> ({stamp})", heading_style))
            story.append(Paragraph(_markup(message.content or "[image]"), normal_style))
        elif message.result is not None:
            result = message.result
            story.append(
                Paragraph(f"<b>{verdict_label(result.verdict, language)}</b> ({stamp})", heading_style)
            )
            story.append(Paragraph(_markup(result.explanation), normal_style))
            for source in result.sources:
                uri = html.escape(source.uri)
                story.append(
                    Paragraph(
                        f'{html.escape(source.title)} - <a href="{uri}" color="blue">{uri}</a>',
                        reference_style,
                    )
                )
        else:
            story.append(Paragraph(_markup(message.content), normal_style))
        story.append(Spacer(1, 0.25 * inch))

    doc.build(story)
    return buffer.getvalue()
