"""Reusable Streamlit UI components."""

import base64
import html
from typing import Callable, Optional

import streamlit as st

from ...domain.models import ChatMessage, FactCheckResult, Language, Role
from ...strings import t, verdict_label
from ..formatting import explanation_html, result_text, sources_html, verdict_css_class


def display_verdict(result: FactCheckResult, language: Language, column: Optional[object] = None) -> None:
    """Display the verdict label with its color.

    Args:
        result: The fact-check result.
        language: Language for the label.
        column: Streamlit column/container to display in.
    """
    target = column or st
    label = html.escape(verdict_label(result.verdict, language))
    css_class = verdict_css_class(result)
    target.markdown(
        f'<span class="verdict-caption">Final Verdict</span>'
        f'<div class="verdict {css_class}">{label}</div>',
        unsafe_allow_html=True,
    )


def display_explanation(explanation: str, column: Optional[object] = None) -> None:
    """Display explanation with bullets and highlighted entities."""
    (column or st).markdown(explanation_html(explanation), unsafe_allow_html=True)


def display_sources(result: FactCheckResult, language: Language, column: Optional[object] = None) -> None:
    """Display evidence sources as links labeled with their titles."""
    if not result.sources:
        return
    target = column or st
    target.markdown(f"**{t('sources_title', language)}**")
    target.markdown(f'<div class="sources">{sources_html(result)}</div>', unsafe_allow_html=True)


def display_verdict_card(
    message: ChatMessage,
    language: Language,
    on_listen: Callable[[ChatMessage], None],
    audio: Optional[bytes] = None,
) -> None:
    """Render an assistant verdict with Listen and Copy actions."""
    result = message.result
    if result is None:
        return

    head, listen_col = st.columns([5, 1])
    display_verdict(result, language, head)
    listen_col.button(
        "🔊 Listen",
        key=f"listen_{message.id}",
        on_click=on_listen,
        args=(message,),
        use_container_width=True,
    )
    if audio:
        st.audio(audio, format="audio/wav", autoplay=True)

    display_explanation(result.explanation)
    display_sources(result, language)

    with st.expander("📋 Copy"):
        st.code(result_text(result, language), language=None)


def display_message(
    message: ChatMessage,
    language: Language,
    on_listen: Callable[[ChatMessage], None],
    audio: Optional[bytes] = None,
) -> None:
    """Render one transcript entry as a chat bubble."""
    if message.role is Role.USER:
        with st.chat_message("user"):
            if message.image is not None:
                st.image(base64.b64decode(message.image.data), use_container_width=True)
            if message.content:
                st.markdown(message.content)
    else:
        with st.chat_message("assistant"):
            if message.content:
                st.markdown(message.content)
            display_verdict_card(message, language, on_listen, audio)
    st.caption(message.timestamp.strftime("%H:%M"))
