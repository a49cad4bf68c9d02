"""Main Streamlit application entry point."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import streamlit as st

from ...application.chat import ChatController, ErrorSurface
from ...application.factory import Services, create_services
from ...config.logging_setup import init_logging
from ...config.settings import get_settings
from ...domain.errors import SachCheckError
from ...domain.models import ChatMessage, ImageAttachment, Language
from ...infrastructure.audio.pcm import PLAYBACK_SAMPLE_RATE, pcm16_to_wav
from ...infrastructure.http.client import get_async_client
from ...strings import t
from ...utils.export import generate_json, generate_pdf
from .components import display_message
from .runtime import BackgroundLoop

logger = logging.getLogger(__name__)

LISTEN_TIMEOUT_SECONDS = 120.0


@dataclass
class Runtime:
    loop: BackgroundLoop
    services: Services


@st.cache_resource
def _get_loop() -> BackgroundLoop:
    """One event loop for the whole server process."""
    settings = get_settings()
    init_logging(settings.log_level)
    return BackgroundLoop()


@st.cache_resource
def _get_services(api_key: Optional[str]) -> Services:
    """Services bound to an API key; rebuilt when the key changes."""
    settings = get_settings()
    return create_services(settings, http_client=get_async_client(settings.http_timeout_seconds))


def _get_runtime() -> Runtime:
    return Runtime(loop=_get_loop(), services=_get_services(get_settings().api_key))


def _initialize_session_state(runtime: Runtime) -> ChatController:
    """Initialize Streamlit session state variables."""
    settings = get_settings()
    if "chat" not in st.session_state:
        st.session_state.chat = ChatController(
            runtime.services.fact_checker,
            language=settings.default_language,
            session_factory=runtime.services.session_factory,
            has_credential=settings.has_credential,
        )
    if "draft" not in st.session_state:
        st.session_state.draft = ""
    if "pending_action" not in st.session_state:
        st.session_state.pending_action = None
    if "upload_key" not in st.session_state:
        st.session_state.upload_key = 0
    if "speech" not in st.session_state:
        st.session_state.speech = {}
    chat = st.session_state.chat
    if st.session_state.pending_action is None:
        st.session_state.draft = chat.draft_after_recording(st.session_state.draft)
    return chat


def _on_language_change() -> None:
    st.session_state.chat.set_language(Language(st.session_state.language_choice))


def _on_submit() -> None:
    """Move the composer contents into a pending query for the main script body."""
    chat: ChatController = st.session_state.chat
    upload = st.session_state.get(f"upload_{st.session_state.upload_key}")
    if upload is not None:
        chat.selected_image = ImageAttachment.from_bytes(upload.getvalue(), upload.type)
        st.session_state.upload_key += 1
    chat.accept_draft(st.session_state.draft)
    st.session_state.pending_action = ("submit", None)
    st.session_state.draft = ""


def _on_quick_check() -> None:
    st.session_state.pending_action = ("quick_check", None)


def _on_toggle_recording() -> None:
    runtime = _get_runtime()
    chat: ChatController = st.session_state.chat
    was_recording = chat.is_recording
    if not was_recording:
        chat.input_value = st.session_state.draft
    runtime.loop.run(chat.toggle_recording())
    if was_recording:
        st.session_state.draft = chat.draft_after_recording(st.session_state.draft)


def _on_listen(message: ChatMessage) -> None:
    runtime = _get_runtime()
    chat: ChatController = st.session_state.chat
    if message.result is None:
        return
    try:
        pcm = runtime.loop.run(
            runtime.services.synthesizer.synthesize(message.result.explanation),
            timeout=LISTEN_TIMEOUT_SECONDS,
        )
    except SachCheckError as e:
        logger.error("Speech playback error: %s", e)
        chat.report(e)
        return
    if pcm:
        st.session_state.speech[message.id] = pcm16_to_wav(pcm, PLAYBACK_SAMPLE_RATE)


def _on_connect_key() -> None:
    key = (st.session_state.get("new_api_key") or "").strip()
    if len(key) <= 5:
        return
    os.environ["SACHCHECK_API_KEY"] = key
    services = _get_services(key)
    st.session_state.chat.credential_connected(services.fact_checker, services.session_factory)
    st.session_state.new_api_key = ""


def _render_credential_prompt() -> None:
    with st.container(border=True):
        st.subheader("🔑 Connect Your Account")
        st.markdown(
            "To start fact-checking, please connect your API key. "
            "It is kept only for this server process."
        )
        st.text_input("API key", type="password", key="new_api_key")
        st.button("Set API Key Now", on_click=_on_connect_key, type="primary")


def _render_sidebar(chat: ChatController) -> None:
    """Render sidebar with quick check and export options."""
    language = chat.language
    with st.sidebar:
        st.markdown(f"## {t('app_name', language)}")
        st.caption(t("tagline", language))
        st.button(f"📰 {t('quick_check', language)}", on_click=_on_quick_check, disabled=chat.pending)

        st.markdown("### Export")
        st.warning(
            "The conversation lives only in this browser session and is lost on refresh."
        )
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        st.download_button(
            "Download conversation (JSON)",
            data=generate_json(chat.transcript, language),
            file_name=f"sachcheck_{stamp}.json",
            mime="application/json",
        )
        if st.button("Prepare PDF"):
            st.download_button(
                "Download conversation (PDF)",
                data=generate_pdf(chat.transcript, language),
                file_name=f"sachcheck_{stamp}.pdf",
                mime="application/pdf",
            )


def _render_header(chat: ChatController) -> None:
    title_col, lang_col = st.columns([3, 2])
    title_col.title(f"🔍 {t('tagline', chat.language)}")
    lang_col.radio(
        "Language",
        [lang.value for lang in Language],
        index=list(Language).index(chat.language),
        horizontal=True,
        key="language_choice",
        on_change=_on_language_change,
        label_visibility="collapsed",
    )


def _render_chat_history(chat: ChatController) -> None:
    """Render chat message history."""
    for message in chat.transcript:
        display_message(message, chat.language, _on_listen, st.session_state.speech.get(message.id))


@st.fragment(run_every=1.0)
def _render_live_transcript() -> None:
    chat: ChatController = st.session_state.chat
    if chat.is_recording:
        st.info(f"🎙️ {chat.input_value or '...'}")
    elif chat.transcribed:
        # recording ended on its own; rerun so the composer picks up the transcript
        st.rerun()


def _render_error(chat: ChatController) -> None:
    error = chat.error
    if error is None or error.surface is not ErrorSurface.BANNER:
        return
    banner, close = st.columns([12, 1])
    banner.error(error.message)
    close.button("✕", key="dismiss_error", on_click=chat.clear_error)


def _render_composer(chat: ChatController) -> None:
    language = chat.language
    st.button(
        "⏹️ Stop" if chat.is_recording else "🎙️ Speak",
        on_click=_on_toggle_recording,
        type="primary" if chat.is_recording else "secondary",
    )
    with st.form("composer", clear_on_submit=False, border=True):
        st.text_input(
            "Claim",
            key="draft",
            placeholder=t("placeholder", language),
            label_visibility="collapsed",
        )
        st.file_uploader(
            "Image",
            type=["png", "jpg", "jpeg", "webp"],
            key=f"upload_{st.session_state.upload_key}",
        )
        st.form_submit_button(
            t("check_button", language), on_click=_on_submit, disabled=chat.pending
        )


def _process_pending(runtime: Runtime, chat: ChatController) -> None:
    action = st.session_state.pending_action
    if action is None:
        return
    st.session_state.pending_action = None
    kind, text = action
    with st.spinner(t("typing", chat.language)):
        if kind == "quick_check":
            runtime.loop.run(chat.quick_check())
        else:
            runtime.loop.run(chat.submit(text))
    st.rerun()


def _get_custom_css() -> str:
    """Get custom CSS for the application."""
    return """
<style>
    .main > div {
        max-width: 1000px;
        margin: 0 auto;
    }
    .verdict-caption {
        font-size: 10px;
        font-weight: 800;
        letter-spacing: 0.2em;
        text-transform: uppercase;
        color: #94a3b8;
    }
    .verdict {
        font-weight: 900;
        font-size: 1.5rem;
        padding: 0.25rem 0;
    }
    .verdict.true { color: #059669; }
    .verdict.false { color: #e11d48; }
    .verdict.misleading, .verdict.unverified { color: #d97706; }
    .bullet {
        border-left: 2px solid #dbeafe;
        padding: 0.25rem 0 0.25rem 1.25rem;
        margin-bottom: 0.75rem;
    }
    .entity { color: #2563eb; }
    .sources a.source {
        display: inline-block;
        border: 1px solid #f1f5f9;
        border-radius: 1rem;
        padding: 0.4rem 0.9rem;
        margin: 0 0.5rem 0.5rem 0;
        font-size: 0.8rem;
        font-weight: 700;
        text-decoration: none;
    }
</style>
"""


def create_app() -> None:
    """Create and run the Streamlit application."""
    st.set_page_config(
        page_title="SachCheck",
        page_icon="🔍",
        layout="centered",
        initial_sidebar_state="collapsed",
    )
    st.markdown(_get_custom_css(), unsafe_allow_html=True)

    runtime = _get_runtime()
    chat = _initialize_session_state(runtime)

    _render_sidebar(chat)
    _render_header(chat)
    if chat.key_missing:
        _render_credential_prompt()
    _render_chat_history(chat)
    _process_pending(runtime, chat)
    _render_error(chat)
    _render_live_transcript()
    _render_composer(chat)


# Main entry point
if __name__ == "__main__":
    create_app()
