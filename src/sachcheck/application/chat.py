"""Conversation state shared by the chat interfaces."""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..domain.errors import ErrorKind, SachCheckError
from ..domain.models import (
    ChatMessage,
    ChatTranscript,
    FactCheckResult,
    ImageAttachment,
    Language,
    Role,
)
from ..strings import t
from ..utils.sanitization import sanitize_query
from .audio_session import SessionFactory, VoiceInputController
from .fact_checker import FactCheckerService

logger = logging.getLogger(__name__)

CREDENTIAL_PROMPT_MESSAGE = "API Key connection lost. Please connect your key again."
GENERIC_ERROR_MESSAGE = "Something went wrong. Please check your internet."


class ErrorSurface(str, Enum):
    CREDENTIAL_PROMPT = "credential_prompt"
    BANNER = "banner"


@dataclass(frozen=True)
class UIError:
    """The single error currently shown to the user."""

    surface: ErrorSurface
    kind: ErrorKind
    message: str


def classify_error(error: SachCheckError) -> UIError:
    """Choose how an error is presented, by its kind."""
    if error.kind is ErrorKind.CREDENTIAL:
        return UIError(ErrorSurface.CREDENTIAL_PROMPT, error.kind, CREDENTIAL_PROMPT_MESSAGE)
    if error.kind is ErrorKind.DEVICE:
        return UIError(ErrorSurface.BANNER, error.kind, error.message)
    if error.kind in (ErrorKind.TRANSPORT, ErrorKind.PARSE):
        return UIError(ErrorSurface.BANNER, error.kind, f"Error: {error.message or GENERIC_ERROR_MESSAGE}")
    raise ValueError(f"Unhandled error kind: {error.kind}")


def quick_check_prompt(language: Language, today: Optional[date] = None) -> str:
    """Prompt asking for today's headlines from Uruwa Bazar Daily Newz."""
    today = today or date.today()
    day = f"{today.day} {today.strftime('%B %Y')}"
    if language is Language.ENGLISH:
        return f"Today's ({day}) latest news from Uruwa Bazar Daily Newz."
    if language is Language.BHOJPURI:
        return f"आज ({day}) के उरुवा बाज़ार डेली न्यूज़ के ताज़ा खबर बताईं।"
    return f"आज ({day}) की उरुवा बाज़ार डेली न्यूज़ की ताज़ा खबरें दिखाएं।"


def welcome_message(language: Language) -> ChatMessage:
    return ChatMessage(id="welcome", role=Role.ASSISTANT, content=t("welcome", language))


class ChatController:
    """Holds one user's conversation, pending flag, input field and error state.

    Interfaces render from this object and forward user actions to it.
    """

    def __init__(
        self,
        service: FactCheckerService,
        language: Language = Language.HINDI,
        session_factory: Optional[SessionFactory] = None,
        has_credential: bool = True,
    ) -> None:
        self.service = service
        self.language = language
        self.transcript = ChatTranscript([welcome_message(language)])
        self.input_value = ""
        self.transcribed = False
        self.selected_image: Optional[ImageAttachment] = None
        self.pending = False
        self.error: Optional[UIError] = None
        self.key_missing = not has_credential
        self.voice: Optional[VoiceInputController] = (
            VoiceInputController(session_factory, on_transcript=self._set_input)
            if session_factory is not None
            else None
        )

    def _set_input(self, text: str) -> None:
        self.input_value = text
        self.transcribed = True

    @property
    def is_recording(self) -> bool:
        return self.voice is not None and self.voice.is_recording

    def accept_draft(self, draft: str) -> None:
        """Take typed text as input unless voice input has written to it since."""
        if self.is_recording or self.transcribed:
            return
        self.input_value = draft

    def draft_after_recording(self, draft: str) -> str:
        """The text a composer should show once recording has ended."""
        if self.is_recording or not self.transcribed:
            return draft
        self.transcribed = False
        return self.input_value

    def set_language(self, language: Language) -> None:
        """Switch language and start a new conversation in it."""
        if language is self.language:
            return
        self.language = language
        self.transcript = ChatTranscript([welcome_message(language)])

    def clear_error(self) -> None:
        self.error = None

    def report(self, error: SachCheckError) -> UIError:
        """Show ``error``, replacing whatever error was shown before."""
        ui_error = classify_error(error)
        if ui_error.surface is ErrorSurface.CREDENTIAL_PROMPT:
            self.key_missing = True
        self.error = ui_error
        return ui_error

    def credential_connected(
        self,
        service: Optional[FactCheckerService] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        """Clear the credential prompt, switching to services built with the new key."""
        if service is not None:
            self.service = service
        if session_factory is not None and not self.is_recording:
            self.voice = VoiceInputController(session_factory, on_transcript=self._set_input)
        self.key_missing = False
        self.error = None

    async def submit(
        self,
        text: Optional[str] = None,
        image: Optional[ImageAttachment] = None,
    ) -> Optional[FactCheckResult]:
        """Verify the given text, or the input field and selected image.

        Returns:
            The verdict, or None when nothing was submitted or the check failed.
        """
        if self.pending:
            logger.debug("Submission ignored while a check is pending")
            return None
        if self.is_recording:
            await self.stop_recording()

        custom = text is not None
        query = sanitize_query(text if custom else self.input_value)
        attachment = image or self.selected_image
        if not query and attachment is None:
            return None

        self.transcript.append(ChatMessage(role=Role.USER, content=query, image=attachment))
        if not custom:
            self.input_value = ""
            self.transcribed = False
        self.selected_image = None
        self.pending = True
        self.error = None

        try:
            result = await self.service.fact_check(query, self.language, attachment)
        except SachCheckError as e:
            logger.error("Verification error details: %s", e)
            self.report(e)
            return None
        finally:
            self.pending = False

        self.transcript.append(ChatMessage(role=Role.ASSISTANT, result=result))
        return result

    async def quick_check(self, today: Optional[date] = None) -> Optional[FactCheckResult]:
        return await self.submit(quick_check_prompt(self.language, today))

    async def start_recording(self) -> None:
        if self.voice is None:
            return
        self.error = None
        if self.key_missing:
            self.report_credential_missing()
            return
        try:
            await self.voice.start()
        except SachCheckError as e:
            self.report(e)

    async def stop_recording(self) -> str:
        if self.voice is None:
            return self.input_value
        return await self.voice.stop()

    async def toggle_recording(self) -> None:
        if self.is_recording:
            await self.stop_recording()
        else:
            await self.start_recording()

    def report_credential_missing(self) -> None:
        self.key_missing = True
        self.error = UIError(ErrorSurface.CREDENTIAL_PROMPT, ErrorKind.CREDENTIAL, CREDENTIAL_PROMPT_MESSAGE)
