"""Command-line interface for SachCheck fact-checking."""

import argparse
import asyncio
import mimetypes
import os
import sys
from pathlib import Path
from typing import List, Optional

# Set UTF-8 encoding for Windows compatibility
if sys.platform == "win32":
    os.environ["PYTHONIOENCODING"] = "utf-8"

from httpx import AsyncClient
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ...application.audio_session import VoiceInputController, record_until
from ...application.factory import Services, create_services
from ...config.logging_setup import init_logging
from ...config.settings import get_settings
from ...domain.errors import ErrorKind, SachCheckError
from ...domain.models import FactCheckResult, ImageAttachment, Language, Verdict
from ...infrastructure.audio.pcm import PLAYBACK_SAMPLE_RATE, pcm16_to_float
from ...infrastructure.http.client import get_async_client
from ...strings import t, verdict_label
from ..formatting import explanation_markdown

console = Console(force_terminal=True, legacy_windows=False)

TEST_STATEMENT = "The Earth is approximately 4.5 billion years old."

_VERDICT_STYLES = {
    Verdict.TRUE: ("green", "[OK]"),
    Verdict.FALSE: ("red", "[X]"),
    Verdict.MISLEADING: ("yellow", "[~]"),
    Verdict.UNVERIFIED: ("dim white", "[?]"),
}


def _create_services(http_client: AsyncClient) -> Services:
    return create_services(get_settings(), http_client=http_client)


def _print_error(message: str, title: str = "Error") -> None:
    console.print(
        Panel(
            f"[red]Error:[/red] {message}",
            title=f"[bold red]{title}[/bold red]",
            border_style="red",
        )
    )


def _print_credential_prompt() -> None:
    console.print(
        Panel(
            "API Key connection lost. Please connect your key again.\n\n"
            "Set [yellow]SACHCHECK_API_KEY[/yellow] (or [yellow]OPENAI_API_KEY[/yellow]) "
            "in the environment or a .env file.",
            title="[bold yellow]Connect Your Account[/bold yellow]",
            border_style="yellow",
            padding=(1, 2),
        )
    )


def _print_header(statement: str, language: Language) -> None:
    console.print(
        Panel(
            Text(statement, style="bold bright_white"),
            title=f"[bold cyan]{t('tagline', language)}[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
    )
    console.print()


def _result_to_dict(result: FactCheckResult, query: str, language: Language) -> dict:
    return {
        "query": query,
        "language": language.value,
        "verdict": result.verdict.value,
        "explanation": result.explanation,
        "sources": [{"title": s.title, "uri": s.uri} for s in result.sources],
    }


def _print_result(result: FactCheckResult, language: Language) -> None:
    """Print a verdict, its explanation and the sources table."""
    color, icon = _VERDICT_STYLES.get(result.verdict, ("white", "[?]"))

    verdict_text = Text()
    verdict_text.append(f"{icon} ", style=f"bold {color}")
    verdict_text.append(verdict_label(result.verdict, language), style=f"bold {color}")
    console.print(Panel(verdict_text, border_style=color, padding=(0, 2)))
    console.print()

    if result.explanation:
        console.print(
            Panel(
                Markdown(explanation_markdown(result.explanation)),
                title="[bold]Explanation[/bold]",
                border_style="blue",
                padding=(1, 2),
            )
        )
        console.print()

    if result.sources:
        table = Table(
            title=f"[bold]{t('sources_title', language)}[/bold]",
            show_header=True,
            header_style="bold magenta",
            border_style="magenta",
            padding=(0, 1),
        )
        table.add_column("#", style="dim", width=3, justify="right")
        table.add_column("Title", style="cyan", no_wrap=False)
        table.add_column("URL", style="dim blue", overflow="fold")
        for i, source in enumerate(result.sources, 1):
            table.add_row(str(i), source.title, source.uri)
        console.print(table)
        console.print()


def _load_image(path: str) -> ImageAttachment:
    file = Path(path)
    mime_type = mimetypes.guess_type(file.name)[0] or "image/jpeg"
    return ImageAttachment.from_bytes(file.read_bytes(), mime_type)


async def _speak(services: Services, result: FactCheckResult) -> None:
    """Read the explanation aloud through the default output device."""
    import sounddevice as sd

    pcm = await services.synthesizer.synthesize(result.explanation)
    if not pcm:
        return
    sd.play(pcm16_to_float(pcm), samplerate=PLAYBACK_SAMPLE_RATE)
    await asyncio.get_running_loop().run_in_executor(None, sd.wait)


async def _record_statement(services: Services) -> str:
    """Record from the microphone until Enter is pressed."""
    controller = VoiceInputController(
        services.session_factory,
        on_transcript=lambda text: console.print(f"[dim]{text}[/dim]"),
    )
    console.print("[cyan]Listening... press Enter to stop.[/cyan]")
    loop = asyncio.get_running_loop()
    return await record_until(controller, lambda: loop.run_in_executor(None, sys.stdin.readline))


async def _fact_check_statement(
    statement: str,
    language: Language,
    json_output: bool = False,
    image_path: Optional[str] = None,
    voice: bool = False,
    speak: bool = False,
) -> int:
    """Fact-check a statement and print results.

    Returns:
        Exit code (0 for success, 1 for error, 2 for a missing or rejected key).
    """
    http_client = get_async_client(get_settings().http_timeout_seconds)
    services = _create_services(http_client)
    try:
        if voice:
            statement = f"{statement} {await _record_statement(services)}".strip()
        image = _load_image(image_path) if image_path else None
        if not statement and image is None:
            _print_error("Statement cannot be empty")
            return 1

        if json_output:
            result = await services.fact_checker.fact_check(statement, language, image)
            console.print_json(data=_result_to_dict(result, statement, language), highlight=False)
            return 0

        _print_header(statement or t("placeholder", language), language)
        with console.status(f"[cyan]{t('typing', language)}[/cyan]", spinner="dots"):
            result = await services.fact_checker.fact_check(statement, language, image)
        _print_result(result, language)

        if speak:
            await _speak(services, result)
        return 0
    except SachCheckError as e:
        code = 2 if e.kind is ErrorKind.CREDENTIAL else 1
        if json_output:
            console.print_json(data={"error": e.message, "kind": e.kind.value if e.kind else None}, highlight=False)
        elif code == 2:
            _print_credential_prompt()
        else:
            _print_error(e.message)
        return code
    except OSError as e:
        if json_output:
            console.print_json(data={"error": str(e), "kind": None}, highlight=False)
        else:
            _print_error(str(e))
        return 1
    finally:
        await http_client.aclose()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sachcheck",
        description="SachCheck - fact-check Indian political and farmer news claims.",
        epilog="Environment: SACHCHECK_API_KEY (or OPENAI_API_KEY) is required.",
    )
    parser.add_argument("statement", nargs="*", help="claim to verify")
    parser.add_argument("--json", action="store_true", help="output the verdict as JSON")
    parser.add_argument(
        "--lang",
        choices=[lang.value for lang in Language],
        type=lambda v: v.strip().title(),
        help="language of the verdict (default: DEFAULT_LANGUAGE or Hindi)",
    )
    parser.add_argument("--image", metavar="PATH", help="image to verify alongside the claim")
    parser.add_argument("--voice", action="store_true", help="dictate the claim through the microphone")
    parser.add_argument("--speak", action="store_true", help="read the explanation aloud")
    parser.add_argument("--test", action="store_true", help="run a test fact-check")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Usage:
        sachcheck <statement>              # Fact-check a statement
        sachcheck --lang English <stmt>    # Verdict in English
        sachcheck --image photo.jpg        # Check an image
        sachcheck --voice                  # Dictate the claim
        sachcheck --json <stmt>            # Output as JSON
        sachcheck --test                   # Run test fact-check

    Returns:
        Exit code.
    """
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    init_logging(settings.log_level)

    language = Language(args.lang) if args.lang else settings.default_language
    statement = TEST_STATEMENT if args.test else " ".join(args.statement).strip()
    if args.test:
        language = Language.ENGLISH

    if not statement and not args.image and not args.voice:
        _print_error("Statement cannot be empty")
        return 1

    return asyncio.run(
        _fact_check_statement(
            statement,
            language,
            json_output=args.json,
            image_path=args.image,
            voice=args.voice,
            speak=args.speak,
        )
    )


if __name__ == "__main__":
    sys.exit(main())
