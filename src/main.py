"""Entry point — wires Config → TranscriptionPipeline behind a Typer CLI."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from src.config import Config
from src.constants import (
    CLI_NAME,
    DEFAULT_REFINEMENT_PROMPT,
    MSG_CLI_MISSING_KEY,
    MSG_CLI_NO_SAVED,
    MSG_CLI_WROTE,
)
from src.errors import MissingCredentialError, PipelineError, describe_error
from src.pipeline import TranscriptionPipeline
from src.recovery import RecoveryStore

app = typer.Typer(
    name=CLI_NAME,
    help="Transcribe audio notes and optionally clean them up with an LLM",
    no_args_is_help=True,
)

console = Console()


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(console=Console(stderr=True), rich_tracebacks=True))


@app.command()
def transcribe(
    audio: Path = typer.Argument(..., help="Audio file to transcribe (max 25 MB)"),
    refine: bool = typer.Option(False, "--refine", "-r", help="Clean up the transcript with GPT"),
    prompt: Optional[str] = typer.Option(None, "--prompt", "-p", help="Instruction for the refinement step"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the final text to this file"),
):
    """Transcribe AUDIO, optionally refining the result."""
    config = Config.from_env()
    _setup_logging(config.log_level)
    pipeline = TranscriptionPipeline(config)

    try:
        outcome = asyncio.run(
            pipeline.submit(
                audio,
                requires_refinement=refine,
                refinement_prompt=prompt or DEFAULT_REFINEMENT_PROMPT,
                status_sink=lambda message: console.print(f"[dim]{message}[/dim]"),
            )
        )
    except MissingCredentialError:
        console.print(f"[red]{MSG_CLI_MISSING_KEY}[/red]")
        raise typer.Exit(2)
    except PipelineError as exc:
        console.print(f"[red]Error:[/red] {describe_error(exc)}")
        raise typer.Exit(1)

    match output:
        case None:
            match outcome.original_text:
                case None:
                    pass
                case original:
                    console.print(Panel(original, title="Original transcription"))
            console.print(Panel(outcome.final_text, title="Result"))
        case path:
            path.write_text(outcome.final_text, encoding="utf-8")
            console.print(MSG_CLI_WROTE % path)


@app.command()
def saved():
    """List transcripts preserved after failed refinements, newest first."""
    config = Config.from_env()
    store = RecoveryStore(config.saved_transcriptions_dir)
    files = store.list_saved()
    match files:
        case []:
            console.print(MSG_CLI_NO_SAVED)
        case _:
            table = Table(title=str(store.directory))
            table.add_column("File")
            table.add_column("Size", justify="right")
            for path in files:
                table.add_row(path.name, f"{path.stat().st_size} B")
            console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
