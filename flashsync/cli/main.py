"""
CLI entry point for flashsync.
"""

# Standard library imports
import logging
from pathlib import Path
from typing import List, Optional

# Third-party imports
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# Local application imports
from flashsync.constants import (
    DEFAULT_ANKI_CONNECT_URL,
    DEFAULT_NOTE_TYPE,
    DEFAULT_TAGS,
    DEFAULT_TIMEOUT_SECONDS,
)
from flashsync.document import MarkdownDocument
from flashsync.exceptions import FlashsyncError
from flashsync.frontmatter import get_deck_name
from flashsync.models import SyncConfig, SyncResult
from flashsync.store import AnkiConnectStore
from flashsync.sync import plan_document, sync


console = Console()

app = typer.Typer(
    name="flashsync",
    help="Flashsync: sync one-line Markdown flashcards with Anki.",
    add_completion=False,
    rich_markup_mode="markdown",
)


def _configure_logging(verbose: bool) -> None:
    """Route flashsync log records through rich; DEBUG when verbose."""
    package_logger = logging.getLogger("flashsync")
    package_logger.handlers.clear()
    package_logger.addHandler(
        RichHandler(console=console, show_path=False, markup=False)
    )
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


# Common typer options reused across commands
_files_argument = typer.Argument(  # noqa: B008
    ...,
    help="Markdown files containing `front ::: back` flashcard lines.",
)

_anki_url_option = typer.Option(  # noqa: B008
    DEFAULT_ANKI_CONNECT_URL,
    "--anki-url",
    help="AnkiConnect endpoint. Falls back to FLASHSYNC_ANKI_URL env var.",
    envvar="FLASHSYNC_ANKI_URL",
)

_timeout_option = typer.Option(  # noqa: B008
    DEFAULT_TIMEOUT_SECONDS,
    "--timeout",
    help="Per-request timeout in seconds.",
)


# ---------------------------------------------------------------------------
# Sync helpers & command
# ---------------------------------------------------------------------------


def _report_result(path: Path, result: SyncResult) -> None:
    """
    Print the outcome of one file's sync: counts, skipped duplicates and
    any deletion failure, each on its own line.
    """
    console.print(
        f"[bold green]Synced[/bold green] [cyan]{escape(str(path))}[/cyan] "
        f"→ deck [magenta]{escape(result.deck_name)}[/magenta]: "
        f"{result.summary()}"
    )
    for front in result.skipped_duplicates:
        console.print(
            f"  [yellow]Skipped duplicate:[/yellow] {escape(front)}"
        )
    if result.deleted:
        console.print(
            f"  Deleted notes: {', '.join(map(str, result.deleted))}"
        )
    if result.delete_error:
        console.print(f"  [bold red]{escape(result.delete_error)}[/bold red]")
    if not result.written:
        console.print("  No changes to the file.")


@app.command(name="sync")
def sync_command(
    files: List[Path] = _files_argument,
    anki_url: str = _anki_url_option,
    deck: Optional[str] = typer.Option(  # noqa: B008
        None,
        "--deck",
        help="Deck name. Overrides the `deck` field of each file's frontmatter.",
    ),
    tags: Optional[List[str]] = typer.Option(  # noqa: B008
        None,
        "--tag",
        help="Tag for added notes. Repeatable. Defaults to 'obsidian'.",
    ),
    note_type: str = typer.Option(  # noqa: B008
        DEFAULT_NOTE_TYPE,
        "--note-type",
        help="Anki note type with Front and Back fields.",
    ),
    timeout: float = _timeout_option,
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Show debug logging."
    ),
):
    """
    Sync the flashcards of each file with Anki.

    New cards are added and get a `noteId` comment, existing cards are
    updated, and notes whose cards were removed are deleted. Each file is
    rewritten only when its annotations changed.

    Raises:
        typer.Exit: With code 1 if any file failed to sync.
    """
    _configure_logging(verbose)
    try:
        config = SyncConfig(
            anki_connect_url=anki_url,
            timeout=timeout,
            note_type=note_type,
            tags=set(tags) if tags else set(DEFAULT_TAGS),
        )
    except ValueError as e:
        console.print(
            f"[bold red]Invalid configuration:[/bold red] {escape(str(e))}"
        )
        raise typer.Exit(code=1)

    store = AnkiConnectStore.from_config(config)
    failures = 0
    for path in files:
        try:
            result = sync(
                MarkdownDocument(path),
                store=store,
                config=config,
                deck_name=deck,
            )
        except FlashsyncError as e:
            console.print(
                f"[bold red]Error syncing {escape(str(path))}:[/bold red] "
                f"{escape(str(e))}"
            )
            failures += 1
            continue
        _report_result(path, result)

    if failures:
        console.print(
            f"[bold red]{failures} of {len(files)} file(s) failed.[/bold red]"
        )
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Status command
# ---------------------------------------------------------------------------


def _display_plan(path: Path, text: str) -> None:
    """Render a table of the cards in one file and the action a sync would take."""
    plan = plan_document(text)
    try:
        deck_label = escape(get_deck_name(text))
    except FlashsyncError as e:
        deck_label = f"[red]{escape(str(e))}[/red]"

    table = Table(title=f"{escape(str(path))} (deck: {deck_label})")
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Front", style="white")
    table.add_column("Note ID", style="magenta")
    table.add_column("Action", style="yellow")

    records = sorted(plan.to_add + plan.to_update, key=lambda r: r.line_index)
    for record in records:
        table.add_row(
            str(record.line_index + 1),
            escape(record.front),
            str(record.note_id) if record.is_synced else "-",
            "update" if record.is_synced else "add",
        )
    console.print(table)

    if plan.to_delete:
        console.print(
            "[yellow]Notes to delete:[/yellow] "
            f"{', '.join(map(str, plan.to_delete))}"
        )


@app.command()
def status(files: List[Path] = _files_argument):
    """
    Show what a sync would do for each file, without contacting Anki.
    """
    failures = 0
    for path in files:
        try:
            text = MarkdownDocument(path).read()
        except FlashsyncError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            failures += 1
            continue
        _display_plan(path, text)

    if failures:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Check command
# ---------------------------------------------------------------------------


@app.command()
def check(
    anki_url: str = _anki_url_option,
    timeout: float = _timeout_option,
):
    """
    Verify that AnkiConnect is reachable and report its API version.
    """
    store = AnkiConnectStore(url=anki_url, timeout=timeout)
    try:
        version = store.version()
    except FlashsyncError as e:
        console.print(
            f"[bold red]AnkiConnect unavailable:[/bold red] {escape(str(e))}"
        )
        console.print(
            "Start Anki with the AnkiConnect add-on enabled, "
            "or set FLASHSYNC_ANKI_URL."
        )
        raise typer.Exit(code=1)
    console.print(
        f"[bold green]AnkiConnect is reachable[/bold green] at {anki_url} "
        f"(API version {version})."
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """
    Run the CLI application.

    If an unexpected exception occurs, print a bold red error message to the console and exit the process with status code 1.
    """
    try:
        app()
    except Exception as e:
        console.print(f"[bold red]UNEXPECTED ERROR: {e}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
