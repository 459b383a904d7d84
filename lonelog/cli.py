"""
Command line interface for inspecting Lonelog documents.

Commands:
    lonelog parse FILE [--json]
    lonelog highlight FILE [--config PATH] [--editor]
    lonelog tokens FILE
    lonelog suggest FILE --line N [--column C]
    lonelog scenes FILE
"""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import cyclopts
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lonelog.config import load_config
from lonelog.exceptions import LonelogError
from lonelog.highlight import highlight
from lonelog.notation import (
    NotationParser,
    SuggestionEngine,
    compose,
    next_session_number,
    parse_sessions,
    read_document,
    tokenize,
)

console = Console()

app = cyclopts.App(
    name="lonelog",
    help="Inspect Lonelog notation: story elements, highlighting and completions",
)

VerboseFlag = Annotated[
    bool, cyclopts.Parameter(name=["--verbose", "-v"], help="Enable verbose logging")
]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(message: str) -> int:
    console.print(f"[red]Error: {escape(message)}[/red]")
    return 1


def _mentions(mentions) -> str:
    return ", ".join(str(line + 1) for line in mentions)


@app.command(name="parse")
def parse_file(
    path: Annotated[Path, cyclopts.Parameter(help="Document to parse")],
    as_json: Annotated[
        bool, cyclopts.Parameter(name="--json", help="Print JSON instead of tables")
    ] = False,
    verbose: VerboseFlag = False,
) -> int:
    """List the PCs, NPCs, locations, threads and progress elements of a document."""
    _setup_logging(verbose)
    try:
        document = NotationParser().parse(read_document(path))
    except LonelogError as e:
        return _fail(str(e))

    if as_json:
        console.print_json(json.dumps(document.to_dict()))
        return 0

    if document.is_empty():
        console.print("[yellow]No story elements found.[/yellow]")
        return 0

    for title, entities in (
        ("PCs", document.pcs),
        ("NPCs", document.npcs),
        ("Locations", document.locations),
    ):
        if not entities:
            continue
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Tags")
        table.add_column("Lines", justify="right")
        for entity in sorted(entities.values(), key=lambda e: e.name.casefold()):
            table.add_row(
                escape(entity.name), escape(", ".join(entity.tags)), _mentions(entity.mentions)
            )
        console.print(table)

    if document.threads:
        table = Table(title="Threads")
        table.add_column("Name", style="cyan")
        table.add_column("State", style="yellow")
        table.add_column("Lines", justify="right")
        for thread in sorted(document.threads.values(), key=lambda t: t.name.casefold()):
            table.add_row(escape(thread.name), escape(thread.state), _mentions(thread.mentions))
        console.print(table)

    if document.progress:
        table = Table(title="Progress")
        table.add_column("Kind", style="magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Value", justify="right")
        table.add_column("Line", justify="right")
        for item in document.progress:
            value = str(item.current) if item.max is None else f"{item.current}/{item.max}"
            if item.is_complete:
                value = f"[green]{value}[/green]"
            table.add_row(item.kind.value, escape(item.name), value, str(item.line + 1))
        console.print(table)

    return 0


@app.command(name="highlight")
def highlight_file(
    path: Annotated[Path, cyclopts.Parameter(help="Document to highlight")],
    config: Annotated[
        Optional[Path], cyclopts.Parameter(help="YAML file with highlight colors")
    ] = None,
    editor: Annotated[
        bool,
        cyclopts.Parameter(
            name="--editor", help="Honor the editor toggle instead of the reading one"
        ),
    ] = False,
    verbose: VerboseFlag = False,
) -> int:
    """Print a document with notation colored by token type."""
    _setup_logging(verbose)
    try:
        settings = load_config(config)
        text = read_document(path)
    except LonelogError as e:
        return _fail(str(e))

    for line in highlight(text, settings, editor=editor):
        console.print(line, highlight=False, soft_wrap=True)
    return 0


@app.command(name="tokens")
def tokens_file(
    path: Annotated[Path, cyclopts.Parameter(help="Document to tokenize")],
    verbose: VerboseFlag = False,
) -> int:
    """Dump the token spans of every line."""
    _setup_logging(verbose)
    try:
        text = read_document(path)
    except LonelogError as e:
        return _fail(str(e))

    for number, tokens in enumerate(tokenize(text), start=1):
        spans = " ".join(
            f"{token.type.value}[{token.start}:{token.end}]" for token in tokens
        )
        console.print(f"{number}: {spans}", highlight=False, markup=False)
    return 0


@app.command(name="suggest")
def suggest_file(
    path: Annotated[Path, cyclopts.Parameter(help="Document holding the cursor")],
    line: Annotated[int, cyclopts.Parameter(help="Cursor line (1-based)")],
    column: Annotated[
        Optional[int],
        cyclopts.Parameter(help="Cursor column (0-based, defaults to end of line)"),
    ] = None,
    verbose: VerboseFlag = False,
) -> int:
    """Show completions for a partially typed tag at a cursor position."""
    _setup_logging(verbose)
    try:
        text = read_document(path)
    except LonelogError as e:
        return _fail(str(e))

    lines = text.split("\n")
    if line < 1 or line > len(lines):
        return _fail(f"line {line} is outside the document (1-{len(lines)})")
    current = lines[line - 1]

    try:
        result = SuggestionEngine().complete(
            text, current, len(current) if column is None else column
        )
    except LonelogError as e:
        return _fail(str(e))

    if result is None:
        console.print("[yellow]Cursor is not inside a completable tag.[/yellow]")
        return 0

    trigger, candidates = result
    if not candidates:
        console.print(f"[yellow]No {trigger.kind.value} matches '{escape(trigger.query)}'.[/yellow]")
        return 0

    table = Table(title=f"Suggestions ({trigger.kind.value})")
    table.add_column("Name", style="cyan")
    table.add_column("Details")
    table.add_column("Inserts", style="green")
    for candidate in candidates:
        completion = compose(candidate, trigger.is_reference)
        table.add_row(
            escape(candidate.name), escape(candidate.display_text), escape(completion.text)
        )
    console.print(table)
    return 0


@app.command(name="scenes")
def scenes_file(
    path: Annotated[Path, cyclopts.Parameter(help="Document to outline")],
    verbose: VerboseFlag = False,
) -> int:
    """Outline the sessions and scenes of a document."""
    _setup_logging(verbose)
    try:
        text = read_document(path)
    except LonelogError as e:
        return _fail(str(e))

    sessions = parse_sessions(text)
    if not sessions:
        console.print("[yellow]No sessions found.[/yellow]")
        return 0

    total = sum(len(s.scenes) for s in sessions)
    console.print(f"[bold]{len(sessions)} sessions, {total} scenes[/bold]")
    for session in sessions:
        date = f" [dim]({session.date})[/dim]" if session.date else ""
        console.print(f"[cyan]{escape(session.title)}[/cyan]{date} [dim]line {session.line + 1}[/dim]")
        for scene in session.scenes:
            console.print(
                f"  {escape(scene.number)} {escape(scene.context)} [dim]line {scene.line + 1}[/dim]",
                highlight=False,
            )
    console.print(f"[dim]Next session: {next_session_number(text)}[/dim]")
    return 0


def main():
    load_dotenv()
    sys.exit(app())
