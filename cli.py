#!/usr/bin/env python3
"""
MyNotes CLI.

Scriptable front end to the note store. Every command opens the
configured database, creates the tables if needed, seeds the default
palette and notes on first run, and closes the database when done.

Usage:
    python cli.py --help
    python cli.py init
    python cli.py list
    python cli.py list --trash
    python cli.py show 1
    python cli.py add --title "Dentist" --content "0812345678" --category Phone
    python cli.py edit 3 --title "Dentist (new)"
    python cli.py check 4 --uncheck
    python cli.py trash 3
    python cli.py restore 3
    python cli.py purge 3
    python cli.py colors
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

PROJECT_ROOT = Path(__file__).parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mynotes.core.config import get_app_config, validate_project_root  # noqa: E402
from mynotes.core.database import dispose_engine, init_db  # noqa: E402
from mynotes.core.exceptions import ApplicationError  # noqa: E402
from mynotes.core.logging import get_logger, log_with_source, setup_logging  # noqa: E402
from mynotes.schemas.color import ColorRead  # noqa: E402
from mynotes.schemas.note import NoteDraft, NoteRead  # noqa: E402
from mynotes.services.note_session import NoteSession  # noqa: E402
from mynotes.services.note_store import NoteStore  # noqa: E402

console = Console()
logger = get_logger("cli")


def _run(action: Callable[[NoteStore], Awaitable[Any]]) -> Any:
    """Open the store, run one action against it, close the store."""

    async def runner() -> Any:
        try:
            await init_db()
            store = NoteStore()
            if get_app_config().features.seed_defaults_enabled:
                await store.seed_if_empty()
            return await action(store)
        finally:
            await dispose_engine()

    try:
        return asyncio.run(runner())
    except ApplicationError as e:
        log_with_source(logger, "cli", "debug", "Command failed", code=e.code)
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)


def _notes_table(title: str, notes: list[NoteRead], colors: list[ColorRead]) -> Table:
    hex_by_id = {color.id: color.hex for color in colors}

    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Content")
    table.add_column("Category", style="magenta")
    table.add_column("Color")
    table.add_column("Done", justify="center")

    for note in notes:
        hex_value = hex_by_id.get(note.color_id)
        swatch = f"[on {hex_value}]    [/] {hex_value}" if hex_value else str(note.color_id)
        done = ("x" if note.is_checked_off else " ") if note.can_be_checked_off else ""
        table.add_row(str(note.id), note.title, note.content, note.category, swatch, done)
    return table


def _print_note(note: NoteRead | NoteDraft) -> None:
    for field, value in note.model_dump().items():
        console.print(f"[bold]{field}[/bold]: {value}")


@click.group()
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
def main(verbose: bool, debug: bool) -> None:
    """
    MyNotes command line.

    \b
    Examples:
        python cli.py list
        python cli.py add --title "Ter" --content "0816353115" --category Home
        python cli.py trash 2
        python cli.py restore 2
    """
    validate_project_root()

    if debug:
        setup_logging(level="DEBUG")
    elif verbose:
        setup_logging(level="INFO")
    else:
        setup_logging(level="WARNING")


@main.command()
def init() -> None:
    """Create the database and seed the default notes."""

    async def action(store: NoteStore) -> int:
        return len(await store.list_active())

    count = _run(action)
    console.print(f"Database ready ({count} active notes).")


@main.command("list")
@click.option("--trash", is_flag=True, help="List notes in the trash instead.")
def list_notes(trash: bool) -> None:
    """List active notes, newest first."""

    async def action(store: NoteStore) -> tuple[list[NoteRead], list[ColorRead]]:
        notes = await store.list_trash() if trash else await store.list_active()
        return notes, await store.list_colors()

    notes, colors = _run(action)
    console.print(_notes_table("Trash" if trash else "Notes", notes, colors))


@main.command()
@click.argument("note_id", type=int)
def show(note_id: int) -> None:
    """Show every field of one note."""

    async def action(store: NoteStore) -> NoteRead | None:
        return await store.get(note_id)

    note = _run(action)
    if note is None:
        console.print(f"[red]Error:[/red] Note {note_id} not found")
        sys.exit(1)
    _print_note(note)


def _draft_options(func: Callable) -> Callable:
    options = [
        click.option("--title", default=None, help="Note title."),
        click.option("--content", default=None, help="Note content, e.g. a phone number."),
        click.option("--category", default=None, help="Category label, e.g. Phone or Home."),
        click.option("--color", "color_id", type=int, default=None, help="Palette color id."),
        click.option(
            "--checkable/--not-checkable",
            "can_be_checked_off",
            default=None,
            help="Whether the note is a checklist item.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


async def _edit_and_save(store: NoteStore, note_id: int | None, fields: dict[str, Any]) -> NoteDraft:
    session = NoteSession(store)
    await session.load_draft(note_id)
    for field, value in fields.items():
        if value is not None:
            await session.update_draft_field(field, value)
    return await session.save()


@main.command()
@_draft_options
def add(**fields: Any) -> None:
    """Create a note."""

    async def action(store: NoteStore) -> NoteDraft:
        return await _edit_and_save(store, None, fields)

    note = _run(action)
    console.print(f"Created note {note.id}.")


@main.command()
@click.argument("note_id", type=int)
@_draft_options
def edit(note_id: int, **fields: Any) -> None:
    """Change fields of an existing note."""

    async def action(store: NoteStore) -> NoteDraft:
        return await _edit_and_save(store, note_id, fields)

    note = _run(action)
    _print_note(note)


@main.command()
@click.argument("note_id", type=int)
@click.option("--uncheck", is_flag=True, help="Clear the check mark instead.")
def check(note_id: int, uncheck: bool) -> None:
    """Check off a checklist note."""

    async def action(store: NoteStore) -> NoteRead:
        return await store.set_checked_off(note_id, not uncheck)

    note = _run(action)
    state = "checked" if note.is_checked_off else "unchecked"
    console.print(f"Note {note.id} {state}.")


@main.command()
@click.argument("note_id", type=int)
def trash(note_id: int) -> None:
    """Move a note to the trash."""

    async def action(store: NoteStore) -> NoteDraft:
        session = NoteSession(store)
        await session.load_draft(note_id)
        return await session.move_to_trash()

    _run(action)
    console.print(f"Moved note {note_id} to the trash.")


@main.command()
@click.argument("note_ids", type=int, nargs=-1, required=True)
def restore(note_ids: tuple[int, ...]) -> None:
    """Restore notes from the trash."""

    async def action(store: NoteStore) -> list[NoteRead]:
        return await store.restore(list(note_ids))

    restored = _run(action)
    console.print(f"Restored {len(restored)} note(s).")


@main.command()
@click.argument("note_ids", type=int, nargs=-1, required=True)
@click.confirmation_option(prompt="Permanently delete these notes?")
def purge(note_ids: tuple[int, ...]) -> None:
    """Permanently delete notes."""

    async def action(store: NoteStore) -> None:
        await store.delete_many(list(note_ids))

    _run(action)
    console.print(f"Deleted {len(note_ids)} note(s).")


@main.command()
def colors() -> None:
    """List the color palette."""

    async def action(store: NoteStore) -> list[ColorRead]:
        return await store.list_colors()

    table = Table(title="Colors")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Hex")
    for color in _run(action):
        table.add_row(str(color.id), color.name, f"[on {color.hex}]    [/] {color.hex}")
    console.print(table)


if __name__ == "__main__":
    main()
