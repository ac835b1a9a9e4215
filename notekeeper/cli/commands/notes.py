"""
Note Commands.

Create, edit, pin, tag, search and unlock notes. Every command opens the
notes store, performs one action, prints the store's notifications and
exits non-zero if the action failed.

Note ids may be abbreviated to any unique prefix.
"""

import asyncio
from collections.abc import Awaitable, Callable

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from notekeeper.backend.core.exceptions import ApplicationError, NotFoundError, ValidationError
from notekeeper.backend.schemas.note import NoteCreate, NoteRecord, NoteUpdate
from notekeeper.backend.services import presentation
from notekeeper.backend.services.notifications import Notification
from notekeeper.backend.services.store import NotesStore
from notekeeper.cli.session import open_store

app = typer.Typer(help="Create, edit and search notes")
console = Console()

StoreAction = Callable[[NotesStore], Awaitable[bool]]


@app.callback()
def main(
    ctx: typer.Context,
    token: str = typer.Option(
        None,
        "--token",
        envvar="NOTEKEEPER_TOKEN",
        help="Bearer token; selects the database backend for that user",
    ),
) -> None:
    """Work with notes in local storage or, with a token, in the database."""
    ctx.obj = {"token": token}


def _run(ctx: typer.Context, action: StoreAction) -> None:
    """Open the store, run one action, render notifications, set exit code."""
    token = (ctx.obj or {}).get("token")

    async def runner() -> bool:
        async with open_store(token) as store:
            if any(n.is_error for n in store.notifier.pending):
                _render_notifications(store.notifier.drain())
                return False
            ok = await action(store)
            _render_notifications(store.notifier.drain())
            return ok

    try:
        ok = asyncio.run(runner())
    except ApplicationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)
    except PydanticValidationError as e:
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            console.print(f"[red]Invalid {field}: {error['msg']}[/red]")
        raise typer.Exit(2)

    if not ok:
        raise typer.Exit(1)


def _render_notifications(notifications: list[Notification]) -> None:
    for notification in notifications:
        style = "red" if notification.is_error else "green"
        console.print(f"[{style}]{notification.title}[/{style}] [dim]{notification.description}[/dim]")


def _resolve(store: NotesStore, ref: str) -> NoteRecord:
    """Find a note by full id or unique id prefix."""
    exact = store.find(ref)
    if exact is not None:
        return exact

    candidates = [note for note in store.notes if note.id.startswith(ref)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise NotFoundError(f"No note with id {ref!r}")
    raise ValidationError(f"Id prefix {ref!r} matches {len(candidates)} notes")


def _resolving(action: Callable[[NotesStore, NoteRecord], Awaitable[bool]], ref: str) -> StoreAction:
    """Wrap an action so that id lookup failures are shown like store errors."""

    async def wrapped(store: NotesStore) -> bool:
        try:
            note = _resolve(store, ref)
        except ApplicationError as e:
            store.notifier.error("Note not found", e)
            return False
        return await action(store, note)

    return wrapped


def _note_table(notes: list[NoteRecord], store: NotesStore) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Tags", style="magenta")
    table.add_column("Preview", style="dim")
    table.add_column("Updated", no_wrap=True)

    for note in notes:
        markers = ("📌 " if note.is_pinned else "") + ("🔒 " if note.is_protected else "")
        preview = (
            Text(presentation.preview_text(note.content, 60))
            if store.is_unlocked(note.id)
            else Text("locked", style="italic")
        )
        table.add_row(
            note.id[:8],
            Text(markers + presentation.display_title(note.title)),
            Text(presentation.tag_summary(note.tags)),
            preview,
            presentation.relative_date(note.updated_at),
        )
    return table


@app.command("list")
def list_notes(
    ctx: typer.Context,
    query: str = typer.Option("", "--query", "-q", help="Search title, content and tags"),
) -> None:
    """
    List notes, pinned first, then most recently updated.

    Examples:
        cli.py notes list
        cli.py notes list -q milk
    """

    async def action(store: NotesStore) -> bool:
        notes = store.search(query)
        if not notes:
            if query.strip():
                console.print(f"[yellow]No notes match {query!r}[/yellow]")
            else:
                console.print("[yellow]No notes yet. Create one with: cli.py notes add[/yellow]")
            return True
        console.print(_note_table(notes, store))
        console.print(f"[dim]{len(notes)} of {len(store.notes)} notes[/dim]")
        return True

    _run(ctx, action)


@app.command()
def show(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note id or unique prefix"),
    password: str = typer.Option(None, "--password", "-p", help="Password for a protected note"),
) -> None:
    """Show a note. Protected notes need --password."""

    async def action(store: NotesStore, note: NoteRecord) -> bool:
        if note.is_protected:
            if password is None:
                console.print("[yellow]This note is password protected. Use --password.[/yellow]")
                return False
            if not await store.unlock(note.id, password):
                return False

        opened = store.open_note(note.id)
        if opened is None:
            return False

        subtitle = f"{presentation.character_count(opened.content)} characters"
        if opened.tags:
            subtitle += " · " + ", ".join(opened.tags)
        console.print(
            Panel(
                Text(presentation.strip_markup(opened.content) or "empty"),
                title=Text(presentation.display_title(opened.title)),
                subtitle=Text(subtitle),
            )
        )
        console.print(
            f"[dim]id {opened.id} · created {opened.created_at:%Y-%m-%d %H:%M} · "
            f"updated {presentation.relative_date(opened.updated_at)}[/dim]"
        )
        return True

    _run(ctx, _resolving(action, note_id))


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t", help="Note title"),
    content: str = typer.Option("", "--content", "-c", help="Note body (HTML allowed)"),
    tags: list[str] = typer.Option(None, "--tag", help="Tag, repeatable"),
    pin: bool = typer.Option(False, "--pin", help="Pin the note"),
    password: str = typer.Option(None, "--password", "-p", help="Protect the note with a password"),
) -> None:
    """
    Create a note.

    Examples:
        cli.py notes add -t Groceries -c "<p>milk</p>" --tag home
        cli.py notes add -t Diary -p secret
    """

    async def action(store: NotesStore) -> bool:
        note = await store.create(
            NoteCreate(
                title=title,
                content=content,
                tags=tags or [],
                is_pinned=pin,
                password=password,
            )
        )
        if note is None:
            return False
        console.print(f"[cyan]{note.id}[/cyan]")
        return True

    _run(ctx, action)


@app.command()
def edit(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note id or unique prefix"),
    title: str = typer.Option(None, "--title", "-t", help="New title"),
    content: str = typer.Option(None, "--content", "-c", help="New body"),
    tags: list[str] = typer.Option(None, "--tag", help="Replace tags, repeatable"),
    password: str = typer.Option(None, "--password", "-p", help="Set a new password"),
    clear_password: bool = typer.Option(False, "--clear-password", help="Remove password protection"),
) -> None:
    """Edit a note. Only the given options change."""
    if password is not None and clear_password:
        console.print("[red]Use either --password or --clear-password, not both[/red]")
        raise typer.Exit(2)

    changes: dict = {}
    if title is not None:
        changes["title"] = title
    if content is not None:
        changes["content"] = content
    if tags:
        changes["tags"] = tags
    if password is not None:
        changes["password"] = password
    if clear_password:
        changes["password"] = ""

    async def action(store: NotesStore, note: NoteRecord) -> bool:
        return await store.update(note.id, NoteUpdate(**changes)) is not None

    _run(ctx, _resolving(action, note_id))


@app.command("rm")
def remove(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note id or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a note permanently."""

    async def action(store: NotesStore, note: NoteRecord) -> bool:
        if not yes and not typer.confirm(
            f"Delete {presentation.display_title(note.title)!r}? This cannot be undone."
        ):
            console.print("[dim]Cancelled[/dim]")
            return True
        return await store.delete(note.id)

    _run(ctx, _resolving(action, note_id))


@app.command()
def pin(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note id or unique prefix"),
) -> None:
    """Pin or unpin a note."""

    async def action(store: NotesStore, note: NoteRecord) -> bool:
        if not await store.toggle_pin(note.id):
            return False
        state = "Pinned" if store.find(note.id).is_pinned else "Unpinned"
        console.print(f"[green]{state}[/green] {presentation.display_title(note.title)}")
        return True

    _run(ctx, _resolving(action, note_id))


@app.command()
def tag(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note id or unique prefix"),
    name: str = typer.Argument(..., help="Tag to add"),
) -> None:
    """Add a tag to a note."""

    async def action(store: NotesStore, note: NoteRecord) -> bool:
        updated = await store.add_tag(note.id, name)
        if updated is None:
            return False
        console.print(f"Tags: [magenta]{', '.join(updated.tags)}[/magenta]")
        return True

    _run(ctx, _resolving(action, note_id))


@app.command()
def untag(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note id or unique prefix"),
    name: str = typer.Argument(..., help="Tag to remove"),
) -> None:
    """Remove a tag from a note."""

    async def action(store: NotesStore, note: NoteRecord) -> bool:
        updated = await store.remove_tag(note.id, name)
        if updated is None:
            return False
        console.print(f"Tags: [magenta]{', '.join(updated.tags) or '-'}[/magenta]")
        return True

    _run(ctx, _resolving(action, note_id))
