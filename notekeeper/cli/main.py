"""
CLI Entry Point.

Typer application that groups the note, auth and server commands.
"""

import typer
from rich.console import Console

from notekeeper.cli.commands import auth_app, notes_app, server_app

app = typer.Typer(
    name="notekeeper",
    help="notekeeper - personal notes from the command line.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(notes_app, name="notes")
app.add_typer(auth_app, name="auth")
app.add_typer(server_app, name="server")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    notekeeper CLI.

    Notes are kept in a local file unless a token selects the database.
    """
    from notekeeper.backend.core.config import validate_project_root
    from notekeeper.backend.core.logging import setup_logging

    validate_project_root()

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")
