"""
Auth Commands.

Issue bearer tokens for the database-backed notes variant.
"""

from datetime import timedelta

import typer
from rich.console import Console

from notekeeper.backend.core.config import get_settings

app = typer.Typer(help="Authentication helpers")
console = Console()


@app.command()
def token(
    user: str = typer.Option(..., "--user", "-u", help="User id to put in the token"),
    days: int = typer.Option(None, "--days", help="Lifetime in days (default from security.yaml)"),
) -> None:
    """
    Print an access token for a user.

    Examples:
        cli.py auth token --user alice
        export NOTEKEEPER_TOKEN=$(cli.py auth token -u alice)
    """
    from notekeeper.backend.core.security import create_access_token

    if not get_settings().jwt_secret:
        console.print("[red]Error: JWT_SECRET is not set in config/.env[/red]")
        raise typer.Exit(1)

    expires = timedelta(days=days) if days else None
    typer.echo(create_access_token({"sub": user}, expires_delta=expires))
