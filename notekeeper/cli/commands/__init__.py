"""
CLI Commands.

Organized by domain/feature area.
"""

from notekeeper.cli.commands.auth import app as auth_app
from notekeeper.cli.commands.notes import app as notes_app
from notekeeper.cli.commands.server import app as server_app

__all__ = [
    "auth_app",
    "notes_app",
    "server_app",
]
