"""
notekeeper.

- backend/: note storage, services, HTTP API, configuration
- cli/: command-line client (Typer + Rich)
"""

__version__ = "0.1.0"
