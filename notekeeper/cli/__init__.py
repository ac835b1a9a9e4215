"""
CLI Client Module.

Command-line client built with Typer and Rich. Note commands drive the
notes store in-process: local JSON storage by default, the relational
backend when a bearer token identifies the user.

Usage:
    python cli.py notes add --title "Groceries" --content "<p>milk</p>" --tag home
    python cli.py notes list --query milk
    NOTEKEEPER_TOKEN=... python cli.py notes list
    python cli.py server start
"""
