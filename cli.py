#!/usr/bin/env python3
"""
notekeeper CLI.

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py notes add --title "Groceries" --content "<p>milk</p>" --tag home
    python cli.py notes show 3f2a --password secret
    python cli.py auth token --user alice
    python cli.py server init-db
    python cli.py server start --reload

Options:
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from notekeeper.cli.main import app  # noqa: E402

if __name__ == "__main__":
    app()
