"""
CLI Client Module.

Command-line client built with Typer for working with notes on a
running backend.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in the backend
- CLI calls the note procedures through NotesClient (httpx)

Usage:
    python notes_cli.py --help
    python notes_cli.py notes list
    python notes_cli.py health ping
"""
