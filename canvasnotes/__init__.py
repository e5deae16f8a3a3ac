"""
Canvas Notes Application.

- backend/: Note store, service, RPC API, database, configuration
- canvas/: Client-side canvas interaction model and RPC client (httpx)
- cli/: Command-line client (Typer + Rich)
"""
