"""CLI commands package."""
from src.cli.sessions import sessions_cli

__all__ = ["sessions_cli"]
