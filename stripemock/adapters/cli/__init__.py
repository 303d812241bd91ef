"""Command-line interface adapters."""

from .commands import CLICommandHandler

__all__ = ["CLICommandHandler"]
