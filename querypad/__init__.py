"""querypad - context-aware completion and a command palette for query documents.

Completes table names, chart types, server names and code fences while you
type, and gathers every available action into one searchable palette.
"""

__version__ = "0.1.0"

from . import engine, runtime
from .cli import main

__all__ = ["engine", "runtime", "main"]
