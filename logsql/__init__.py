"""
LogSQL - A SQL subset over append-only table logs

Typed table schemas, literal value parsing, row validation, primary-key
checks and WHERE filtering over rows stored as text records.
"""

__version__ = "1.0.0"

from .core.database import Database, SessionContext
from .core.repl import REPL

__all__ = ["Database", "SessionContext", "REPL"]
