"""commentdot: check that Go comments end in a period."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Settings, load_settings
from .errors import (
    CommentDotError,
    ConfigError,
    ParseError,
    PositionError,
    UnsuitableInputError,
)
from .linter import fix, replace, run
from .models import FilePosition, Issue, Scope
from .parser import GoParser

__all__ = [
    "__version__",
    "CommentDotError",
    "ConfigError",
    "FilePosition",
    "GoParser",
    "Issue",
    "ParseError",
    "PositionError",
    "Scope",
    "Settings",
    "UnsuitableInputError",
    "fix",
    "load_settings",
    "replace",
    "run",
]
