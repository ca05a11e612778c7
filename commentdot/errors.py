"""Exception hierarchy for commentdot."""

from __future__ import annotations


class CommentDotError(Exception):
    """Base class for every error raised by commentdot."""


class ConfigError(CommentDotError):
    """Invalid settings, config file or exclusion pattern."""


class ParseError(CommentDotError):
    """A source file could not be read or parsed."""


class UnsuitableInputError(CommentDotError):
    """The file's reported positions cannot be trusted (line directives, cgo output)."""


class PositionError(CommentDotError, RuntimeError):
    """A computed position fell outside the source it refers to.

    This is a bug in position arithmetic, never a problem with the input.
    """
