"""Linter settings and the TOML config file that overrides them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Set, Tuple, Union

import toml

from .errors import ConfigError
from .models import Scope

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path(".commentdot.toml")

# Settings may also live under a [commentdot] table.
CONFIG_SECTION = "commentdot"


@dataclass
class Settings:
    """Which comments to check and what to check in them.

    Exclusion patterns are compiled on construction, so an invalid pattern is
    reported before any file is scanned.
    """

    # Which comments to check (top level declarations, top level, all).
    scope: Union[Scope, str] = Scope.DECL
    # Check periods at the end of sentences.
    period: bool = True
    # Check that each sentence starts with a capital letter.
    capital: bool = False
    # Regular expressions for lines to exclude from checks.
    exclude: List[str] = field(default_factory=list)

    exclude_patterns: Tuple[Pattern[str], ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self) -> None:
        try:
            self.scope = Scope(self.scope)
        except (ValueError, TypeError):
            choices = ", ".join(s.value for s in Scope)
            raise ConfigError(f"invalid scope '{self.scope}' (expected one of: {choices})") from None
        for name in ("period", "capital"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"invalid value for '{name}': {value!r} (expected true or false)")
        if isinstance(self.exclude, str):
            self.exclude = [self.exclude]
        if not isinstance(self.exclude, (list, tuple)) or not all(
            isinstance(p, str) for p in self.exclude
        ):
            raise ConfigError(f"invalid value for 'exclude': {self.exclude!r} (expected a list of strings)")
        self.exclude = list(self.exclude)
        self.exclude_patterns = tuple(_compile(p) for p in self.exclude)


def _compile(pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"invalid exclude pattern '{pattern}': {exc}") from exc


def load_config(path: Path) -> Dict[str, Any]:
    """Load raw settings from a TOML file.

    Returns:
        The top-level table, or the ``[commentdot]`` table if present.

    Raises:
        ConfigError: settings appear both at the top level and in the
            ``[commentdot]`` table.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except OSError as exc:
        raise ConfigError(f"read config file {path}: {exc}") from exc
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"parse config file {path}: {exc}") from exc

    if CONFIG_SECTION not in data:
        return data
    section = data[CONFIG_SECTION]
    if not isinstance(section, dict):
        raise ConfigError(f"[{CONFIG_SECTION}] in {path} must be a table")
    both = sorted(set(data) & _setting_names())
    if both:
        raise ConfigError(
            f"settings in {path} both at top level and in [{CONFIG_SECTION}]: {', '.join(both)}"
        )
    return section


def _setting_names() -> Set[str]:
    return {f.name for f in fields(Settings) if f.init}


def load_settings(path: Optional[Path] = None, **overrides: Any) -> Settings:
    """Build settings from defaults, the config file and explicit overrides.

    Args:
        path: Config file. Defaults to ``.commentdot.toml`` if it exists.
        overrides: Values that win over the file (``None`` values are ignored).
    """
    values: Dict[str, Any] = {}

    if path is None and DEFAULT_CONFIG_FILE.exists():
        path = DEFAULT_CONFIG_FILE
    if path is not None:
        if not Path(path).exists():
            raise ConfigError(f"config file {path} does not exist")
        values.update(load_config(Path(path)))
        logger.debug("Loaded settings from %s", path)

    unknown = sorted(set(values) - _setting_names())
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
