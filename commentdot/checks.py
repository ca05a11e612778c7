"""Sentence checks: period at the end, capital letter at the start."""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Sequence

from .config import Settings
from .models import CommentRecord, Issue, Position
from .normalizer import normalize
from .positions import byte_to_rune_column, make_replacement, to_file_position

NO_PERIOD_MESSAGE = "comment should end in a period"
NO_CAPITAL_MESSAGE = "sentence should start with a capital letter"

# List of valid sentence endings.
# A sentence can be inside parenthesis, and therefore ends with parenthesis.
# A colon is a valid sentence ending, because it can be followed by a
# code example which is not checked.
LAST_CHARS = (".", "?", "!", ".)", "?)", "!)", ":")

SENTENCE_END_CHARS = frozenset(".!?")

# Common abbreviations whose periods don't end a sentence.
ABBREVIATIONS = ("i.e.", "i. e.", "e.g.", "e. g.", "etc.")

# An abbreviation starts a word: "/etc." or "foo.e.g." are not abbreviations.
ABBREVIATION_RE = re.compile(
    r"(?<![\w/.])(" + "|".join(re.escape(abbr) for abbr in ABBREVIATIONS) + ")"
)


class SentenceState(Enum):
    INSIDE = "inside"
    JUST_ENDED = "just-ended"
    START = "start"


def check_comments(records: Sequence[CommentRecord], settings: Settings) -> List[Issue]:
    """Check every record according to *settings*."""
    issues: List[Issue] = []
    for record in records:
        if not record.group.comments:
            continue
        text = normalize(record, settings.exclude_patterns)

        if settings.period:
            issue = check_comment_for_period(record, text)
            if issue is not None:
                issues.append(issue)

        if settings.capital:
            issues.extend(check_comment_for_capital(record, text))
    return issues


def check_comment_for_period(record: CommentRecord, text: str) -> Optional[Issue]:
    pos = check_period(text)
    if pos is None:
        return None

    file_pos = to_file_position(record, pos)
    # The file column is a byte column in the original line.
    original = record.line_at(pos.line)
    replacement = make_replacement(original, byte_to_rune_column(original, file_pos.column))
    return Issue(pos=file_pos, message=NO_PERIOD_MESSAGE, replacement=replacement)


def check_comment_for_capital(record: CommentRecord, text: str) -> List[Issue]:
    return [
        Issue(pos=to_file_position(record, pos), message=NO_CAPITAL_MESSAGE)
        for pos in check_capital(text, skip_first=record.decl)
    ]


def check_period(text: str) -> Optional[Position]:
    """Check that the last sentence of *text* ends in a period.

    Returns the in-text position where the period is missing, or ``None``.
    """
    lines = text.split("\n")
    for index in range(len(lines) - 1, -1, -1):
        line = lines[index].rstrip()
        if not line:
            continue
        if line.endswith(LAST_CHARS):
            return None
        return Position(line=index + 1, column=len(line) + 1)
    # All lines are empty
    return None


def check_capital(text: str, skip_first: bool = False) -> List[Position]:
    """Check that every sentence of *text* starts with a capital letter.

    The first sentence of a declaration comment is skipped: it may start with
    the name of an unexported identifier.
    """
    text = _mask_abbreviations(text)

    positions: List[Position] = []
    state = SentenceState.INSIDE if skip_first else SentenceState.START
    line, column = 1, 0
    for char in text:
        column += 1
        if char == "\n":
            line, column = line + 1, 0
            if state is SentenceState.JUST_ENDED:
                state = SentenceState.START
            continue
        if char in SENTENCE_END_CHARS:
            state = SentenceState.JUST_ENDED
            continue
        if char == ")" and state is SentenceState.JUST_ENDED:
            continue
        if char.isspace():
            if state is SentenceState.JUST_ENDED:
                state = SentenceState.START
            continue
        if state is SentenceState.START and char.islower():
            positions.append(Position(line=line, column=column))
        state = SentenceState.INSIDE
    return positions


def _mask_abbreviations(text: str) -> str:
    return ABBREVIATION_RE.sub(lambda m: m.group(0).replace(".", "_"), text)
