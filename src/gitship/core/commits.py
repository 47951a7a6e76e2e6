"""Parsing of git log output into commit records.

git is asked to print every commit as a JSON object (see
``gitship.vcs.git.COMMIT_FORMAT``). Subjects may contain characters that
break line-based splitting, so the output is split on the opening
``{"hash"`` marker of each record instead of on newlines.
"""

from __future__ import annotations

import functools
import json
import logging
import math
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import emoji
from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from gitship.core.labels import EMOJI_CODE_PATTERN, GITMOJI_CODES
from gitship.exceptions import CommitParseError

logger = logging.getLogger(__name__)

RECORD_MARKER = '{"hash"'


class Author(BaseModel):
    """Commit author."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    email: str


class Commit(BaseModel):
    """A single parsed git commit.

    Attributes:
        hash: Full commit hash
        id: Abbreviated commit hash
        timestamp: Commit date, always timezone-aware UTC
        author: Commit author
        subject: Subject line with emoji glyphs replaced by ``:code:`` text
        ref: Ref names pointing at the commit (e.g. ``"tag: v1.0.0"``)
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    hash: str
    id: str
    timestamp: datetime
    author: Author
    subject: str
    ref: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_validator("subject")
    @classmethod
    def _normalize_subject(cls, value: str) -> str:
        return normalize_subject(value)


def parse_timestamp(value: Any) -> Any:
    """Convert a raw git timestamp into a datetime.

    Numbers (or numeric strings) are Unix epoch seconds; any other string
    is parsed as a calendar date. Values that are already datetimes are
    returned unchanged.

    Raises:
        ValueError: If the value is neither a finite number nor a date string
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        try:
            seconds = float(value)
        except ValueError:
            pass
        else:
            if not math.isfinite(seconds):
                raise ValueError(f"Timestamp is not a finite number: {value!r}")
            try:
                return datetime.fromtimestamp(seconds, tz=UTC)
            except (OverflowError, OSError) as e:
                raise ValueError(f"Timestamp out of range: {value!r}") from e

    if isinstance(value, str):
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Unrecognized date: {value!r}") from e

    raise ValueError(f"Unsupported timestamp value: {value!r}")


def emoji_code(glyph: str, data: Mapping[str, Any]) -> str:
    """Pick the ``:code:`` for an emoji glyph.

    A glyph usually has several names (``📝`` is both ``:memo:`` and
    ``:pencil:``). The gitmoji name wins, then the GitHub alias, then the
    CLDR name.
    """
    names = [*data.get("alias", ()), data["en"]]
    for name in names:
        if name.strip(":") in GITMOJI_CODES:
            return name
    return names[0]


def normalize_subject(subject: str) -> str:
    """Replace every emoji glyph in a subject with its ``:code:`` form."""
    return emoji.replace_emoji(subject, replace=emoji_code)


def strip_emoji_codes(subject: str) -> str:
    """Remove ``:code:`` markers from a subject for display."""
    return re.sub(r"\s{2,}", " ", EMOJI_CODE_PATTERN.sub("", subject)).strip()


def parse_commit(raw: str | Mapping[str, Any]) -> Commit:
    """Parse one commit record.

    Args:
        raw: A JSON fragment as printed by git, or an already decoded mapping

    Returns:
        The validated commit

    Raises:
        CommitParseError: If the fragment is not valid JSON or misses fields
    """
    try:
        data = json.loads(raw, strict=False) if isinstance(raw, str) else raw
        return Commit.model_validate(data)
    except json.JSONDecodeError as e:
        raise CommitParseError(raw, reason=e.msg) from e
    except ValidationError as e:
        raise CommitParseError(raw, reason=_summarize(e)) from e


def split_git_log_output(output: str) -> list[str]:
    """Split raw git log output into one JSON fragment per commit."""
    return [RECORD_MARKER + part for part in output.split(RECORD_MARKER) if part.strip()]


def parse_git_log_output(output: str) -> list[Commit]:
    """Parse the output of ``git log`` into commits.

    Args:
        output: Raw git log output using the JSON pretty format

    Returns:
        Commits in the order git printed them; empty for empty output

    Raises:
        CommitParseError: If any fragment fails to parse
    """
    fragments = split_git_log_output(output)
    logger.debug("Parsing %d commit fragment(s)", len(fragments))
    return [parse_commit(fragment) for fragment in fragments]


def compare_commits_by_timestamp(a: Commit, b: Commit) -> int:
    """Order commits most recent first.

    Returns:
        A negative number if ``a`` is more recent than ``b``, a positive
        number if it is older, and 0 for equal timestamps
    """
    delta = b.timestamp - a.timestamp
    return (delta.total_seconds() > 0) - (delta.total_seconds() < 0)


def sort_commits(commits: Iterable[Commit]) -> list[Commit]:
    """Sort commits most recent first."""
    return sorted(commits, key=functools.cmp_to_key(compare_commits_by_timestamp))


def _summarize(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in item['loc'])}: {item['msg']}" for item in error.errors()
    )
