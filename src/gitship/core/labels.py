"""Gitmoji classification of commit subjects.

A commit subject carries a gitmoji code such as ``:bug:`` or ``:sparkles:``.
The first code found decides which changelog section the commit belongs to.
The code-to-label table is static data built once at import time.
"""

from __future__ import annotations

import re
from enum import StrEnum
from types import MappingProxyType

from gitship.exceptions import NoMarkerError


class CommitLabel(StrEnum):
    """Changelog section a commit is filed under."""

    BREAKING_CHANGES = "Breaking Changes"
    ADDED = "Added"
    SECURITY = "Security"
    FIXED = "Fixed"
    REMOVED = "Removed"
    DEPRECATED = "Deprecated"
    CHANGED = "Changed"
    MISCELLANEOUS = "Miscellaneous"
    RELEASE = "Release"


# Changelog order; Release only marks a boundary and never gets a section.
UNRELEASED_LABELS: tuple[CommitLabel, ...] = tuple(
    label for label in CommitLabel if label is not CommitLabel.RELEASE
)

DEFAULT_LABEL = CommitLabel.MISCELLANEOUS

EMOJI_GROUPS: MappingProxyType[CommitLabel, frozenset[str]] = MappingProxyType(
    {
        CommitLabel.BREAKING_CHANGES: frozenset({"boom"}),
        CommitLabel.ADDED: frozenset(
            {
                "sparkles",
                "tada",
                "white_check_mark",
                "construction_worker",
                "chart_with_upwards_trend",
                "heavy_plus_sign",
                "loud_sound",
                "alembic",
                "wheelchair",
                "busts_in_silhouette",
                "children_crossing",
                "iphone",
                "egg",
                "see_no_evil",
                "camera_flash",
                "seedling",
                "triangular_flag_on_post",
                "globe_with_meridians",
                "money_with_wings",
                "thread",
                "technologist",
            }
        ),
        CommitLabel.SECURITY: frozenset({"lock", "closed_lock_with_key", "passport_control"}),
        CommitLabel.FIXED: frozenset(
            {
                "bug",
                "ambulance",
                "apple",
                "penguin",
                "checkered_flag",
                "robot",
                "green_apple",
                "green_heart",
                "pencil2",
                "adhesive_bandage",
                "rotating_light",
                "alien",
                "goal_net",
                "stethoscope",
            }
        ),
        CommitLabel.REMOVED: frozenset({"fire", "heavy_minus_sign", "mute", "coffin"}),
        CommitLabel.DEPRECATED: frozenset({"wastebasket"}),
        CommitLabel.CHANGED: frozenset(
            {
                "art",
                "zap",
                "lipstick",
                "arrow_up",
                "arrow_down",
                "pushpin",
                "recycle",
                "wrench",
                "hammer",
                "bento",
                "building_construction",
                "truck",
                "page_facing_up",
                "card_file_box",
                "speech_balloon",
                "label",
                "dizzy",
                "necktie",
                "safety_vest",
                "fast_forward",
                "rewind",
                "package",
            }
        ),
        CommitLabel.RELEASE: frozenset({"bookmark"}),
    }
)

EMOJI_MAP: MappingProxyType[str, CommitLabel] = MappingProxyType(
    {code: label for label, codes in EMOJI_GROUPS.items() for code in codes}
)

# Every code on gitmoji.dev, including the ones without a dedicated section.
GITMOJI_CODES: frozenset[str] = frozenset(
    {
        "airplane",
        "bricks",
        "bulb",
        "beers",
        "clown_face",
        "construction",
        "mag",
        "memo",
        "monocle_face",
        "poop",
        "rocket",
        "test_tube",
        "twisted_rightwards_arrows",
    }
).union(EMOJI_MAP)

EMOJI_CODE_PATTERN = re.compile(r":\w+:")


def find_emoji_code(subject: str) -> str | None:
    """Return the first ``:code:`` in a subject, without colons."""
    match = EMOJI_CODE_PATTERN.search(subject)
    if match is None:
        return None
    return match.group(0).strip(":")


def get_commit_label(subject: str) -> CommitLabel:
    """Get the changelog label for a commit subject.

    Args:
        subject: Commit subject with emoji already normalized to ``:code:`` form

    Returns:
        The label mapped to the first code in the subject, or
        Miscellaneous when the code is not a known gitmoji

    Raises:
        NoMarkerError: If the subject contains no ``:code:`` marker
    """
    code = find_emoji_code(subject)
    if code is None:
        raise NoMarkerError(subject)
    return EMOJI_MAP.get(code, DEFAULT_LABEL)


def is_release_label(label: CommitLabel) -> bool:
    return label is CommitLabel.RELEASE
