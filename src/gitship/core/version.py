"""Semantic version parsing and increments.

Versions follow SemVer 2.0.0: ``MAJOR.MINOR.PATCH`` with optional
``-prerelease`` and ``+build`` parts. Instances are immutable; every
increment returns a new Version.

Example:
    >>> v = Version.parse("1.2.3")
    >>> str(v.next_minor())
    '1.3.0'
    >>> v.bump(ReleaseType.MAJOR).tag
    'v2.0.0'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from gitship.exceptions import VersionParseError

TAG_PREFIX = "v"

_SEMVER_PATTERN = re.compile(
    r"""
    ^
    (?P<major>0|[1-9]\d*)
    \.(?P<minor>0|[1-9]\d*)
    \.(?P<patch>0|[1-9]\d*)
    (?:-(?P<prerelease>
        (?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)
        (?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*
    ))?
    (?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?
    $
    """,
    re.VERBOSE,
)


class ReleaseType(StrEnum):
    """Kind of increment to apply when preparing the next release."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


@dataclass(frozen=True)
class Version:
    """An immutable semantic version.

    Can be built from its parts (``Version(1, 2, 3)``) or from a string
    (``Version.parse("1.2.3")``); both forms are interchangeable and
    ``Version.parse(str(v)) == v`` always holds.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = field(default=())
    build: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise VersionParseError(f"{name}={value!r}")
        object.__setattr__(self, "prerelease", tuple(str(p) for p in self.prerelease))
        object.__setattr__(self, "build", tuple(str(b) for b in self.build))

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a canonical version string.

        A leading ``v`` (as in a tag name) is accepted.

        Raises:
            VersionParseError: If the string is not a semantic version
        """
        candidate = text.strip()
        if candidate.startswith(TAG_PREFIX):
            candidate = candidate[len(TAG_PREFIX) :]

        match = _SEMVER_PATTERN.match(candidate)
        if match is None:
            raise VersionParseError(text)

        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Version:
        """Build a version from a ``{major, minor, patch, ...}`` mapping."""
        try:
            return cls(
                major=data["major"],
                minor=data["minor"],
                patch=data["patch"],
                prerelease=tuple(data.get("prerelease", ())),
                build=tuple(data.get("build", ())),
            )
        except KeyError as e:
            raise VersionParseError(repr(dict(data))) from e

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            version += "-" + ".".join(self.prerelease)
        if self.build:
            version += "+" + ".".join(self.build)
        return version

    @property
    def version(self) -> str:
        return str(self)

    @property
    def tag(self) -> str:
        """Git tag name for this version."""
        return f"{TAG_PREFIX}{self}"

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def next_patch(self) -> Version:
        """Next patch version.

        A pre-release of a patch is released as that patch
        (``1.2.4-rc.1`` becomes ``1.2.4``).
        """
        if self.is_prerelease:
            return Version(self.major, self.minor, self.patch)
        return Version(self.major, self.minor, self.patch + 1)

    def next_minor(self) -> Version:
        """Next minor version; patch resets to 0."""
        if self.is_prerelease and self.patch == 0:
            return Version(self.major, self.minor, 0)
        return Version(self.major, self.minor + 1, 0)

    def next_major(self) -> Version:
        """Next major version; minor and patch reset to 0."""
        if self.is_prerelease and self.minor == 0 and self.patch == 0:
            return Version(self.major, 0, 0)
        return Version(self.major + 1, 0, 0)

    def bump(self, release_type: ReleaseType | str) -> Version:
        """Apply the increment for a release type."""
        return NEXT_VERSION_BY_RELEASE_TYPE[ReleaseType(release_type)](self)

    def _precedence(self) -> tuple[Any, ...]:
        # A release sorts after all of its pre-releases.
        if not self.prerelease:
            pre: tuple[Any, ...] = ((1,),)
        else:
            pre = ((0,), *((0, int(p), "") if p.isdigit() else (1, 0, p) for p in self.prerelease))
        return (self.major, self.minor, self.patch, pre)

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __gt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() > other._precedence()

    def __le__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() <= other._precedence()

    def __ge__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence() >= other._precedence()


NEXT_VERSION_BY_RELEASE_TYPE: MappingProxyType[ReleaseType, Callable[[Version], Version]] = (
    MappingProxyType(
        {
            ReleaseType.PATCH: Version.next_patch,
            ReleaseType.MINOR: Version.next_minor,
            ReleaseType.MAJOR: Version.next_major,
        }
    )
)


def parse_version(value: str | Version) -> Version:
    """Coerce a string or Version into a Version."""
    if isinstance(value, Version):
        return value
    return Version.parse(value)
