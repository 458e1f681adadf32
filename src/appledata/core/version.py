# ABOUTME: Firmware version triples with total ordering and inclusive/exclusive range membership
# ABOUTME: Used by extraction to parse version strings and by persistence to link devices to releases

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from appledata.core.errors import VersionFormatError

SEPARATOR = "."

_COMPONENT = re.compile(r"[0-9]+")


class Ordering(str, Enum):
    """Result of comparing two versions."""

    LT = "lt"
    EQ = "eq"
    GT = "gt"


@dataclass(frozen=True, order=True, slots=True)
class Version:
    """A major.minor.patch firmware version.

    Field order drives the generated comparison methods, so ordering is
    lexicographic on (major, minor, patch).
    """

    major: int
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise VersionFormatError(f"Version component {name} must be a non-negative integer, got {value!r}")

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse "12", "12.1" or "12.1.3"; missing components default to 0.

        Raises:
            VersionFormatError: empty input, empty or non-numeric components,
                or more than three components
        """
        if text is None:
            raise VersionFormatError("Cannot parse version from None")
        stripped = text.strip()
        if not stripped:
            raise VersionFormatError("Cannot parse version from an empty string")

        parts = stripped.split(SEPARATOR)
        if len(parts) > 3:
            raise VersionFormatError(f"Too many version components in {text!r}")

        components = []
        for part in parts:
            # fullmatch on ASCII digits: int() alone would accept "+1", " 1" and non-ASCII digits
            if not _COMPONENT.fullmatch(part):
                raise VersionFormatError(f"Invalid version component {part!r} in {text!r}")
            components.append(int(part))

        return cls(*components)

    @classmethod
    def zero(cls) -> Version:
        """The unset version used when a table never populated a bound."""
        return cls(0, 0, 0)

    @property
    def is_zero(self) -> bool:
        return self == Version.zero()

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return SEPARATOR.join(str(c) for c in self.as_tuple())


def compare(a: Version, b: Version) -> Ordering:
    """Three-way comparison on (major, minor, patch)."""
    left, right = a.as_tuple(), b.as_tuple()
    if left < right:
        return Ordering.LT
    if left > right:
        return Ordering.GT
    return Ordering.EQ


@dataclass(frozen=True, slots=True)
class VersionRangeLimit:
    """One end of a version range."""

    version: Version
    inclusive: bool = True


@dataclass(frozen=True, slots=True)
class VersionRange:
    """An interval of versions with independently inclusive bounds.

    left.version <= right.version is assumed and not validated; an inverted
    range contains nothing.
    """

    left: VersionRangeLimit
    right: VersionRangeLimit

    @classmethod
    def inclusive(cls, lower: Version, upper: Version) -> VersionRange:
        return cls(VersionRangeLimit(lower, True), VersionRangeLimit(upper, True))

    def __contains__(self, version: object) -> bool:
        if not isinstance(version, Version):
            return False
        return in_range(version, self)

    def __str__(self) -> str:
        open_bracket = "[" if self.left.inclusive else "("
        close_bracket = "]" if self.right.inclusive else ")"
        return f"{open_bracket}{self.left.version},{self.right.version}{close_bracket}"


def in_range(version: Version, rng: VersionRange) -> bool:
    """Check membership against each bound's own inclusivity flag."""
    above_left = compare(version, rng.left.version) is Ordering.GT or (
        rng.left.inclusive and compare(version, rng.left.version) is Ordering.EQ
    )
    below_right = compare(version, rng.right.version) is Ordering.LT or (
        rng.right.inclusive and compare(version, rng.right.version) is Ordering.EQ
    )
    return above_left and below_right
