"""Semantic versions as kept in the VERSION file.

A release turns the version being developed into the released one and
opens the next development version right after it:

    1.4.2-0  --patch->  release 1.4.2, next 1.4.3-0
    1.4.2-0  --minor->  release 1.5.0, next 1.5.1-0
    1.4.2-0  --major->  release 2.0.0, next 2.0.1-0
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

__all__ = ["SemVer", "Segment", "parse_version"]

type Segment = Literal["patch", "minor", "major"]

_SEPARATORS_RE = re.compile(r"[.+-]")


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def version(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_tag(self) -> str:
        return f"v{self.version()}"

    def pre_release(self) -> str:
        """Development version written after a release."""
        return f"{self.version()}-0"

    def release(self, segment: Segment) -> tuple[SemVer, SemVer]:
        """Return (released version, next development version)."""
        match segment:
            case "patch":
                current = self
            case "minor":
                current = SemVer(self.major, self.minor + 1, 0)
            case "major":
                current = SemVer(self.major + 1, 0, 0)
            case _:
                raise AssertionError(f"unexpected release segment: {segment}")
        return current, SemVer(current.major, current.minor, current.patch + 1)


def parse_version(text: str) -> SemVer | None:
    """Parse MAJOR.MINOR.PATCH; pre-release and build suffixes are ignored."""
    parts = _SEPARATORS_RE.split(text.strip())
    if len(parts) < 3:
        return None
    if not all(p.isascii() and p.isdigit() for p in parts[:3]):
        return None
    return SemVer(int(parts[0]), int(parts[1]), int(parts[2]))
