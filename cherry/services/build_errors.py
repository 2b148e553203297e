from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cherry.core.context import Cancelled
from cherry.platform.process import ProcessError


@dataclass(frozen=True, slots=True)
class VersionFileError:
    path: Path
    reason: str
    action: str = "read"

    @property
    def message(self) -> str:
        return f"cannot {self.action} version file {self.path}: {self.reason}"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class IncompleteBuildInfo:
    """Build info had empty fields, so no ldflags were derived from it."""

    missing: tuple[str, ...]
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"incomplete build info: {', '.join(self.missing)} empty"

    def __str__(self) -> str:
        return self.message


BuildError = VersionFileError | IncompleteBuildInfo | ProcessError | Cancelled
