"""Services that orchestrate external tools."""

from .build import TARGETS, BuildInfo, BuildService, Target
from .build_errors import BuildError, IncompleteBuildInfo, VersionFileError
from .changelog import ChangelogService
from .coverage import CoverageError, CoverageIOError, CoverageService
from .release import ReleaseError, ReleaseFailure, ReleaseService
from .semver import SemVer, parse_version

__all__ = [
    "TARGETS",
    "BuildError",
    "BuildInfo",
    "BuildService",
    "ChangelogService",
    "CoverageError",
    "CoverageIOError",
    "CoverageService",
    "IncompleteBuildInfo",
    "ReleaseError",
    "ReleaseFailure",
    "ReleaseService",
    "SemVer",
    "Target",
    "VersionFileError",
    "parse_version",
]
