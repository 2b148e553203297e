"""Build service for Go binaries with stamped version metadata.

Preparation gathers a BuildInfo (version file, git, toolchain, clock) and
turns it into ``-X`` linker flags aimed at the project's version package.
The binary is then built once for the host, or once per entry of TARGETS
with GOOS/GOARCH passed to that single ``go build`` call.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from pathlib import Path

from cherry.core.config import BuildConfig
from cherry.core.context import Context
from cherry.core.result import Err, Ok, Result
from cherry.git.repository import Repository
from cherry.output.console import ConsoleProtocol, Style
from cherry.platform.process import Runner
from cherry.platform.process import run as run_process

from .base import BaseService
from .build_errors import BuildError, IncompleteBuildInfo, VersionFileError

__all__ = [
    "BUILD_TOOL",
    "TARGETS",
    "BuildInfo",
    "BuildService",
    "Target",
    "format_rfc3339_nano",
    "ldflags",
]

BUILD_TOOL = "Cherry"


@dataclass(frozen=True, slots=True)
class Target:
    """A GOOS/GOARCH pair."""

    os: str
    arch: str

    @property
    def env(self) -> dict[str, str]:
        return {"GOOS": self.os, "GOARCH": self.arch}

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


TARGETS: tuple[Target, ...] = (
    Target("linux", "386"),
    Target("linux", "amd64"),
    Target("darwin", "386"),
    Target("darwin", "amd64"),
    Target("windows", "386"),
    Target("windows", "amd64"),
)


def format_rfc3339_nano(ns: int) -> str:
    """Format a UTC epoch timestamp in nanoseconds like Go's time.RFC3339Nano.

    Trailing zeros of the fraction are dropped, and the fraction disappears
    entirely when it is zero: 2019-09-25T22:00:00.12Z, 2019-09-25T22:00:00Z.
    """
    seconds, nanos = divmod(ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(seconds, tz=UTC).strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{nanos:09d}".rstrip("0")
    if fraction:
        return f"{stamp}.{fraction}Z"
    return f"{stamp}Z"


@dataclass(frozen=True, slots=True)
class BuildInfo:
    """Metadata stamped into a binary at link time.

    Attributes:
        version: Last non-blank line of the version file
        revision: Short SHA of HEAD
        branch: Current branch name
        go_version: Toolchain version, e.g. "go1.22.1"
        build_tool: Always BUILD_TOOL
        build_time: Nanoseconds since the Unix epoch, UTC
    """

    version: str
    revision: str
    branch: str
    go_version: str
    build_tool: str
    build_time: int

    def missing(self) -> tuple[str, ...]:
        """Names of empty fields."""
        return tuple(f.name for f in fields(self) if not getattr(self, f.name))

    @property
    def build_time_rfc3339(self) -> str:
        return format_rfc3339_nano(self.build_time)


def ldflags(version_pkg: str, info: BuildInfo) -> str:
    """Linker flags assigning every BuildInfo field to a variable of version_pkg."""
    assignments = (
        ("Version", info.version),
        ("Revision", info.revision),
        ("Branch", info.branch),
        ("GoVersion", info.go_version),
        ("BuildTool", info.build_tool),
        ("BuildTime", info.build_time_rfc3339),
    )
    return " ".join(f"-X {version_pkg}.{name}={value}" for name, value in assignments)


def read_version(path: Path) -> Result[str, VersionFileError]:
    """Return the last non-blank line of the version file ("" if none)."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(VersionFileError(path=path, reason=str(e)))

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return Ok(lines[-1] if lines else "")


class BuildService(BaseService):
    """Builds the project's main package with version metadata."""

    def __init__(
        self,
        *,
        workdir: Path,
        config: BuildConfig,
        console: ConsoleProtocol,
        version_file: str = "VERSION",
        runner: Runner = run_process,
        clock: Callable[[], int] = time.time_ns,
    ) -> None:
        super().__init__(workdir=workdir, console=console, runner=runner)
        self._config = config
        self._version_file = version_file
        self._clock = clock
        self._repo = Repository(workdir, runner=runner)

    def build_info(self, ctx: Context) -> Result[BuildInfo, BuildError]:
        """Collect version, git and toolchain metadata.

        Fails on the first step that fails, and also when any collected
        field is empty.
        """
        version = read_version(self._workdir / self._version_file)
        if isinstance(version, Err):
            return version

        revision = self._repo.revision(ctx, short=True)
        if isinstance(revision, Err):
            return revision

        branch = self._repo.branch(ctx)
        if isinstance(branch, Err):
            return branch

        go_version = self._runner(ctx, self._workdir, ["go", "env", "GOVERSION"])
        if isinstance(go_version, Err):
            return go_version

        info = BuildInfo(
            version=version.value,
            revision=revision.value,
            branch=branch.value,
            go_version=go_version.value,
            build_tool=BUILD_TOOL,
            build_time=self._clock(),
        )

        missing = info.missing()
        if missing:
            hint = None
            if "version" in missing:
                hint = f"Write the release version to {self._version_file}"
            return Err(IncompleteBuildInfo(missing=missing, hint=hint))

        return Ok(info)

    def ldflags(self, ctx: Context, info: BuildInfo) -> Result[str, BuildError]:
        """Resolve the version package import path and assemble the -X flags."""
        pkg = self._runner(ctx, self._workdir, ["go", "list", self._config.version_package])
        if isinstance(pkg, Err):
            return pkg
        return Ok(ldflags(pkg.value, info))

    def prepare(self, ctx: Context) -> Result[str, BuildError]:
        """Collect build info once and turn it into linker flags.

        Pass the result to build() and build_all() so that every binary of
        one invocation carries the same stamp.
        """
        info = self.build_info(ctx)
        if isinstance(info, Err):
            return info
        return self.ldflags(ctx, info.value)

    def build(
        self, ctx: Context, main: str, out: str, *, flags: str | None = None
    ) -> Result[Path, BuildError]:
        """Build one binary for the host platform.

        Returns:
            Ok(path) of the produced binary
            Err(BuildError) from whichever step failed
        """
        prepared = self._flags(ctx, flags)
        if isinstance(prepared, Err):
            return prepared

        self._console.print(f"go build -o {out} {main}", Style.DIM)
        result = self._go_build(ctx, prepared.value, main, out)
        if isinstance(result, Err):
            return result
        return Ok(self._resolve(out))

    def build_all(
        self, ctx: Context, main: str, out_prefix: str, *, flags: str | None = None
    ) -> Result[list[Path], BuildError]:
        """Build one binary per entry of TARGETS, in order.

        The first failing target stops the loop; binaries built before it are
        left on disk.
        """
        prepared = self._flags(ctx, flags)
        if isinstance(prepared, Err):
            return prepared

        built: list[Path] = []
        for target in TARGETS:
            out = f"{out_prefix}-{target}"
            self._console.print(f"go build -o {out} {main} ({target.os}/{target.arch})", Style.DIM)
            result = self._go_build(ctx, prepared.value, main, out, env=target.env)
            if isinstance(result, Err):
                return result
            built.append(self._resolve(out))

        return Ok(built)

    def _flags(self, ctx: Context, flags: str | None) -> Result[str, BuildError]:
        if flags is not None:
            return Ok(flags)
        return self.prepare(ctx)

    def _go_build(
        self,
        ctx: Context,
        flags: str,
        main: str,
        out: str,
        env: dict[str, str] | None = None,
    ) -> Result[None, BuildError]:
        cmd = ["go", "build", "-ldflags", flags, "-o", out, main]
        result = self._runner(ctx, self._workdir, cmd, env=env)
        if isinstance(result, Err):
            return result
        return Ok(None)

    def _resolve(self, out: str) -> Path:
        path = Path(out)
        return path if path.is_absolute() else self._workdir / path
