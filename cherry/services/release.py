"""Release a version from the VERSION file.

Steps, each stopping the release on failure:
1. Require a clean working tree.
2. Compute the released and next versions from VERSION.
3. Write the released version, regenerate CHANGELOG.md, commit both and tag.
4. Write the next development version and commit it.

Nothing is pushed; ``git push --follow-tags`` publishes the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cherry.core.context import Cancelled, Context
from cherry.core.result import Err, Ok, Result
from cherry.git.repository import Repository
from cherry.output.console import ConsoleProtocol, Style
from cherry.platform.process import ProcessError, Runner
from cherry.platform.process import run as run_process

from .base import BaseService
from .build import read_version
from .build_errors import VersionFileError
from .changelog import ChangelogService
from .semver import SemVer, Segment, parse_version

__all__ = ["ReleaseError", "ReleaseFailure", "ReleaseService"]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """The repository is not in a state that can be released."""

    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message


ReleaseFailure = ReleaseError | VersionFileError | ProcessError | Cancelled


class ReleaseService(BaseService):
    def __init__(
        self,
        *,
        workdir: Path,
        console: ConsoleProtocol,
        changelog: ChangelogService,
        version_file: str = "VERSION",
        runner: Runner = run_process,
    ) -> None:
        super().__init__(workdir=workdir, console=console, runner=runner)
        self._changelog = changelog
        self._version_file = version_file
        self._repo = Repository(workdir, runner=runner)

    @property
    def version_path(self) -> Path:
        return self._workdir / self._version_file

    def versions(self, segment: Segment) -> Result[tuple[SemVer, SemVer], ReleaseFailure]:
        """Released and next versions for ``segment``, read from VERSION."""
        text = read_version(self.version_path)
        if isinstance(text, Err):
            return text

        parsed = parse_version(text.value)
        if parsed is None:
            return Err(
                ReleaseError(
                    f"invalid semantic version in {self._version_file}: {text.value!r}",
                    hint="Use MAJOR.MINOR.PATCH, e.g. 0.1.0",
                )
            )
        return Ok(parsed.release(segment))

    def release(self, ctx: Context, segment: Segment) -> Result[SemVer, ReleaseFailure]:
        """Commit and tag the released version, then open the next one.

        Returns:
            Ok(released version)
            Err on the first failing step; earlier commits are kept
        """
        clean = self._repo.is_clean(ctx)
        if isinstance(clean, Err):
            return clean
        if not clean.value:
            return Err(
                ReleaseError(
                    "working directory is not clean and has uncommitted changes",
                    hint="Commit or stash your changes first",
                )
            )

        versions = self.versions(segment)
        if isinstance(versions, Err):
            return versions
        current, upcoming = versions.value
        tag = current.to_tag()

        self._console.header(f"Releasing {tag}")
        written = self._write_version(current.version())
        if isinstance(written, Err):
            return written

        self._console.print("Updating changelog", Style.DIM)
        changelog = self._changelog.generate(ctx, tag)
        if isinstance(changelog, Err):
            return changelog

        committed = self._repo.commit(
            ctx, f"Releasing {tag}", self._version_file, self._changelog.filename
        )
        if isinstance(committed, Err):
            return committed

        tagged = self._repo.tag(ctx, tag, f"Version {current.version()}")
        if isinstance(tagged, Err):
            return tagged
        self._console.success(f"Tagged {tag}")

        next_version = upcoming.pre_release()
        written = self._write_version(next_version)
        if isinstance(written, Err):
            return written

        committed = self._repo.commit(ctx, f"Beginning {next_version} [skip ci]", self._version_file)
        if isinstance(committed, Err):
            return committed
        self._console.success(f"Next version {next_version}")

        return Ok(current)

    def _write_version(self, version: str) -> Result[None, VersionFileError]:
        try:
            self.version_path.write_text(f"{version}\n", encoding="utf-8")
        except OSError as e:
            return Err(VersionFileError(path=self.version_path, reason=str(e), action="write"))
        return Ok(None)
