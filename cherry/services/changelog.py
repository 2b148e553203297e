"""Changelog generation via github_changelog_generator.

The generator rewrites CHANGELOG.md in place. Extracting the section added
for the new release is not implemented, so generate() returns "".
"""

from __future__ import annotations

from pathlib import Path

from cherry.core.config import ChangelogConfig
from cherry.core.context import Context
from cherry.core.result import Err, Ok, Result
from cherry.output.console import ConsoleProtocol
from cherry.platform.process import RunError, Runner
from cherry.platform.process import run as run_process

from .base import BaseService

__all__ = ["CHANGELOG_FILE", "GENERATOR", "TOKEN_ENV", "ChangelogService"]

CHANGELOG_FILE = "CHANGELOG.md"
GENERATOR = "github_changelog_generator"
TOKEN_ENV = "CHANGELOG_GITHUB_TOKEN"


class ChangelogService(BaseService):
    def __init__(
        self,
        *,
        workdir: Path,
        config: ChangelogConfig,
        console: ConsoleProtocol,
        runner: Runner = run_process,
    ) -> None:
        super().__init__(workdir=workdir, console=console, runner=runner)
        self._config = config

    @property
    def filename(self) -> str:
        return CHANGELOG_FILE

    @property
    def path(self) -> Path:
        return self._workdir / CHANGELOG_FILE

    def command(self, version: str) -> list[str]:
        return [
            GENERATOR,
            "--no-filter-by-milestone",
            "--exclude-labels",
            ",".join(self._config.exclude_labels),
            "--future-release",
            version,
        ]

    def generate(self, ctx: Context, version: str) -> Result[str, RunError]:
        """Regenerate CHANGELOG.md with ``version`` as the upcoming release."""
        result = self._runner(ctx, self._workdir, self.command(version))
        if isinstance(result, Err):
            return result
        # TODO: return the entries added for this release once CHANGELOG.md is diffed
        return Ok("")
