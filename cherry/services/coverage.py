"""Coverage service: per-package ``go test`` merged into one HTML report.

Layout under the report directory:
    cover.out   merged profile, one "mode:" header
    index.html  go tool cover output
"""

from __future__ import annotations

import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from cherry.core.config import TestConfig
from cherry.core.context import Cancelled, Context
from cherry.core.result import Err, Ok, Result
from cherry.output.console import ConsoleProtocol, Style
from cherry.platform.process import ProcessError, Runner
from cherry.platform.process import run as run_process

from .base import BaseService

__all__ = ["COVER_FILE", "REPORT_FILE", "CoverageError", "CoverageIOError", "CoverageService"]

COVER_FILE = "cover.out"
REPORT_FILE = "index.html"


@dataclass(frozen=True, slots=True)
class CoverageIOError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"{self.path}: {self.reason}"

    def __str__(self) -> str:
        return self.message


CoverageError = CoverageIOError | ProcessError | Cancelled


def strip_mode_header(profile: str) -> str:
    """Drop the first line (the "mode: ..." header) of a cover profile."""
    _, _, rest = profile.partition("\n")
    if rest and not rest.endswith("\n"):
        rest += "\n"
    return rest


class CoverageService(BaseService):
    """Runs tests with coverage for every package of the module."""

    def __init__(
        self,
        *,
        workdir: Path,
        config: TestConfig,
        console: ConsoleProtocol,
        runner: Runner = run_process,
    ) -> None:
        super().__init__(workdir=workdir, console=console, runner=runner)
        self._config = config

    @property
    def report_dir(self) -> Path:
        return self._workdir / self._config.report_path

    def packages(self, ctx: Context) -> Result[list[str], CoverageError]:
        """Import paths of all packages, from ``go list ./...``."""
        result = self._runner(ctx, self._workdir, ["go", "list", "./..."])
        if isinstance(result, Err):
            return result
        return Ok([line for line in result.value.split("\n") if line.strip()])

    def coverage(self, ctx: Context) -> Result[Path, CoverageError]:
        """Recreate the report directory, test every package, render HTML.

        Returns:
            Ok(path to index.html)
            Err on the first failure; profile data already merged stays in cover.out
        """
        report_dir = self.report_dir
        cover_file = report_dir / COVER_FILE
        report_file = report_dir / REPORT_FILE

        prepared = self._reset_report_dir(report_dir, cover_file)
        if isinstance(prepared, Err):
            return prepared

        packages = self.packages(ctx)
        if isinstance(packages, Err):
            return packages

        self._console.header(f"Testing {len(packages.value)} packages")
        for pkg in packages.value:
            result = self.test_package(ctx, pkg, cover_file)
            if isinstance(result, Err):
                return result

        cmd = ["go", "tool", "cover", "-html", str(cover_file), "-o", str(report_file)]
        rendered = self._runner(ctx, self._workdir, cmd)
        if isinstance(rendered, Err):
            return rendered

        return Ok(report_file)

    def test_package(self, ctx: Context, pkg: str, cover_file: Path) -> Result[None, CoverageError]:
        """Run one package's tests and append its profile lines to cover_file."""
        fd, tmp_name = tempfile.mkstemp(prefix="cover-", suffix=".out")
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            cmd = [
                "go",
                "test",
                "-covermode",
                self._config.cover_mode,
                "-coverprofile",
                str(tmp),
                pkg,
            ]
            result = self._runner(ctx, self._workdir, cmd)
            if isinstance(result, Err):
                return result
            self._console.success(result.value or pkg)

            try:
                data = strip_mode_header(tmp.read_text(encoding="utf-8"))
                if data:
                    with cover_file.open("a", encoding="utf-8") as f:
                        f.write(data)
            except OSError as e:
                return Err(CoverageIOError(path=cover_file, reason=str(e)))
        finally:
            tmp.unlink(missing_ok=True)

        return Ok(None)

    def _reset_report_dir(self, report_dir: Path, cover_file: Path) -> Result[None, CoverageError]:
        try:
            if report_dir.exists():
                shutil.rmtree(report_dir)
            report_dir.mkdir(parents=True)
            cover_file.write_text(f"mode: {self._config.cover_mode}\n", encoding="utf-8")
        except OSError as e:
            return Err(CoverageIOError(path=report_dir, reason=str(e)))
        self._console.print(f"Coverage report: {report_dir}", Style.DIM)
        return Ok(None)
