"""Shared constructor for services that drive external tools."""

from __future__ import annotations

from pathlib import Path

from cherry.output.console import ConsoleProtocol
from cherry.platform.process import Runner
from cherry.platform.process import run as run_process


class BaseService:
    """Holds the working directory, console and process runner.

    Tests replace ``runner`` with a fake that records commands.
    """

    def __init__(
        self,
        *,
        workdir: Path,
        console: ConsoleProtocol,
        runner: Runner = run_process,
    ) -> None:
        self._workdir = workdir
        self._console = console
        self._runner = runner

    @property
    def workdir(self) -> Path:
        return self._workdir
