from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer

from cherry.core.config import CONFIG_FILE, Config, load_config_or_default
from cherry.core.context import Context
from cherry.core.errors import ErrorCode
from cherry.core.result import Err
from cherry.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    workdir: Path
    config: Config
    console: ConsoleProtocol


def build_context() -> CLIContext:
    """Resolve the working directory and load cherry.toml from it."""
    console = RichConsole()
    workdir = Path.cwd().resolve()

    config_result = load_config_or_default(workdir / CONFIG_FILE)
    if isinstance(config_result, Err):
        console.error(str(config_result.error))
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(workdir=workdir, config=config_result.value, console=console)


@contextmanager
def cancellation(timeout: float | None) -> Iterator[Context]:
    """A Context with ``timeout`` that SIGINT cancels while the block runs."""
    ctx = Context.with_timeout(timeout)
    if threading.current_thread() is not threading.main_thread():
        yield ctx
        return

    previous = signal.signal(signal.SIGINT, lambda *_: ctx.cancel())
    try:
        yield ctx
    finally:
        signal.signal(signal.SIGINT, previous)
