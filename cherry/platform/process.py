"""Subprocess execution with Result-based error handling.

Runs one external command at a time, honouring a cancellation Context.

Usage:
    result = run(ctx, Path("."), ["git", "rev-parse", "--short", "HEAD"])
    match result:
        case Ok(sha):
            print(sha)
        case Err(error):
            print(f"Failed: {error}")
"""

from __future__ import annotations

import os
import signal
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from cherry.core.context import Cancelled, Context
from cherry.core.result import Err, Ok, Result

__all__ = ["ProcessError", "RunError", "Runner", "run"]

# Upper bound on how long a cancellation can go unnoticed while a child runs.
POLL_INTERVAL = 0.05
# Upper bound on reading what is left in the pipes after the child is killed.
DRAIN_TIMEOUT = 1.0


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started or exited non-zero.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, negative signal number, or -1 if it never started.
        reason: "exit status N", "signal: NAME" or the OS error text.
        stderr: Standard error trimmed of surrounding newlines.
    """

    command: tuple[str, ...]
    returncode: int
    reason: str
    stderr: str = ""

    @property
    def message(self) -> str:
        return f"{self.reason}: {self.stderr}"

    @property
    def started(self) -> bool:
        return self.returncode != -1

    def __str__(self) -> str:
        return self.message


type RunError = ProcessError | Cancelled


class Runner(Protocol):
    """Signature shared by ``run`` and the fakes used in tests."""

    def __call__(
        self,
        ctx: Context,
        cwd: Path,
        cmd: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> Result[str, RunError]: ...


def _exit_reason(returncode: int) -> str:
    if returncode < 0:
        try:
            return f"signal: {signal.Signals(-returncode).name}"
        except ValueError:
            return f"signal: {-returncode}"
    return f"exit status {returncode}"


def _kill(proc: subprocess.Popen[str]) -> None:
    """Kill the child and everything it started, then drain the pipes.

    The child leads its own session, so its compilers and test binaries share
    its process group. A descendant that left the group can still hold the
    pipes open; the drain is bounded so that cannot block the caller.
    """
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()
    try:
        proc.communicate(timeout=DRAIN_TIMEOUT)
    except subprocess.TimeoutExpired:
        pass


def _merged_env(overrides: Mapping[str, str] | None) -> dict[str, str] | None:
    if not overrides:
        return None
    env = os.environ.copy()
    env.update(overrides)
    return env


def run(
    ctx: Context,
    cwd: Path,
    cmd: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
) -> Result[str, RunError]:
    """Execute a command and return its stdout or an error.

    Args:
        ctx: Cancellation context. A done context means the command never starts.
        cwd: Working directory for the command.
        cmd: Command and arguments (no shell).
        env: Variables layered over the current environment for this call only.

    Returns:
        Ok(stdout without leading/trailing newlines) on exit status 0,
        Err(ProcessError) on spawn failure or non-zero exit,
        Err(Cancelled) if ctx was cancelled or timed out first.
    """
    if (done := ctx.err()) is not None:
        return Err(done)

    command = tuple(cmd)
    try:
        proc = subprocess.Popen(
            command,
            cwd=str(cwd),
            env=_merged_env(env),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as e:
        return Err(ProcessError(command=command, returncode=-1, reason=str(e)))

    with proc:
        while True:
            wait = POLL_INTERVAL
            remaining = ctx.remaining()
            if remaining is not None:
                wait = min(wait, remaining)
            try:
                stdout, stderr = proc.communicate(timeout=wait)
                break
            except subprocess.TimeoutExpired:
                if (done := ctx.err()) is not None:
                    _kill(proc)
                    return Err(done)

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=command,
                returncode=proc.returncode,
                reason=_exit_reason(proc.returncode),
                stderr=stderr.strip("\n"),
            )
        )

    return Ok(stdout.strip("\n"))
