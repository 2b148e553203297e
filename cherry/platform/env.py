"""Preflight checks and scoped changes for the process environment.

The environment is process-wide state: set_env_vars and its restore callable
assume a single thread.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass

from cherry.core.result import Err, Ok, Result

__all__ = [
    "EnvError",
    "EnvSnapshot",
    "RestoreFunc",
    "ensure_commands",
    "ensure_env_vars",
    "set_env_vars",
]


@dataclass(frozen=True, slots=True)
class EnvError:
    """A required command or variable is missing, or input is malformed."""

    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message


type EnvSnapshot = tuple[tuple[str, str], ...]
type RestoreFunc = Callable[[], Result[None, EnvError]]


def ensure_commands(*names: str) -> Result[None, EnvError]:
    """Fail on the first command that is not on PATH."""
    for name in names:
        if shutil.which(name) is None:
            return Err(EnvError(f"{name} command is not available", hint=f"Install {name} and add it to PATH"))
    return Ok(None)


def ensure_env_vars(*names: str) -> Result[None, EnvError]:
    """Fail on the first variable that is unset or empty."""
    for name in names:
        if not os.environ.get(name):
            return Err(EnvError(f"{name} environment variable is not set"))
    return Ok(None)


def _setenv(name: str, value: str) -> Result[None, EnvError]:
    try:
        os.environ[name] = value
    except (OSError, ValueError) as e:
        return Err(EnvError(f"cannot set {name}: {e}"))
    return Ok(None)


def set_env_vars(*key_vals: str) -> Result[RestoreFunc, EnvError]:
    """Set alternating key/value pairs and return a function that undoes it.

    Variables that were unset are recorded as "" and restored as "". The
    restore function replays the recorded values in the order the pairs were
    given; calling it again does nothing.

    Example:
        match set_env_vars("GOOS", "linux", "GOARCH", "amd64"):
            case Ok(restore):
                ...
                restore()
            case Err(e):
                print(e)
    """
    if len(key_vals) % 2 != 0:
        return Err(EnvError("mismatching key-value pairs"))

    pairs = list(zip(key_vals[0::2], key_vals[1::2]))
    recorded: list[tuple[str, str]] = []
    for name, value in pairs:
        original = os.environ.get(name, "")
        result = _setenv(name, value)
        if isinstance(result, Err):
            for applied, previous in reversed(recorded):
                _setenv(applied, previous)
            return result
        recorded.append((name, original))

    snapshot: EnvSnapshot = tuple(recorded)
    restored = False

    def restore() -> Result[None, EnvError]:
        nonlocal restored
        if restored:
            return Ok(None)
        restored = True
        for name, original in snapshot:
            result = _setenv(name, original)
            if isinstance(result, Err):
                return result
        return Ok(None)

    return Ok(restore)
