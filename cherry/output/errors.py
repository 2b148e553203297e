"""Error presentation utilities.

Maps every error type returned by the services to a console message and a
process exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cherry.core.config import ConfigError
from cherry.core.context import Cancelled
from cherry.core.errors import ErrorCode
from cherry.git.repository import GitError
from cherry.output.console import Style
from cherry.platform.env import EnvError
from cherry.platform.http import HttpError
from cherry.platform.process import ProcessError
from cherry.services.build_errors import IncompleteBuildInfo, VersionFileError
from cherry.services.coverage import CoverageIOError
from cherry.services.release import ReleaseError

if TYPE_CHECKING:
    from cherry.output.console import ConsoleProtocol

__all__ = ["print_error", "error_exit_code"]

type CliError = (
    ConfigError
    | EnvError
    | ProcessError
    | Cancelled
    | VersionFileError
    | IncompleteBuildInfo
    | CoverageIOError
    | GitError
    | HttpError
    | ReleaseError
)


def print_error(error: CliError, console: ConsoleProtocol) -> None:
    """Print the raw error text, plus a dim hint when the error carries one."""
    console.error(str(error))
    hint: str | None = getattr(error, "hint", None)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def error_exit_code(error: CliError, default: ErrorCode = ErrorCode.BUILD_ERROR) -> int:
    """Exit code for an error.

    Process failures take ``default`` so that ``cherry test`` can report
    TEST_ERROR and ``cherry build`` BUILD_ERROR for the same ProcessError.
    """
    match error:
        case ConfigError() | ReleaseError():
            return int(ErrorCode.USER_ERROR)
        case EnvError():
            return int(ErrorCode.ENV_ERROR)
        case Cancelled():
            return int(ErrorCode.CANCELLED)
        case ProcessError(returncode=-1):
            return int(ErrorCode.ENV_ERROR)
        case VersionFileError() | CoverageIOError():
            return int(ErrorCode.IO_ERROR)
        case HttpError():
            return int(ErrorCode.NETWORK_ERROR)
        case ProcessError() | IncompleteBuildInfo() | GitError():
            return int(default)
    return int(default)
