"""Exit codes for CLI commands.

Every command maps its failure onto one of these codes so that scripts
driving cherry can tell a missing tool from a failed compile.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are part of the CLI contract.

    - 0: Success
    - 1: User error (bad option, invalid cherry.toml, tree not releasable)
    - 2: Environment error (missing command or environment variable)
    - 3: Build error (go build or a build-info query failed)
    - 4: Test error (go test or the coverage report failed)
    - 5: I/O error (version file, coverage files)
    - 6: Network error (webhook unreachable)
    - 7: Release error (a git step of the release failed)
    - 130: Cancelled (interrupt or timeout)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    TEST_ERROR = 4
    IO_ERROR = 5
    NETWORK_ERROR = 6
    RELEASE_ERROR = 7
    CANCELLED = 130

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
