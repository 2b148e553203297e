"""Git queries and release commits for one working tree.

Usage:
    repo = Repository(Path("."))
    match repo.revision(ctx):
        case Ok(sha):
            print(sha)
        case Err(e):
            print(f"Error: {e}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from cherry.core.context import Context
from cherry.core.result import Err, Ok, Result
from cherry.platform.process import RunError, Runner
from cherry.platform.process import run as run_process

__all__ = ["GitError", "Repository", "parse_repo_name"]

# origin  git@github.com:OWNER/REPO.git (push)
_PUSH_REMOTE_RE = re.compile(r"origin[ \t]+(\S+)[ \t]+\(push\)")
# git@github.com:OWNER/REPO.git or https://github.com/OWNER/REPO.git
_REPO_PATH_RE = re.compile(r"(?:git@[^/:]+:|https?://[^/]+/)([^/]+)/([^/\s]+)")


@dataclass(frozen=True, slots=True)
class GitError:
    """Git output that could not be interpreted.

    Attributes:
        command: The git subcommand whose output was parsed
        message: Error message
    """

    command: str
    message: str

    def __str__(self) -> str:
        return self.message


def parse_repo_name(remotes: str) -> Result[tuple[str, str], GitError]:
    """Extract (owner, name) from ``git remote -v`` output."""
    match = _PUSH_REMOTE_RE.search(remotes)
    if match is None:
        return Err(GitError(command="remote -v", message="failed to get git repository url"))

    path = _REPO_PATH_RE.match(match.group(1))
    if path is None:
        return Err(GitError(command="remote -v", message="failed to get git repository name"))

    owner, name = path.group(1), path.group(2)
    name = name.removesuffix(".git")
    return Ok((owner, name))


class Repository:
    """Git commands against one working tree.

    Attributes:
        path: Path to the working tree
    """

    def __init__(self, path: Path, runner: Runner = run_process) -> None:
        self.path = path
        self._runner = runner

    def revision(self, ctx: Context, *, short: bool = True) -> Result[str, RunError]:
        """SHA of HEAD (abbreviated unless short=False)."""
        args = ["rev-parse", "--short", "HEAD"] if short else ["rev-parse", "HEAD"]
        return self._run(ctx, args)

    def branch(self, ctx: Context) -> Result[str, RunError]:
        """Current branch name ("HEAD" when detached)."""
        return self._run(ctx, ["rev-parse", "--abbrev-ref", "HEAD"])

    def name(self, ctx: Context) -> Result[tuple[str, str], RunError | GitError]:
        """Owner and repository name of the origin push remote."""
        result = self._run(ctx, ["remote", "-v"])
        if isinstance(result, Err):
            return result
        return parse_repo_name(result.value)

    def is_clean(self, ctx: Context) -> Result[bool, RunError]:
        """True when the working tree has no staged, unstaged or untracked changes."""
        result = self._run(ctx, ["status", "--porcelain"])
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip() == "")

    def commit(self, ctx: Context, message: str, *files: str) -> Result[None, RunError]:
        """Stage ``files`` and commit them."""
        if files:
            added = self._run(ctx, ["add", "--", *files])
            if isinstance(added, Err):
                return added
        committed = self._run(ctx, ["commit", "-m", message])
        if isinstance(committed, Err):
            return committed
        return Ok(None)

    def tag(self, ctx: Context, name: str, annotation: str) -> Result[None, RunError]:
        """Create an annotated tag on HEAD."""
        result = self._run(ctx, ["tag", "-a", name, "-m", annotation])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def _run(self, ctx: Context, args: list[str]) -> Result[str, RunError]:
        return self._runner(ctx, self.path, ["git", *args])
