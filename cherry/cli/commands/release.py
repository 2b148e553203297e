from __future__ import annotations

import typer

from cherry.cli.commands._helpers import exit_on_error
from cherry.cli.context import build_context, cancellation
from cherry.core.errors import ErrorCode
from cherry.core.result import Err, Ok, Result
from cherry.platform.env import ensure_commands, ensure_env_vars
from cherry.services.changelog import GENERATOR, TOKEN_ENV, ChangelogService
from cherry.services.release import ReleaseError, ReleaseService
from cherry.services.semver import Segment


def select_segment(*, patch: bool, minor: bool, major: bool) -> Result[Segment, ReleaseError]:
    """At most one of the flags may be set; none means a patch release."""
    chosen: list[Segment] = []
    if patch:
        chosen.append("patch")
    if minor:
        chosen.append("minor")
    if major:
        chosen.append("major")
    if len(chosen) > 1:
        return Err(ReleaseError("--patch, --minor and --major are mutually exclusive"))
    return Ok(chosen[0] if chosen else "patch")


def release(
    patch: bool = typer.Option(False, "--patch", help="Release the current version (default)."),
    minor: bool = typer.Option(False, "--minor", help="Release the next minor version."),
    major: bool = typer.Option(False, "--major", help="Release the next major version."),
) -> None:
    """Commit, changelog and tag a release, then open the next version."""
    ctx = build_context()
    segment = exit_on_error(select_segment(patch=patch, minor=minor, major=major), ctx)
    exit_on_error(ensure_commands("git", GENERATOR), ctx, ErrorCode.ENV_ERROR)
    exit_on_error(ensure_env_vars(TOKEN_ENV), ctx, ErrorCode.ENV_ERROR)

    changelog = ChangelogService(workdir=ctx.workdir, config=ctx.config.changelog, console=ctx.console)
    service = ReleaseService(
        workdir=ctx.workdir,
        console=ctx.console,
        changelog=changelog,
        version_file=ctx.config.version_file,
    )
    with cancellation(ctx.config.release.timeout) as run_ctx:
        version = exit_on_error(service.release(run_ctx, segment), ctx, ErrorCode.RELEASE_ERROR)
    ctx.console.success(f"Released {version.to_tag()}; push with: git push --follow-tags")
