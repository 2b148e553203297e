from __future__ import annotations

import typer

from cherry.cli.commands._helpers import exit_on_error
from cherry.cli.context import build_context, cancellation
from cherry.core.errors import ErrorCode
from cherry.platform.env import ensure_commands, ensure_env_vars
from cherry.services.changelog import GENERATOR, TOKEN_ENV, ChangelogService


def changelog(
    version: str = typer.Argument(..., help="Upcoming release, e.g. v1.2.0"),
) -> None:
    """Regenerate CHANGELOG.md for an upcoming release."""
    ctx = build_context()
    exit_on_error(ensure_commands(GENERATOR), ctx, ErrorCode.ENV_ERROR)
    exit_on_error(ensure_env_vars(TOKEN_ENV), ctx, ErrorCode.ENV_ERROR)

    service = ChangelogService(workdir=ctx.workdir, config=ctx.config.changelog, console=ctx.console)
    with cancellation(ctx.config.changelog.timeout) as run_ctx:
        exit_on_error(service.generate(run_ctx, version), ctx)
    ctx.console.success(str(service.path))
