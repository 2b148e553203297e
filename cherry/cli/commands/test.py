from __future__ import annotations

from dataclasses import replace

import typer

from cherry.cli.commands._helpers import exit_on_error
from cherry.cli.context import build_context, cancellation
from cherry.core.errors import ErrorCode
from cherry.platform.env import ensure_commands
from cherry.services.coverage import CoverageService


def test(
    cover_mode: str | None = typer.Option(
        None, "--cover-mode", help="go test -covermode: set, count or atomic."
    ),
    report_path: str | None = typer.Option(
        None, "--report-path", help="Directory for cover.out and index.html."
    ),
) -> None:
    """Run tests with coverage and write an HTML report."""
    ctx = build_context()
    exit_on_error(ensure_commands("go"), ctx, ErrorCode.ENV_ERROR)

    config = ctx.config.test
    config = replace(
        config,
        cover_mode=cover_mode or config.cover_mode,
        report_path=report_path or config.report_path,
    )

    service = CoverageService(workdir=ctx.workdir, config=config, console=ctx.console)
    with cancellation(config.timeout) as run_ctx:
        report = exit_on_error(service.coverage(run_ctx), ctx, ErrorCode.TEST_ERROR)
    ctx.console.success(f"Coverage report: {report}")
