from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from cherry.cli.commands._helpers import exit_on_error
from cherry.cli.context import build_context, cancellation
from cherry.core.context import Context
from cherry.core.errors import ErrorCode
from cherry.core.result import Err, Ok
from cherry.git.repository import Repository
from cherry.platform.env import ensure_commands
from cherry.services.build import BuildService


def default_binary(ctx: Context, workdir: Path) -> str:
    """bin/<repository name>, falling back to the directory name without a remote."""
    match Repository(workdir).name(ctx):
        case Ok((_, name)):
            return f"bin/{name}"
        case Err(_):
            return f"bin/{workdir.name}"


def build(
    main_file: str | None = typer.Option(None, "--main-file", help="Path to the main package file."),
    binary_file: str | None = typer.Option(
        None, "--binary-file", help="Output path (default: bin/<repo>)."
    ),
    version_package: str | None = typer.Option(
        None, "--version-package", help="Package holding the Version/Revision/... variables."
    ),
    cross_compile: bool | None = typer.Option(
        None,
        "--cross-compile/--no-cross-compile",
        help="Also build for every supported GOOS/GOARCH.",
    ),
) -> None:
    """Build the binary with version metadata stamped in."""
    ctx = build_context()
    exit_on_error(ensure_commands("go", "git"), ctx, ErrorCode.ENV_ERROR)

    config = ctx.config.build
    config = replace(
        config,
        main_file=main_file or config.main_file,
        binary_file=binary_file or config.binary_file,
        version_package=version_package or config.version_package,
        cross_compile=config.cross_compile if cross_compile is None else cross_compile,
    )

    with cancellation(config.timeout) as run_ctx:
        out = config.binary_file or default_binary(run_ctx, ctx.workdir)
        service = BuildService(
            workdir=ctx.workdir,
            config=config,
            console=ctx.console,
            version_file=ctx.config.version_file,
        )

        ctx.console.header("Build")
        flags = exit_on_error(service.prepare(run_ctx), ctx)
        path = exit_on_error(service.build(run_ctx, config.main_file, out, flags=flags), ctx)
        ctx.console.success(str(path))

        if config.cross_compile:
            ctx.console.header("Cross-compile")
            paths = exit_on_error(
                service.build_all(run_ctx, config.main_file, out, flags=flags), ctx
            )
            for p in paths:
                ctx.console.success(str(p))
