from __future__ import annotations

from pathlib import Path

from cherry.core.config import ChangelogConfig
from cherry.core.context import Context
from cherry.core.result import Ok
from cherry.output.console import MockConsole
from cherry.services.changelog import CHANGELOG_FILE, ChangelogService
from cherry.test._fakes import FakeRunner, failure


def _service(tmp_path: Path, runner: FakeRunner, config: ChangelogConfig | None = None) -> ChangelogService:
    return ChangelogService(
        workdir=tmp_path,
        config=config or ChangelogConfig(),
        console=MockConsole(),
        runner=runner,
    )


def test_filename(tmp_path: Path) -> None:
    service = _service(tmp_path, FakeRunner())

    assert service.filename == "CHANGELOG.md"
    assert service.path == tmp_path / CHANGELOG_FILE


def test_generate_invokes_generator(tmp_path: Path) -> None:
    runner = FakeRunner()

    result = _service(tmp_path, runner).generate(Context.background(), "v1.2.0")

    assert result == Ok("")
    assert runner.commands() == [
        (
            "github_changelog_generator",
            "--no-filter-by-milestone",
            "--exclude-labels",
            "question,duplicate,invalid,wontfix",
            "--future-release",
            "v1.2.0",
        )
    ]
    assert runner.calls[0].cwd == tmp_path


def test_custom_exclude_labels(tmp_path: Path) -> None:
    runner = FakeRunner()
    config = ChangelogConfig(exclude_labels=("wontfix",))

    _service(tmp_path, runner, config).generate(Context.background(), "v2.0.0")

    assert runner.calls[0].arg_after("--exclude-labels") == "wontfix"


def test_generator_failure_surfaced(tmp_path: Path) -> None:
    error = failure(["github_changelog_generator"], "Error: API rate limit exceeded", 1)
    runner = FakeRunner().on("github_changelog_generator", respond=lambda _: error)

    result = _service(tmp_path, runner).generate(Context.background(), "v1.2.0")

    assert result == error
