"""Tests for cherry.services.coverage module."""

from __future__ import annotations

from pathlib import Path

import pytest

from cherry.core.config import TestConfig
from cherry.core.context import Context
from cherry.core.result import Err, Ok, Result
from cherry.output.console import MockConsole
from cherry.platform.process import RunError
from cherry.services.coverage import (
    COVER_FILE,
    REPORT_FILE,
    CoverageIOError,
    CoverageService,
    strip_mode_header,
)
from cherry.test._fakes import Call, FakeRunner, failure

PACKAGES = ("example.com/app/a", "example.com/app/b", "example.com/app/c")


def _profile_lines(pkg: str, n: int) -> list[str]:
    return [f"{pkg}/file.go:{i}.1,{i}.10 1 1" for i in range(1, n + 1)]


class GoTool:
    """Fake ``go`` that writes cover profiles and the HTML report."""

    def __init__(self, lines_per_package: dict[str, int]) -> None:
        self.lines_per_package = lines_per_package
        self.profiles: list[Path] = []
        self.runner = (
            FakeRunner()
            .on("go", "list", "./...", output="\n".join(lines_per_package))
            .on("go", "test", respond=self._test)
            .on("go", "tool", "cover", respond=self._report)
        )

    def _test(self, call: Call) -> Result[str, RunError]:
        pkg = call.cmd[-1]
        profile = Path(call.arg_after("-coverprofile"))
        self.profiles.append(profile)
        mode = call.arg_after("-covermode")
        lines = _profile_lines(pkg, self.lines_per_package[pkg])
        profile.write_text(f"mode: {mode}\n" + "".join(f"{line}\n" for line in lines))
        return Ok(f"ok  \t{pkg}\t0.01s\tcoverage: 80.0% of statements")

    def _report(self, call: Call) -> Result[str, RunError]:
        Path(call.arg_after("-o")).write_text("<html></html>")
        return Ok("")


def _service(workdir: Path, runner: FakeRunner, **config: object) -> CoverageService:
    return CoverageService(
        workdir=workdir,
        config=TestConfig(**config),  # type: ignore[arg-type]
        console=MockConsole(),
        runner=runner,
    )


class TestStripModeHeader:
    def test_drops_first_line(self) -> None:
        assert strip_mode_header("mode: atomic\na 1\nb 2\n") == "a 1\nb 2\n"

    def test_header_only(self) -> None:
        assert strip_mode_header("mode: atomic\n") == ""

    def test_adds_missing_final_newline(self) -> None:
        assert strip_mode_header("mode: set\na 1") == "a 1\n"


class TestPackages:
    def test_drops_blank_lines(self, tmp_path: Path) -> None:
        runner = FakeRunner().on("go", "list", "./...", output="a\n\nb\n")

        assert _service(tmp_path, runner).packages(Context.background()) == Ok(["a", "b"])


class TestCoverage:
    def test_merges_profiles_in_order(self, tmp_path: Path) -> None:
        go = GoTool({PACKAGES[0]: 2, PACKAGES[1]: 3, PACKAGES[2]: 1})

        result = _service(tmp_path, go.runner).coverage(Context.background())

        report_dir = tmp_path / "coverage"
        assert result == Ok(report_dir / REPORT_FILE)
        assert (report_dir / REPORT_FILE).exists()

        merged = (report_dir / COVER_FILE).read_text().splitlines()
        expected = ["mode: atomic"]
        for pkg, n in go.lines_per_package.items():
            expected += _profile_lines(pkg, n)
        assert merged == expected

    def test_go_invocations(self, tmp_path: Path) -> None:
        go = GoTool({PACKAGES[0]: 1})

        _service(tmp_path, go.runner, cover_mode="count").coverage(Context.background())

        report_dir = tmp_path / "coverage"
        (test_call,) = [c for c in go.runner.calls if c.cmd[:2] == ("go", "test")]
        assert test_call.cmd[2:4] == ("-covermode", "count")
        assert test_call.cmd[-1] == PACKAGES[0]
        assert go.runner.commands("go", "tool", "cover")[0] == (
            "go",
            "tool",
            "cover",
            "-html",
            str(report_dir / COVER_FILE),
            "-o",
            str(report_dir / REPORT_FILE),
        )
        assert (report_dir / COVER_FILE).read_text().startswith("mode: count\n")

    def test_temporary_profiles_removed(self, tmp_path: Path) -> None:
        go = GoTool(dict.fromkeys(PACKAGES, 2))

        _service(tmp_path, go.runner).coverage(Context.background())

        assert len(go.profiles) == 3
        assert not any(p.exists() for p in go.profiles)

    def test_report_dir_recreated(self, tmp_path: Path) -> None:
        stale = tmp_path / "report" / "stale.txt"
        stale.parent.mkdir()
        stale.write_text("old")
        go = GoTool({PACKAGES[0]: 1})

        result = _service(tmp_path, go.runner, report_path="report").coverage(Context.background())

        assert result == Ok(tmp_path / "report" / REPORT_FILE)
        assert not stale.exists()

    def test_package_failure_aborts(self, tmp_path: Path) -> None:
        go = GoTool(dict.fromkeys(PACKAGES, 2))
        test_error = failure(["go", "test"], "--- FAIL: TestB", 1)

        def test_or_fail(call: Call) -> Result[str, RunError]:
            if call.cmd[-1] == PACKAGES[1]:
                Path(call.arg_after("-coverprofile")).unlink()
                return test_error
            return go._test(call)

        go.runner.on("go", "test", respond=test_or_fail)

        result = _service(tmp_path, go.runner).coverage(Context.background())

        assert result == test_error
        assert [c[-1] for c in go.runner.commands("go", "test")] == list(PACKAGES[:2])
        assert go.runner.commands("go", "tool") == []
        merged = (tmp_path / "coverage" / COVER_FILE).read_text().splitlines()
        assert merged == ["mode: atomic", *_profile_lines(PACKAGES[0], 2)]

    def test_list_failure(self, tmp_path: Path) -> None:
        list_error = failure(["go", "list"], "go: cannot find main module", 1)
        runner = FakeRunner().on("go", "list", respond=lambda _: list_error)

        result = _service(tmp_path, runner).coverage(Context.background())

        assert result == list_error

    def test_report_dir_not_creatable(self, tmp_path: Path) -> None:
        (tmp_path / "blocker").write_text("file, not a directory")
        runner = FakeRunner()

        result = _service(tmp_path, runner, report_path="blocker/coverage").coverage(
            Context.background()
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, CoverageIOError)
        assert runner.calls == []

    def test_reports_each_package(self, tmp_path: Path) -> None:
        go = GoTool({PACKAGES[0]: 1, PACKAGES[1]: 1})
        console = MockConsole()
        service = CoverageService(
            workdir=tmp_path, config=TestConfig(), console=console, runner=go.runner
        )

        service.coverage(Context.background())

        assert len(console.find("coverage: 80.0%")) == 2


@pytest.mark.parametrize("mode", ["set", "count", "atomic"])
def test_header_matches_mode(tmp_path: Path, mode: str) -> None:
    go = GoTool({PACKAGES[0]: 1})

    _service(tmp_path, go.runner, cover_mode=mode).coverage(Context.background())

    first = (tmp_path / "coverage" / COVER_FILE).read_text().splitlines()[0]
    assert first == f"mode: {mode}"
