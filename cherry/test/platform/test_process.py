"""Tests for cherry.platform.process module."""

from __future__ import annotations

import os
import sys
import threading
import time
from pathlib import Path

import pytest

from cherry.core.context import CANCELED, DEADLINE_EXCEEDED, Cancelled, Context
from cherry.core.result import Err, Ok
from cherry.platform.process import ProcessError, run

PY = sys.executable


def _py(code: str) -> list[str]:
    return [PY, "-c", code]


class TestProcessError:
    def test_message_combines_reason_and_stderr(self) -> None:
        error = ProcessError(
            command=("git", "rev-parse", "HEAD"),
            returncode=128,
            reason="exit status 128",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "exit status 128: fatal: not a git repository"
        assert error.started

    def test_spawn_failure_not_started(self) -> None:
        error = ProcessError(command=("nope",), returncode=-1, reason="No such file")
        assert not error.started

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "exit status 1")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run(Context.background(), tmp_path, _py("print('hello')"))

        assert result == Ok("hello")

    @pytest.mark.parametrize(
        "emitted",
        ["abc\n\n", "abc", "\n\nabc\n", "abc\n\n\n\n"],
    )
    def test_trims_surrounding_newlines(self, tmp_path: Path, emitted: str) -> None:
        code = f"import sys; sys.stdout.write({emitted!r})"
        result = run(Context.background(), tmp_path, _py(code))

        assert result == Ok("abc")

    def test_keeps_inner_newlines_and_spaces(self, tmp_path: Path) -> None:
        code = "import sys; sys.stdout.write('  a\\nb  \\n')"
        result = run(Context.background(), tmp_path, _py(code))

        assert result == Ok("  a\nb  ")

    def test_undecodable_output_is_replaced(self, tmp_path: Path) -> None:
        code = "import sys; sys.stdout.buffer.write(b'ok\\xff\\n')"
        result = run(Context.background(), tmp_path, _py(code))

        assert result == Ok("ok\ufffd")

    def test_undecodable_stderr_is_replaced(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.buffer.write(b'bad \\xfe byte\\n'); sys.exit(1)"
        result = run(Context.background(), tmp_path, _py(code))

        assert isinstance(result, Err)
        assert isinstance(result.error, ProcessError)
        assert result.error.stderr == "bad \ufffd byte"

    def test_stderr_discarded_on_success(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('noise'); print('out')"
        result = run(Context.background(), tmp_path, _py(code))

        assert result == Ok("out")

    def test_failure_combines_exit_and_stderr(self, tmp_path: Path) -> None:
        code = "import sys; sys.stderr.write('boom\\n'); sys.exit(3)"
        result = run(Context.background(), tmp_path, _py(code))

        assert isinstance(result, Err)
        assert isinstance(result.error, ProcessError)
        assert result.error.returncode == 3
        assert "exit status 3" in str(result.error)
        assert "boom" in str(result.error)
        assert str(result.error) == "exit status 3: boom"

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(Context.background(), tmp_path, ["nonexistent_command_12345"])

        assert isinstance(result, Err)
        assert isinstance(result.error, ProcessError)
        assert result.error.returncode == -1
        assert len(result.error.reason) > 0

    def test_missing_cwd_is_spawn_error(self, tmp_path: Path) -> None:
        result = run(Context.background(), tmp_path / "missing", _py("pass"))

        assert isinstance(result, Err)
        assert isinstance(result.error, ProcessError)
        assert not result.error.started

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "VERSION").write_text("1.0.0\n")

        result = run(Context.background(), tmp_path, _py("import os; print(os.listdir('.'))"))

        assert isinstance(result, Ok)
        assert "VERSION" in result.value

    def test_env_overrides_apply_to_child_only(self, tmp_path: Path) -> None:
        assert "CHERRY_TEST_VAR" not in os.environ
        code = "import os; print(os.environ['CHERRY_TEST_VAR'], 'PATH' in os.environ)"

        result = run(Context.background(), tmp_path, _py(code), env={"CHERRY_TEST_VAR": "linux"})

        assert result == Ok("linux True")
        assert "CHERRY_TEST_VAR" not in os.environ


class TestCancellation:
    def test_done_context_never_starts(self, tmp_path: Path) -> None:
        ctx = Context.background()
        ctx.cancel()
        marker = tmp_path / "started"

        result = run(ctx, tmp_path, _py(f"open({str(marker)!r}, 'w').close()"))

        assert result == Err(Cancelled(CANCELED))
        assert not marker.exists()

    def test_cancel_kills_running_process(self, tmp_path: Path) -> None:
        ctx = Context.background()
        timer = threading.Timer(0.2, ctx.cancel)
        timer.start()

        start = time.monotonic()
        result = run(ctx, tmp_path, _py("import time; time.sleep(30)"))
        elapsed = time.monotonic() - start
        timer.cancel()

        assert result == Err(Cancelled(CANCELED))
        assert elapsed < 10

    @pytest.mark.skipif(os.name != "posix", reason="process groups are POSIX only")
    def test_cancel_kills_grandchildren(self, tmp_path: Path) -> None:
        code = (
            "import subprocess, sys, time; "
            "subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(8)']); "
            "time.sleep(8)"
        )
        ctx = Context.background()
        timer = threading.Timer(0.3, ctx.cancel)
        timer.start()

        start = time.monotonic()
        result = run(ctx, tmp_path, _py(code))
        elapsed = time.monotonic() - start
        timer.cancel()

        assert result == Err(Cancelled(CANCELED))
        assert elapsed < 2

    def test_deadline_exceeded(self, tmp_path: Path) -> None:
        ctx = Context.with_timeout(0.2)

        start = time.monotonic()
        result = run(ctx, tmp_path, _py("import time; time.sleep(30)"))
        elapsed = time.monotonic() - start

        assert result == Err(Cancelled(DEADLINE_EXCEEDED))
        assert elapsed < 10

    def test_fast_command_within_deadline(self, tmp_path: Path) -> None:
        result = run(Context.with_timeout(30), tmp_path, _py("print('done')"))

        assert result == Ok("done")
