from __future__ import annotations

import io
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from pyjasper.errors import ErrorCommandExecutable
from pyjasper.execution.local_exec import LocalExecutor
from pyjasper.execution.user_exec import SwitchUserExecutor

from conftest import RecordingExecutor


class FakePopen:
    def __init__(self, stdout: str, returncode: int) -> None:
        self.stdout = io.StringIO(stdout)
        self.returncode = returncode

    def __enter__(self) -> FakePopen:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stdout.close()

    def wait(self) -> int:
        return self.returncode


def test_local_executor_streams_output(monkeypatch: Any) -> None:
    calls: dict[str, Any] = {}

    def fake_popen(*args: Any, **kwargs: Any) -> FakePopen:
        calls["args"] = args
        calls["kwargs"] = kwargs
        return FakePopen("line one\r\nline two\n", 0)

    monkeypatch.setattr(subprocess, "Popen", fake_popen)

    executor = LocalExecutor()
    result = executor.run(
        ["jasperstarter", "compile", "report.jrxml"],
        cwd=Path("/tmp"),
        env={"LOCAL_EXEC_TEST": "1"},
    )

    assert result.exit_code == 0
    assert result.output_lines == ("line one", "line two")
    assert result.output == "line one\nline two"
    assert result.duration_s >= 0

    assert calls["args"][0] == ["jasperstarter", "compile", "report.jrxml"]
    kwargs = calls["kwargs"]
    assert kwargs["cwd"] == "/tmp"
    assert kwargs["stderr"] is subprocess.STDOUT
    assert kwargs["env"]["LOCAL_EXEC_TEST"] == "1"
    assert os.environ.items() <= kwargs["env"].items()
    assert "shell" not in kwargs
    assert kwargs["encoding"] == "utf-8"
    assert kwargs["errors"] == "replace"


def test_local_executor_reports_exit_code(monkeypatch: Any) -> None:
    monkeypatch.setattr(subprocess, "Popen", lambda *a, **k: FakePopen("boom\n", 3))

    result = LocalExecutor().run(["jasperstarter"])

    assert result.exit_code == 3
    assert result.output_lines == ("boom",)


def test_local_executor_wraps_spawn_failure(monkeypatch: Any) -> None:
    def fake_popen(*args: Any, **kwargs: Any) -> FakePopen:
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(subprocess, "Popen", fake_popen)

    with pytest.raises(ErrorCommandExecutable, match="Unable to start missing-tool"):
        LocalExecutor().run(["missing-tool"])


def test_local_executor_rejects_empty_command() -> None:
    with pytest.raises(ValueError):
        LocalExecutor().run([])


def test_switch_user_executor_builds_su_command() -> None:
    inner = RecordingExecutor()
    executor = SwitchUserExecutor("reports", inner=inner)

    executor.run(["/opt/js/jasperstarter", "compile", "/data/my report.jrxml"])

    assert inner.commands == [
        [
            "su",
            "-u",
            "reports",
            "-c",
            "/opt/js/jasperstarter compile '/data/my report.jrxml'",
        ]
    ]


def test_switch_user_executor_requires_user() -> None:
    with pytest.raises(ValueError):
        SwitchUserExecutor("  ")


def test_local_executor_replaces_undecodable_output() -> None:
    script = "import sys; sys.stdout.buffer.write(b'Relat\\xf3rio gerado\\n')"

    result = LocalExecutor().run([sys.executable, "-c", script])

    assert result.exit_code == 0
    assert result.output_lines == ("Relat\ufffdrio gerado",)
