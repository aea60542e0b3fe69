from __future__ import annotations

from pathlib import Path

import pytest

from pyjasper.execution.base import CommandExecutor, ExecutionResult


class RecordingExecutor(CommandExecutor):
    """Executor double that records commands instead of spawning them."""

    def __init__(self, exit_code: int = 0, output_lines: tuple[str, ...] = ()) -> None:
        self.exit_code = exit_code
        self.output_lines = output_lines
        self.commands: list[list[str]] = []

    def run(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        self.commands.append(list(command))
        return ExecutionResult(
            command=list(command),
            exit_code=self.exit_code,
            output_lines=self.output_lines,
            duration_s=0.01,
        )


@pytest.fixture
def report_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    report = tmp_path / "examples" / "hello_world.jrxml"
    report.parent.mkdir()
    report.write_text("<jasperReport/>", encoding="utf-8")
    return Path("examples") / "hello_world.jrxml"


@pytest.fixture
def executable_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bin" / "jasperstarter" / "bin"
    directory.mkdir(parents=True)
    return directory
