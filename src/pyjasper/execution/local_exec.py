"""Local execution engine that streams process output."""

from __future__ import annotations

import os
import subprocess
import time
from pathlib import Path

from pyjasper.errors import ErrorCommandExecutable
from pyjasper.execution.base import CommandExecutor, ExecutionResult
from pyjasper.util.logging import get_logger


class LocalExecutor(CommandExecutor):
    """Execute commands on the local host without a shell."""

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__name__)

    def run(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """Run a command locally, streaming stdout line by line.

        Args:
            command: The command to execute.
            cwd: Optional working directory.
            env: Optional environment variables to include.

        Returns:
            ExecutionResult with output lines, exit code, and duration.
        """

        if not command:
            raise ValueError("Command must contain at least one argument.")

        merged_env = os.environ.copy()
        if env:
            merged_env.update(env)

        self._logger.info("Running command: %s", command)
        start = time.monotonic()
        lines: list[str] = []
        try:
            with subprocess.Popen(
                command,
                cwd=str(cwd) if cwd is not None else None,
                env=merged_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
            ) as process:
                for raw_line in process.stdout or ():
                    line = raw_line.rstrip("\r\n")
                    self._logger.debug("%s", line)
                    lines.append(line)
                exit_code = process.wait()
        except OSError as exc:
            raise ErrorCommandExecutable(f"Unable to start {command[0]}: {exc}") from exc
        duration = time.monotonic() - start
        self._logger.info(
            "Command finished with exit code %s in %.2fs.",
            exit_code,
            duration,
        )

        return ExecutionResult(
            command=list(command),
            exit_code=exit_code,
            output_lines=tuple(lines),
            duration_s=duration,
        )
