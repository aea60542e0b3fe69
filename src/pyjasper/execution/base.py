"""Execution engine base types and interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ExecutionResult:
    """Result of running a report tool command.

    Attributes:
        command: The command executed as a list of strings.
        exit_code: Exit code returned by the process.
        output_lines: Captured output lines, stderr merged into stdout.
        duration_s: Duration of the execution in seconds.
    """

    command: list[str]
    exit_code: int
    output_lines: tuple[str, ...]
    duration_s: float

    @property
    def output(self) -> str:
        """Return the captured output joined into one string."""

        return "\n".join(self.output_lines)


class CommandExecutor(ABC):
    """Abstract base class for command execution engines."""

    @abstractmethod
    def run(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """Run a command to completion and capture its output.

        Args:
            command: The command to execute.
            cwd: Optional working directory for the command.
            env: Optional environment variables to include.

        Returns:
            ExecutionResult containing output lines, exit code, and duration.

        Raises:
            ErrorCommandExecutable: If the process cannot be spawned.
        """
