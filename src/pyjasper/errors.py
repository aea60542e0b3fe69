"""Error types raised while building or running report tool commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyjasper.execution.base import ExecutionResult


class JasperError(RuntimeError):
    """Base class for all pyjasper failures."""


class InvalidInputFile(JasperError, ValueError):
    """Raised when the input report file is empty, missing or unsupported."""


class InvalidFormat(JasperError, ValueError):
    """Raised when an output format is not supported by the report tool."""


class InvalidCommandExecutable(JasperError):
    """Raised when execution is requested before any command was built."""


class InvalidResourceDirectory(JasperError):
    """Raised when the configured executable directory is unusable."""


class ErrorCommandExecutable(JasperError):
    """Raised when the report tool could not be run or exited with an error.

    Attributes:
        result: Captured execution result, when the process was started.
    """

    def __init__(self, message: str, result: ExecutionResult | None = None) -> None:
        super().__init__(message)
        self.result = result

    @property
    def output(self) -> list[str]:
        """Return the captured diagnostic output lines."""

        if self.result is None:
            return []
        return list(self.result.output_lines)
