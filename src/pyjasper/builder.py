"""Validation and construction of report tool invocations."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pyjasper.errors import InvalidFormat, InvalidInputFile
from pyjasper.invocation import (
    ALLOWED_FORMATS,
    DEFAULT_EXECUTABLE_NAME,
    Invocation,
    Operation,
    ReportOptions,
)
from pyjasper.util.logging import get_logger


class CommandBuilder:
    """Build validated invocations for the report tool.

    The builder holds no per-call state: every method returns a fresh
    ``Invocation`` and identical arguments always render identical commands.
    """

    def __init__(
        self,
        executable_dir: Path | str,
        executable_name: str = DEFAULT_EXECUTABLE_NAME,
    ) -> None:
        """Initialize the builder.

        Args:
            executable_dir: Directory containing the report tool executable.
            executable_name: File name of the report tool executable.
        """

        self._executable_dir = Path(executable_dir) if str(executable_dir) else None
        self._executable_name = executable_name
        self._logger = get_logger(self.__class__.__name__)

    @property
    def executable_dir(self) -> Path | None:
        """Return the configured executable directory, or None when unset."""

        return self._executable_dir

    @property
    def executable(self) -> Path:
        """Return the path used as the first argument of every command."""

        if self._executable_dir is None:
            return Path(self._executable_name)
        return self._executable_dir / self._executable_name

    def compile(self, input_path: Path | str, output_path: str | None = None) -> Invocation:
        """Build a ``compile`` invocation for a ``.jrxml`` report source."""

        return self._build(Operation.COMPILE, input_path, output_path)

    def process(
        self,
        input_path: Path | str,
        output_path: str | None = None,
        options: ReportOptions | Mapping[str, object] | None = None,
    ) -> Invocation:
        """Build a ``process`` invocation.

        Args:
            input_path: Report source or compiled report.
            output_path: Optional output location.
            options: Options as ``ReportOptions`` or the equivalent mapping.

        Raises:
            InvalidInputFile: If the input path fails validation.
            InvalidFormat: If a requested format is not supported.
        """

        report_options = _coerce_options(options)
        return self._build(Operation.PROCESS, input_path, output_path, report_options)

    def list_parameters(self, input_path: Path | str) -> Invocation:
        """Build a ``list_parameters`` invocation."""

        return self._build(Operation.LIST_PARAMETERS, input_path, None)

    def _build(
        self,
        operation: Operation,
        input_path: Path | str,
        output_path: str | None,
        options: ReportOptions | None = None,
    ) -> Invocation:
        resolved = validate_input_file(input_path, operation)
        if options is not None:
            validate_formats(options.formats)
        invocation = Invocation(
            operation=operation,
            input_path=resolved,
            executable=self.executable,
            output_path=output_path or None,
            options=options,
        )
        self._logger.debug(
            "Built %s command: %s", operation.value, invocation.render(redact=True)
        )
        return invocation


def validate_input_file(input_path: Path | str, operation: Operation) -> Path:
    """Return the absolute input path after checking it can be used.

    Raises:
        InvalidInputFile: If the path is empty, missing, unreadable or has an
            extension the operation does not accept.
    """

    if not str(input_path).strip():
        raise InvalidInputFile("No input file given.")
    path = Path(input_path)
    if not path.is_file():
        raise InvalidInputFile(f"Input file does not exist: {input_path}")
    if not os.access(path, os.R_OK):
        raise InvalidInputFile(f"Input file is not readable: {input_path}")
    allowed = operation.allowed_extensions
    if path.suffix.lower() not in allowed:
        raise InvalidInputFile(
            f"Unsupported input file extension '{path.suffix}' for {operation.value}; "
            f"expected one of {', '.join(sorted(allowed))}."
        )
    return path.resolve()


def validate_formats(formats: tuple[str, ...]) -> None:
    """Check every requested output format against the supported set."""

    if not formats:
        raise InvalidFormat("At least one output format is required.")
    for fmt in formats:
        if fmt not in ALLOWED_FORMATS:
            raise InvalidFormat(
                f"Unsupported format '{fmt}'; expected one of {', '.join(sorted(ALLOWED_FORMATS))}."
            )


def _coerce_options(options: ReportOptions | Mapping[str, object] | None) -> ReportOptions:
    if options is None:
        return ReportOptions()
    if isinstance(options, ReportOptions):
        return options
    return ReportOptions.from_mapping(options)
