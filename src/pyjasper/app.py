"""Application wiring between configuration and the report tool facade."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pyjasper.config import AppConfig, config_to_dict, update_run_as_user
from pyjasper.execution.base import CommandExecutor, ExecutionResult
from pyjasper.invocation import Invocation, Operation, ReportOptions
from pyjasper.jasper import JasperStarter
from pyjasper.util.logging import get_logger

_LOGGER = get_logger("pyjasper.app")


class AppConfigError(RuntimeError):
    """Raised when configuration or runtime setup fails."""


@dataclass(frozen=True)
class OperationOutcome:
    """What a CLI-level operation produced.

    Attributes:
        command: Rendered command string.
        result: Execution result, or None for a dry run.
    """

    command: str
    result: ExecutionResult | None


def initialize_config(directory: Path) -> Path:
    """Create a default configuration file.

    Args:
        directory: Directory where ``pyjasper.yaml`` should be written.

    Returns:
        Path to the generated configuration file.

    Raises:
        AppConfigError: If the config file already exists.
    """

    directory = directory.resolve()
    config_path = directory / "pyjasper.yaml"
    if config_path.exists():
        raise AppConfigError(
            f"Config file already exists at {config_path}. Remove it or choose another "
            "directory."
        )
    config = AppConfig(executable_dir=directory / "bin" / "jasperstarter" / "bin")
    config_path.write_text(json.dumps(config_to_dict(config), indent=2), encoding="utf-8")
    _LOGGER.info("Initialized configuration at %s", config_path)
    return config_path


def build_report_tool(
    config: AppConfig,
    executor: CommandExecutor | None = None,
) -> JasperStarter:
    """Create a ``JasperStarter`` facade from configuration."""

    return JasperStarter(
        executable_dir=config.executable_dir,
        executable_name=config.executable_name,
        executor=executor,
    )


def run_operation(
    config: AppConfig,
    operation: Operation,
    input_path: Path,
    *,
    output_path: str | None = None,
    options: ReportOptions | Mapping[str, object] | None = None,
    run_as_user: str | None = None,
    dry_run: bool = False,
    executor: CommandExecutor | None = None,
) -> OperationOutcome:
    """Build one report tool command and optionally execute it.

    Args:
        config: Loaded application configuration.
        operation: Which report tool sub-command to run.
        input_path: Report file to operate on.
        output_path: Optional output location (compile and process only).
        options: Options for ``process``; defaults come from ``config``.
        run_as_user: User override; falls back to ``config.run_as_user``.
        dry_run: Only build and render the command.
        executor: Optional executor override.

    Returns:
        OperationOutcome with the rendered command and the result, if run.
    """

    if run_as_user:
        config = update_run_as_user(config, run_as_user)
    tool = build_report_tool(config, executor=executor)
    invocation: Invocation
    if operation is Operation.COMPILE:
        invocation = tool.compile(input_path, output_path)
    elif operation is Operation.PROCESS:
        invocation = tool.process(input_path, output_path, _with_defaults(config, options))
    else:
        invocation = tool.list_parameters(input_path)

    command = tool.output()
    if dry_run:
        return OperationOutcome(command=command, result=None)

    result = tool.execute(invocation, as_user=config.run_as_user)
    return OperationOutcome(command=command, result=result)


def _with_defaults(
    config: AppConfig,
    options: ReportOptions | Mapping[str, object] | None,
) -> ReportOptions | Mapping[str, object]:
    if options is None:
        return ReportOptions(locale=config.locale, format=config.default_format)
    if isinstance(options, ReportOptions):
        return options
    merged = dict(options)
    merged.setdefault("locale", config.locale)
    merged.setdefault("format", config.default_format)
    return merged
