"""CLI entrypoints for pyjasper."""

from __future__ import annotations

from pathlib import Path

import typer

from pyjasper.app import AppConfigError, OperationOutcome, initialize_config, run_operation
from pyjasper.config import AppConfig, load_config, update_executable_dir
from pyjasper.errors import JasperError
from pyjasper.invocation import Operation
from pyjasper.util.logging import configure_logging

app = typer.Typer(help="Compile and render JasperReports through jasperstarter.")

RUN_AS_HELP = "Run the report tool as this OS user (via su)."
DRY_RUN_HELP = "Print the command without executing it."


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Logging level (e.g., DEBUG, INFO, WARNING).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a pyjasper.yaml or pyproject.toml file, or a directory.",
    ),
    executable_dir: Path | None = typer.Option(
        None,
        "--executable-dir",
        help="Directory holding the jasperstarter executable; overrides the config file.",
    ),
) -> None:
    """Configure CLI-level options."""

    configure_logging(log_level)
    ctx.obj = {"config_path": config_path, "executable_dir": executable_dir}


@app.command()
def init(directory: Path = typer.Argument(Path("."))) -> None:
    """Write a default pyjasper.yaml configuration file."""

    try:
        config_path = initialize_config(directory)
    except AppConfigError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Created configuration at {config_path}")


@app.command("compile")
def compile_command(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Report source (.jrxml) to compile."),
    output: str | None = typer.Option(None, "--output", "-o", help="Output location."),
    run_as: str | None = typer.Option(None, "--run-as", help=RUN_AS_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help=DRY_RUN_HELP),
) -> None:
    """Compile a .jrxml report definition into a .jasper file."""

    _run(
        ctx,
        Operation.COMPILE,
        input_path,
        output_path=output,
        run_as_user=run_as,
        dry_run=dry_run,
    )


@app.command("process")
def process_command(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Report (.jrxml or .jasper) to render."),
    output: str | None = typer.Option(None, "--output", "-o", help="Output location."),
    formats: list[str] | None = typer.Option(
        None, "--format", "-f", help="Output format (repeatable)."
    ),
    locale: str | None = typer.Option(None, "--locale", help="Report locale, e.g. en_US."),
    params: list[str] | None = typer.Option(
        None, "--param", "-P", help="Report parameter KEY=VALUE (repeatable)."
    ),
    db_driver: str | None = typer.Option(None, "--db-driver", help="Datasource type (-t)."),
    db_user: str | None = typer.Option(None, "--db-user", help="Database user (-u)."),
    db_password: str | None = typer.Option(
        None, "--db-password", help="Database password (-p)."
    ),
    db_name: str | None = typer.Option(None, "--db-name", help="Database name (-n)."),
    db_host: str | None = typer.Option(None, "--db-host", help="Database host (-H)."),
    db_port: str | None = typer.Option(None, "--db-port", help="Database port."),
    data_file: str | None = typer.Option(
        None, "--data-file", help="Data file for file based datasources."
    ),
    resources: str | None = typer.Option(None, "--resources", "-r", help="Resource path."),
    run_as: str | None = typer.Option(None, "--run-as", help=RUN_AS_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help=DRY_RUN_HELP),
) -> None:
    """Render a report into one or more output formats."""

    options: dict[str, object] = {"params": _parse_params(params)}
    if formats:
        options["format"] = formats
    if locale:
        options["locale"] = locale
    if resources:
        options["resources"] = resources
    db_connection = {
        key: value
        for key, value in {
            "driver": db_driver,
            "username": db_user,
            "password": db_password,
            "database": db_name,
            "host": db_host,
            "port": db_port,
            "data_file": data_file,
        }.items()
        if value is not None
    }
    if db_connection:
        options["db_connection"] = db_connection

    _run(
        ctx,
        Operation.PROCESS,
        input_path,
        output_path=output,
        options=options,
        run_as_user=run_as,
        dry_run=dry_run,
    )


@app.command("list-parameters")
def list_parameters_command(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Report (.jrxml or .jasper) to inspect."),
    run_as: str | None = typer.Option(None, "--run-as", help=RUN_AS_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help=DRY_RUN_HELP),
) -> None:
    """List the parameters declared by a report."""

    _run(ctx, Operation.LIST_PARAMETERS, input_path, run_as_user=run_as, dry_run=dry_run)


def _run(
    ctx: typer.Context,
    operation: Operation,
    input_path: Path,
    *,
    output_path: str | None = None,
    options: dict[str, object] | None = None,
    run_as_user: str | None = None,
    dry_run: bool = False,
) -> None:
    try:
        config = _load(ctx)
        outcome = run_operation(
            config,
            operation,
            input_path,
            output_path=output_path,
            options=options,
            run_as_user=run_as_user,
            dry_run=dry_run,
        )
    except (JasperError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    _echo_outcome(outcome)


def _load(ctx: typer.Context) -> AppConfig:
    settings = ctx.obj if isinstance(ctx.obj, dict) else {}
    config = load_config(settings.get("config_path"))
    executable_dir = settings.get("executable_dir")
    if executable_dir is not None:
        config = update_executable_dir(config, executable_dir.resolve())
    return config


def _echo_outcome(outcome: OperationOutcome) -> None:
    if outcome.result is None:
        typer.echo(outcome.command)
        return
    for line in outcome.result.output_lines:
        typer.echo(line)


def _parse_params(items: list[str] | None) -> dict[str, str]:
    """Parse repeated KEY=VALUE report parameters."""

    parsed: dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise typer.BadParameter(f"Invalid parameter '{item}'. Use KEY=VALUE format.")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Parameter name cannot be empty.")
        parsed[key] = value
    return parsed
