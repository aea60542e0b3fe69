"""Build and run JasperStarter report tool commands."""

from pyjasper.builder import CommandBuilder
from pyjasper.errors import (
    ErrorCommandExecutable,
    InvalidCommandExecutable,
    InvalidFormat,
    InvalidInputFile,
    InvalidResourceDirectory,
    JasperError,
)
from pyjasper.execution.base import ExecutionResult
from pyjasper.invocation import ALLOWED_FORMATS, DbConnection, Invocation, Operation, ReportOptions
from pyjasper.jasper import BuildState, JasperStarter

__all__ = [
    "ALLOWED_FORMATS",
    "BuildState",
    "CommandBuilder",
    "DbConnection",
    "ErrorCommandExecutable",
    "ExecutionResult",
    "Invocation",
    "InvalidCommandExecutable",
    "InvalidFormat",
    "InvalidInputFile",
    "InvalidResourceDirectory",
    "JasperError",
    "JasperStarter",
    "Operation",
    "ReportOptions",
]
