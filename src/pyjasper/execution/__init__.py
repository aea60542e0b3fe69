"""Execution engine package."""

from pyjasper.execution.base import CommandExecutor, ExecutionResult
from pyjasper.execution.local_exec import LocalExecutor
from pyjasper.execution.user_exec import SwitchUserExecutor

__all__ = ["CommandExecutor", "ExecutionResult", "LocalExecutor", "SwitchUserExecutor"]
