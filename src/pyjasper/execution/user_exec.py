"""Execution engine that runs commands as another OS user."""

from __future__ import annotations

import shlex
from pathlib import Path

from pyjasper.execution.base import CommandExecutor, ExecutionResult
from pyjasper.execution.local_exec import LocalExecutor
from pyjasper.util.logging import get_logger


class SwitchUserExecutor(CommandExecutor):
    """Wrap commands in ``su`` before handing them to another executor.

    This is a convenience for dropping privileges, not an isolation boundary.
    """

    def __init__(
        self,
        user: str,
        inner: CommandExecutor | None = None,
        su_binary: str = "su",
    ) -> None:
        """Initialize the executor.

        Args:
            user: User name or uid to run commands as.
            inner: Executor that runs the wrapped command. Defaults to local.
            su_binary: Binary used to switch user.
        """

        if not user.strip():
            raise ValueError("A user is required to switch user.")
        self._user = user
        self._inner = inner or LocalExecutor()
        self._su = su_binary
        self._logger = get_logger(self.__class__.__name__)

    @property
    def user(self) -> str:
        return self._user

    def run(
        self,
        command: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """Run a command as the configured user.

        Returns:
            ExecutionResult whose ``command`` is the wrapped ``su`` command.
        """

        if not command:
            raise ValueError("Command must contain at least one argument.")
        wrapped = self.wrap(command)
        self._logger.info("Running command as user %s", self._user)
        return self._inner.run(wrapped, cwd=cwd, env=env)

    def wrap(self, command: list[str]) -> list[str]:
        """Return the ``su -u <user> -c "<command>"`` argument list."""

        return [self._su, "-u", self._user, "-c", shlex.join(command)]
