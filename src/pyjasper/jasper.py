"""JasperStarter facade: build report tool commands and run them."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path

from pyjasper.builder import CommandBuilder
from pyjasper.errors import (
    ErrorCommandExecutable,
    InvalidCommandExecutable,
    InvalidResourceDirectory,
)
from pyjasper.execution.base import CommandExecutor, ExecutionResult
from pyjasper.execution.local_exec import LocalExecutor
from pyjasper.execution.user_exec import SwitchUserExecutor
from pyjasper.invocation import DEFAULT_EXECUTABLE_NAME, Invocation, ReportOptions
from pyjasper.util.logging import get_logger
from pyjasper.util.observability import ObservabilityManager, create_observability_manager


class BuildState(str, Enum):
    """Lifecycle of a ``JasperStarter`` instance."""

    UNBUILT = "unbuilt"
    BUILT = "built"
    EXECUTED = "executed"


class JasperStarter:
    """Build and execute commands for the JasperStarter report tool.

    Every build method returns an immutable ``Invocation`` which can be passed
    to ``execute`` directly. The instance also remembers the last built
    invocation so ``compile(...)`` followed by ``execute()`` works as well.
    Instances are not safe for concurrent use; callers that share one must
    synchronize externally.
    """

    def __init__(
        self,
        executable_dir: Path | str,
        executable_name: str = DEFAULT_EXECUTABLE_NAME,
        executor: CommandExecutor | None = None,
        observability: ObservabilityManager | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            executable_dir: Directory containing the report tool executable.
            executable_name: File name of the report tool executable.
            executor: Executor used to spawn processes. Defaults to local.
            observability: Optional event logger and metrics container.
        """

        self._builder = CommandBuilder(executable_dir, executable_name)
        self._executor = executor or LocalExecutor()
        self._observability = observability or create_observability_manager()
        self._logger = get_logger(self.__class__.__name__)
        self._invocation: Invocation | None = None
        self._result: ExecutionResult | None = None
        self._state = BuildState.UNBUILT

    @property
    def state(self) -> BuildState:
        return self._state

    @property
    def invocation(self) -> Invocation | None:
        """Return the last built invocation."""

        return self._invocation

    @property
    def last_result(self) -> ExecutionResult | None:
        """Return the result of the last execution since the last build."""

        return self._result

    @property
    def observability(self) -> ObservabilityManager:
        return self._observability

    def compile(self, input_path: Path | str, output_path: str | None = None) -> Invocation:
        """Build a command compiling a ``.jrxml`` report into ``.jasper``."""

        return self._remember(self._builder.compile(input_path, output_path))

    def process(
        self,
        input_path: Path | str,
        output_path: str | None = None,
        options: ReportOptions | Mapping[str, object] | None = None,
    ) -> Invocation:
        """Build a command rendering a report into one or more output formats."""

        return self._remember(self._builder.process(input_path, output_path, options))

    def list_parameters(self, input_path: Path | str) -> Invocation:
        """Build a command listing the parameters declared by a report."""

        return self._remember(self._builder.list_parameters(input_path))

    def output(self) -> str:
        """Return the rendered command of the last built invocation.

        Raises:
            InvalidCommandExecutable: If nothing has been built yet.
        """

        if self._invocation is None:
            raise InvalidCommandExecutable("No command has been built yet.")
        return self._invocation.render()

    def execute(
        self,
        invocation: Invocation | None = None,
        as_user: str | None = None,
    ) -> ExecutionResult:
        """Run an invocation and capture its output.

        Args:
            invocation: Invocation to run. Defaults to the last built one; an
                explicit invocation becomes the one ``output()`` reports.
            as_user: Optional OS user to run the command as via ``su``.

        Returns:
            ExecutionResult of a successful run.

        Raises:
            InvalidCommandExecutable: If there is nothing to run.
            InvalidResourceDirectory: If the executable directory is unusable.
            ErrorCommandExecutable: If the process fails to start or exits
                with a non-zero status.
        """

        target = invocation or self._invocation
        if target is None:
            raise InvalidCommandExecutable("No command to execute; build one first.")
        self._check_executable_dir()

        executor: CommandExecutor = self._executor
        if as_user:
            executor = SwitchUserExecutor(as_user, inner=self._executor)

        self._logger.debug("Executing %s", target.render(redact=True))
        command = target.argv()
        event_payload = {"operation": target.operation.value, "input": str(target.input_path)}
        try:
            with self._observability.track_duration("invocation.duration"):
                result = executor.run(command)
        except ErrorCommandExecutable as exc:
            self._observability.log_event(
                "invocation.failed", {**event_payload, "error": str(exc)}, level="ERROR"
            )
            raise

        self._invocation = target
        self._result = result
        self._state = BuildState.EXECUTED
        if result.exit_code != 0:
            self._observability.log_event(
                "invocation.failed",
                {**event_payload, "exit_code": result.exit_code},
                level="ERROR",
            )
            tail = "\n".join(result.output_lines[-20:])
            raise ErrorCommandExecutable(
                f"{target.operation.value} exited with code {result.exit_code}"
                + (f":\n{tail}" if tail else "."),
                result=result,
            )
        self._observability.log_event(
            "invocation.executed",
            {**event_payload, "exit_code": result.exit_code, "duration_s": result.duration_s},
        )
        return result

    def _remember(self, invocation: Invocation) -> Invocation:
        self._invocation = invocation
        self._result = None
        self._state = BuildState.BUILT
        self._observability.log_event(
            "invocation.built",
            {"operation": invocation.operation.value, "command": invocation.render(redact=True)},
            level="DEBUG",
        )
        return invocation

    def _check_executable_dir(self) -> None:
        directory = self._builder.executable_dir
        if directory is None:
            raise InvalidResourceDirectory("No report tool directory is configured.")
        if not directory.is_dir():
            raise InvalidResourceDirectory(
                f"Report tool directory does not exist: {directory}"
            )
