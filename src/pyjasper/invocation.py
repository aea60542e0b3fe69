"""Immutable command descriptions for the JasperStarter report tool."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Final

DEFAULT_EXECUTABLE_NAME: Final[str] = "jasperstarter"
DEFAULT_FORMAT: Final[str] = "pdf"

ALLOWED_FORMATS: Final[frozenset[str]] = frozenset(
    {
        "pdf",
        "rtf",
        "xls",
        "xlsx",
        "docx",
        "odt",
        "ods",
        "pptx",
        "txt",
        "csv",
        "html",
        "xhtml",
        "xml",
        "jrprint",
        "ooxml",
    }
)

_REDACTED: Final[str] = "********"
REPORT_SOURCE_EXTENSION: Final[str] = ".jrxml"
COMPILED_REPORT_EXTENSION: Final[str] = ".jasper"


class Operation(str, Enum):
    """Sub-commands understood by the report tool."""

    COMPILE = "compile"
    PROCESS = "process"
    LIST_PARAMETERS = "list_parameters"

    @property
    def allowed_extensions(self) -> frozenset[str]:
        """Return the input file extensions accepted by this operation."""

        if self is Operation.COMPILE:
            return frozenset({REPORT_SOURCE_EXTENSION})
        return frozenset({REPORT_SOURCE_EXTENSION, COMPILED_REPORT_EXTENSION})


# Field name -> report tool flag, in the order the flags are emitted.
_DB_FLAGS: Final[tuple[tuple[str, str], ...]] = (
    ("driver", "-t"),
    ("username", "-u"),
    ("password", "-p"),
    ("host", "-H"),
    ("database", "-n"),
    ("port", "--db-port"),
    ("jdbc_driver", "--db-driver"),
    ("jdbc_url", "--db-url"),
    ("jdbc_dir", "--jdbc-dir"),
    ("db_sid", "--db-sid"),
    ("xml_xpath", "--xml-xpath"),
    ("data_file", "--data-file"),
    ("json_query", "--json-query"),
)


@dataclass(frozen=True)
class DbConnection:
    """Datasource settings passed to the report tool.

    Attributes:
        driver: Datasource type (e.g. ``postgres``, ``mysql``, ``json``).
        username: Database user.
        password: Database password.
        database: Database name.
        host: Optional database host.
        port: Optional database port.
        jdbc_driver: Optional JDBC driver class name.
        jdbc_url: Optional full JDBC URL.
        jdbc_dir: Optional directory holding JDBC driver jars.
        db_sid: Optional Oracle SID.
        xml_xpath: Optional XPath for XML datasources.
        data_file: Optional data file for file based datasources.
        json_query: Optional query for JSON datasources.
    """

    driver: str | None = None
    username: str | None = None
    password: str | None = None
    database: str | None = None
    host: str | None = None
    port: str | None = None
    jdbc_driver: str | None = None
    jdbc_url: str | None = None
    jdbc_dir: str | None = None
    db_sid: str | None = None
    xml_xpath: str | None = None
    data_file: str | None = None
    json_query: str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> DbConnection:
        """Create a connection from a plain mapping, rejecting unknown keys."""

        known = {item.name for item in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown db_connection keys: {', '.join(unknown)}")
        return cls(**{key: None if value is None else str(value) for key, value in raw.items()})

    def to_args(self, *, redact: bool = False) -> list[str]:
        """Return the datasource flags for every field that is set."""

        args: list[str] = []
        for name, flag in _DB_FLAGS:
            value = getattr(self, name)
            if value is not None and value != "":
                if redact and name == "password":
                    value = _REDACTED
                args.extend([flag, value])
        return args


@dataclass(frozen=True)
class ReportOptions:
    """Options for the ``process`` operation.

    Attributes:
        locale: Optional locale passed as ``--locale`` (e.g. ``en_US``).
        format: One output format or a sequence of formats.
        params: Report parameters, emitted in insertion order.
        db_connection: Optional datasource configuration.
        resources: Optional resource path passed as ``-r``.
    """

    locale: str | None = None
    format: str | Sequence[str] = DEFAULT_FORMAT
    params: Mapping[str, str] = field(default_factory=dict)
    db_connection: DbConnection | None = None
    resources: str | None = None

    def __post_init__(self) -> None:
        """Normalize formats to a tuple and params to a plain dict copy."""

        raw_format: object = self.format
        if raw_format is None:
            formats: tuple[object, ...] = ()
        elif isinstance(raw_format, str) or not isinstance(raw_format, Iterable):
            formats = (raw_format,)
        else:
            formats = tuple(raw_format)
        object.__setattr__(self, "format", tuple(str(item).strip().lower() for item in formats))
        object.__setattr__(
            self, "params", {str(key): str(value) for key, value in self.params.items()}
        )

    @property
    def formats(self) -> tuple[str, ...]:
        """Return the normalized output formats."""

        return tuple(self.format)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> ReportOptions:
        """Create options from the ``locale``/``format``/``params``/... mapping form."""

        db_raw = raw.get("db_connection")
        db_connection: DbConnection | None = None
        if isinstance(db_raw, DbConnection):
            db_connection = db_raw
        elif isinstance(db_raw, Mapping):
            db_connection = DbConnection.from_mapping(db_raw)
        elif db_raw is not None:
            raise ValueError("db_connection must be a mapping.")

        params = raw.get("params") or {}
        if not isinstance(params, Mapping):
            raise ValueError("params must be a mapping.")

        return cls(
            locale=_optional_str(raw.get("locale")),
            format=raw.get("format", DEFAULT_FORMAT),  # type: ignore[arg-type]
            params=params,  # type: ignore[arg-type]
            db_connection=db_connection,
            resources=_optional_str(raw.get("resources")),
        )


@dataclass(frozen=True)
class Invocation:
    """One command to run against the report tool.

    Attributes:
        operation: Sub-command to run.
        input_path: Validated absolute path of the report file.
        executable: Path of the report tool executable.
        output_path: Optional output location passed as ``-o``.
        options: Options used by the ``process`` operation.
    """

    operation: Operation
    input_path: Path
    executable: Path
    output_path: str | None = None
    options: ReportOptions | None = None

    def argv(self) -> list[str]:
        """Return the argument list that is handed to the process layer."""

        args = [str(self.executable)]
        options = self.options if self.operation is Operation.PROCESS else None
        if options is not None and options.locale:
            args.extend(["--locale", options.locale])
        args.extend([self.operation.value, str(self.input_path)])
        if self.output_path:
            args.extend(["-o", self.output_path])
        if options is not None:
            args.extend(self._process_args(options, quote=False))
        return args

    def render(self, *, redact: bool = False) -> str:
        """Return the command in the report tool's documented shell syntax.

        Args:
            redact: Replace the database password with a placeholder.
        """

        parts = [str(self.executable)]
        options = self.options if self.operation is Operation.PROCESS else None
        if options is not None and options.locale:
            parts.extend(["--locale", options.locale])
        parts.extend([self.operation.value, _quote(str(self.input_path))])
        if self.output_path:
            parts.extend(["-o", _quote(self.output_path)])
        if options is not None:
            parts.extend(self._process_args(options, quote=True, redact=redact))
        return " ".join(parts)

    @staticmethod
    def _process_args(
        options: ReportOptions, *, quote: bool, redact: bool = False
    ) -> list[str]:
        args = ["-f", *options.formats]
        if options.params:
            args.append("-P")
            for key, value in options.params.items():
                args.append(f"{key}={_quote(value) if quote else value}")
        if options.db_connection is not None:
            args.extend(options.db_connection.to_args(redact=redact))
        if options.resources:
            args.extend(["-r", options.resources])
        return args


def _quote(value: str) -> str:
    return f'"{value}"'


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
