from __future__ import annotations

from pathlib import Path

import pytest

from pyjasper.invocation import DbConnection, Invocation, Operation, ReportOptions


def _invocation(operation: Operation, options: ReportOptions | None = None) -> Invocation:
    return Invocation(
        operation=operation,
        input_path=Path("/reports/sales.jrxml"),
        executable=Path("/opt/js/bin/jasperstarter"),
        output_path="/out/sales",
        options=options,
    )


def test_db_connection_emits_flags_in_fixed_order() -> None:
    connection = DbConnection(
        database="db",
        driver="mysql",
        port="3306",
        host="localhost",
        password="secret",
        username="user",
        jdbc_dir="/jdbc",
    )

    assert connection.to_args() == [
        "-t",
        "mysql",
        "-u",
        "user",
        "-p",
        "secret",
        "-H",
        "localhost",
        "-n",
        "db",
        "--db-port",
        "3306",
        "--jdbc-dir",
        "/jdbc",
    ]


def test_db_connection_from_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="charset"):
        DbConnection.from_mapping({"driver": "postgres", "charset": "utf8"})


def test_db_connection_from_mapping_stringifies_values() -> None:
    connection = DbConnection.from_mapping({"driver": "postgres", "port": 5432})

    assert connection.port == "5432"


def test_report_options_normalize_formats_and_params() -> None:
    options = ReportOptions(format=(" PDF", "docx"), params={"year": 2024})  # type: ignore[dict-item]

    assert options.formats == ("pdf", "docx")
    assert options.params == {"year": "2024"}


def test_report_options_from_mapping_defaults() -> None:
    options = ReportOptions.from_mapping({})

    assert options.formats == ("pdf",)
    assert options.params == {}
    assert options.locale is None
    assert options.db_connection is None


def test_report_options_from_mapping_rejects_bad_params() -> None:
    with pytest.raises(ValueError, match="params"):
        ReportOptions.from_mapping({"params": ["a=b"]})


def test_locale_precedes_operation() -> None:
    invocation = _invocation(Operation.PROCESS, ReportOptions(locale="pt_BR"))

    assert invocation.argv()[:4] == ["/opt/js/bin/jasperstarter", "--locale", "pt_BR", "process"]


def test_options_ignored_outside_process() -> None:
    invocation = _invocation(Operation.COMPILE, ReportOptions(locale="pt_BR", resources="res"))

    assert invocation.render() == (
        '/opt/js/bin/jasperstarter compile "/reports/sales.jrxml" -o "/out/sales"'
    )


def test_render_can_redact_password() -> None:
    options = ReportOptions(db_connection=DbConnection(driver="postgres", password="hunter2"))
    invocation = _invocation(Operation.PROCESS, options)

    assert "hunter2" in invocation.render()
    assert "hunter2" not in invocation.render(redact=True)
    assert "-p ********" in invocation.render(redact=True)
    assert "hunter2" in invocation.argv()


def test_invocation_is_immutable() -> None:
    invocation = _invocation(Operation.LIST_PARAMETERS)

    with pytest.raises(AttributeError):
        invocation.output_path = "elsewhere"  # type: ignore[misc]
