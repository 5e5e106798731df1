"""Dialect-aware SQL constructs used by the pagination engine.

``unix_timestamp`` renders a DATETIME column as integer epoch seconds on
every supported backend, so sort keys and cursor anchors compare as plain
integers independent of the server time zone.

``DropTemporaryTable`` drops a session-scoped table. MySQL needs the
``TEMPORARY`` keyword so the statement does not implicitly commit the
enclosing transaction.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Integer, cast, extract, func
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.schema import DropTable
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.functions import FunctionElement


class unix_timestamp(FunctionElement):  # noqa: N801
    """``UNIX_TIMESTAMP(expr)`` portable across dialects."""

    type = BigInteger()
    name = "unix_timestamp"
    inherit_cache = True


@compiles(unix_timestamp)
def _unix_timestamp_default(element: unix_timestamp, compiler: Any, **kw: Any) -> str:
    return f"UNIX_TIMESTAMP({compiler.process(element.clauses, **kw)})"


@compiles(unix_timestamp, "sqlite")
def _unix_timestamp_sqlite(element: unix_timestamp, compiler: Any, **kw: Any) -> str:
    (argument,) = element.clauses.clauses
    return compiler.process(cast(func.strftime("%s", argument), Integer), **kw)


@compiles(unix_timestamp, "postgresql")
def _unix_timestamp_postgresql(element: unix_timestamp, compiler: Any, **kw: Any) -> str:
    (argument,) = element.clauses.clauses
    return compiler.process(cast(extract("epoch", argument), BigInteger), **kw)


def epoch_seconds(column: Any) -> ColumnElement[int]:
    """Epoch seconds of a DATETIME column, with NULL and zero dates as 0."""
    return func.coalesce(unix_timestamp(column), 0)


class DropTemporaryTable(DropTable):
    """``DROP TABLE`` for a table created with the TEMPORARY prefix."""


@compiles(DropTemporaryTable, "mysql")
def _drop_temporary_table_mysql(element: DropTemporaryTable, compiler: Any, **kw: Any) -> str:
    return f"DROP TEMPORARY TABLE {compiler.preparer.format_table(element.element)}"


__all__ = ["DropTemporaryTable", "epoch_seconds", "unix_timestamp"]
