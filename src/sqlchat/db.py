"""
Database access for the chat loop (psycopg2).

Expose:
  - Database.connect(settings) -> Database   # opens + probes with SELECT now()
  - list_columns() -> rows from information_schema.columns (public schema)
  - first_row(table) -> Optional[Row]
  - query(statement, timeout_ms) -> List[Row]
  - close()

Rows are plain dicts (column -> JSON-ready scalar) so nothing downstream
depends on psycopg2 row types.
"""

import datetime
import json
import logging
from typing import Any, Dict, List, Optional, Union

import psycopg2
from psycopg2 import sql

from .config import Settings, get_db_conn

logger = logging.getLogger(__name__)

Scalar = Union[str, int, float, bool, None]
Row = Dict[str, Scalar]

COLUMNS_SQL = """
    SELECT
      table_name,
      column_name,
      data_type,
      is_nullable,
      column_default
    FROM
      information_schema.columns
    WHERE
      table_schema = 'public'
    ORDER BY
      table_name,
      ordinal_position;
"""


class DatabaseError(Exception):
    """A connection or statement failure, carrying the server's message."""


def _error_message(exc: psycopg2.Error) -> str:
    text = (exc.pgerror or str(exc) or exc.__class__.__name__).strip()
    # pgerror is prefixed with the severity, e.g. "ERROR:  relation ... does not exist"
    if text.startswith("ERROR:"):
        text = text[len("ERROR:"):].strip()
    return text.splitlines()[0] if text else exc.__class__.__name__


def to_scalar(value: Any) -> Scalar:
    """Coerce a driver value into str | int | float | bool | None."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    # Decimal, UUID, timedelta, intervals, ranges, ...
    return str(value)


class Database:
    def __init__(self, conn):
        self._conn = conn

    @classmethod
    def connect(cls, settings: Settings) -> "Database":
        try:
            conn = get_db_conn(settings)
        except psycopg2.Error as e:
            raise DatabaseError(_error_message(e)) from e
        db = cls(conn)
        try:
            db.query("SELECT now()")
        except DatabaseError:
            db.close()
            raise
        logger.info("database connection established")
        return db

    @property
    def closed(self) -> bool:
        return bool(self._conn.closed)

    def list_columns(self) -> List[Row]:
        return self.query(COLUMNS_SQL)

    def first_row(self, table: str) -> Optional[Row]:
        statement = sql.SQL("SELECT * FROM {} LIMIT 1").format(sql.Identifier(table))
        rows = self.query(statement)
        return rows[0] if rows else None

    def query(self, statement, timeout_ms: Optional[int] = None) -> List[Row]:
        """
        Run one statement in its own transaction and return its rows.

        Statements without a result set (DDL/DML) return []. Any driver error,
        including statement_timeout cancellation, is raised as DatabaseError
        after the transaction is rolled back.
        """
        try:
            with self._conn:
                with self._conn.cursor() as cur:
                    if timeout_ms is not None:
                        cur.execute("SET LOCAL statement_timeout = %s", (int(timeout_ms),))
                    cur.execute(statement)
                    if cur.description is None:
                        return []
                    columns = [d[0] for d in cur.description]
                    return [
                        {col: to_scalar(val) for col, val in zip(columns, r)}
                        for r in cur.fetchall()
                    ]
        except psycopg2.Error as e:
            raise DatabaseError(_error_message(e)) from e

    def close(self) -> None:
        if not self._conn.closed:
            self._conn.close()
            logger.info("database connection closed")

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
