"""
Schema introspection -> prompt-ready CREATE TABLE text.

Output format (one block per table, blocks joined by a blank line):

  CREATE TABLE users (
    id integer NOT NULL,
    name text NULL; Example: Ada
  );

Column order is whatever information_schema returns for
ORDER BY table_name, ordinal_position; tables keep first-appearance order.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

_MISSING = object()


@dataclass(frozen=True)
class ColumnDescriptor:
    table: str
    name: str
    data_type: str
    nullable: bool
    example_value: Optional[str] = None

    def render(self) -> str:
        line = f"  {self.name} {self.data_type} {'NULL' if self.nullable else 'NOT NULL'}"
        if self.example_value is not None:
            line += f"; Example: {self.example_value}"
        return line


@dataclass(frozen=True)
class TableDeclaration:
    name: str
    columns: Tuple[ColumnDescriptor, ...]

    def render(self) -> str:
        body = ",\n".join(c.render() for c in self.columns)
        return f"CREATE TABLE {self.name} (\n{body}\n);"


@dataclass(frozen=True)
class SchemaDescription:
    tables: Tuple[TableDeclaration, ...]

    def render(self) -> str:
        return "\n\n".join(t.render() for t in self.tables)

    def __str__(self) -> str:
        return self.render()


def example_text(value: Any) -> str:
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def group_columns(rows: List[Dict[str, Any]]) -> Dict[str, List[ColumnDescriptor]]:
    """Group information_schema rows by table, keeping first-appearance order."""
    tables: Dict[str, List[ColumnDescriptor]] = {}
    for r in rows:
        col = ColumnDescriptor(
            table=r["table_name"],
            name=r["column_name"],
            data_type=r["data_type"],
            nullable=r["is_nullable"] == "YES",
        )
        tables.setdefault(col.table, []).append(col)
    return tables


def _annotate(columns: List[ColumnDescriptor], row: Optional[Dict[str, Any]]) -> List[ColumnDescriptor]:
    if row is None:
        # Empty table: nothing to show
        return columns
    return [
        ColumnDescriptor(c.table, c.name, c.data_type, c.nullable, example_text(row.get(c.name, _MISSING)))
        for c in columns
    ]


def describe(db, with_examples: bool = False) -> SchemaDescription:
    """
    Read column metadata from `db` and build the schema description.

    With `with_examples`, one row per table is fetched and each column gets
    that row's value as an inline example. Database errors propagate: the
    session cannot start without a schema.
    """
    grouped = group_columns(db.list_columns())
    tables = []
    for name, columns in grouped.items():
        if with_examples:
            columns = _annotate(columns, db.first_row(name))
        tables.append(TableDeclaration(name=name, columns=tuple(columns)))
    return SchemaDescription(tables=tuple(tables))
