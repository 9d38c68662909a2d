"""
Run extracted statements and turn the results into text for the next prompt.

Each statement runs on its own with a statement_timeout; one failing statement
never stops the ones after it. Result rows are cut down to roughly the first
MAX_SUMMARY_VALUES values before they are sent back to the model.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .db import DatabaseError, Row

logger = logging.getLogger(__name__)

STATEMENT_TIMEOUT_MS = 10_000
MAX_SUMMARY_VALUES = 100


@dataclass(frozen=True)
class QueryResult:
    statement: str
    rows: Tuple[Row, ...]
    row_count: int
    truncated: bool

    def summary(self) -> str:
        return (
            f"I ran `{self.statement}` and it returned {self.row_count} rows. "
            f"Here are the first few rows:\n\n"
            f"{json.dumps(list(self.rows), indent=2, default=str)}"
        )


@dataclass(frozen=True)
class QueryFailure:
    statement: str
    error_message: str

    def summary(self) -> str:
        return f"Result for `{self.statement}` was an error: {self.error_message}"


ExecutionOutcome = Union[QueryResult, QueryFailure]


def keep_first_values(rows: Sequence[Row], max_values: int = MAX_SUMMARY_VALUES) -> List[Row]:
    """Keep rows until the running count of values exceeds max_values (that row included)."""
    kept: List[Row] = []
    num_values = 0
    for row in rows:
        kept.append(row)
        num_values += len(row)
        if num_values > max_values:
            break
    return kept


def run_statement(db, statement: str, timeout_ms: int = STATEMENT_TIMEOUT_MS) -> ExecutionOutcome:
    try:
        rows = db.query(statement, timeout_ms)
    except DatabaseError as e:
        logger.info("statement failed: %s", e)
        return QueryFailure(statement=statement, error_message=str(e))
    kept = keep_first_values(rows)
    return QueryResult(
        statement=statement,
        rows=tuple(kept),
        row_count=len(rows),
        truncated=len(kept) < len(rows),
    )


def run_all(db, statements: Sequence[str], timeout_ms: int = STATEMENT_TIMEOUT_MS) -> List[ExecutionOutcome]:
    """Execute statements one at a time, in order; one outcome per statement."""
    return [run_statement(db, s, timeout_ms) for s in statements]


def summarize(outcomes: Sequence[ExecutionOutcome]) -> str:
    return "\n\n".join(o.summary() for o in outcomes)
