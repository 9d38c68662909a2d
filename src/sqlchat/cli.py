"""
Interactive entrypoint: ask questions about a Postgres database in plain language.

Usage:
  python -m src.sqlchat.cli [--model gpt-4] [--examples]

Reads credentials from .env (see config.py). Type q at any prompt to quit.
Exit status is 0 on quit, 1 on configuration, database or model failures.
"""

import logging
import sys
from typing import List, Optional

from .completion import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_S, CompletionClient
from .config import ConfigError, load_settings
from .db import Database, DatabaseError
from .executor import STATEMENT_TIMEOUT_MS
from .session import Session
from .terminal import Terminal

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]):
    import argparse

    p = argparse.ArgumentParser(description="Chat with your Postgres database through an LLM")
    p.add_argument("--model", help="Chat model identifier (overrides OPENAI_MODEL)")
    p.add_argument("--examples", action="store_true",
                   help="Annotate the schema with one example value per column")
    p.add_argument("--max-retries", type=int, default=DEFAULT_MAX_RETRIES,
                   help="Completion attempts before giving up")
    p.add_argument("--statement-timeout-ms", type=int, default=STATEMENT_TIMEOUT_MS)
    p.add_argument("--completion-timeout", type=float, default=DEFAULT_TIMEOUT_S,
                   help="Seconds per completion call")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(model=args.model)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1
    logger.info("using model %s", settings.model)

    try:
        completion = CompletionClient.from_settings(
            settings, max_retries=args.max_retries, timeout=args.completion_timeout
        )
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 1

    try:
        db = Database.connect(settings)
    except DatabaseError as e:
        print(f"Could not connect to the database: {e}")
        return 1

    session = Session(
        db,
        completion,
        Terminal(),
        with_examples=args.examples,
        statement_timeout_ms=args.statement_timeout_ms,
    )
    try:
        return session.run()
    except DatabaseError as e:
        print(f"Could not read the database schema: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
