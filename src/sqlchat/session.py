"""
Conversation session: the question -> SQL -> results -> reply loop.

States:
  INITIALIZING      -> read the schema, build the opening messages
  AWAITING_QUESTION -> ask the human for the first question
  GENERATING        -> call the model with the full history
  EXTRACTING        -> pull fenced statements out of the answer
  EXECUTING         -> run them, collect the result summary
  AWAITING_REPLY    -> ask for the next reply, fold the summary into it
  TERMINATED        -> connection released, exit_code set

The session is the only owner of the message history and only appends to it.
Each step method performs one transition so tests can drive them one by one.
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple

from . import executor
from .completion import CompletionClient, ExhaustedRetries
from .extract import extract_statements
from .models import Message
from .prompts import (
    INITIAL_QUESTION_PROMPT,
    QUIT_TOKEN,
    REPLY_PROMPT,
    continuation_message,
    opening_messages,
)
from .schema import SchemaDescription, describe

logger = logging.getLogger(__name__)


class SessionState(Enum):
    INITIALIZING = "initializing"
    AWAITING_QUESTION = "awaiting_question"
    GENERATING = "generating"
    EXTRACTING = "extracting"
    EXECUTING = "executing"
    AWAITING_REPLY = "awaiting_reply"
    TERMINATED = "terminated"


class InvalidTransition(RuntimeError):
    pass


class Session:
    def __init__(self, db, completion: CompletionClient, terminal,
                 with_examples: bool = False,
                 statement_timeout_ms: int = executor.STATEMENT_TIMEOUT_MS):
        self.db = db
        self.completion = completion
        self.terminal = terminal
        self.with_examples = with_examples
        self.statement_timeout_ms = statement_timeout_ms

        self.state = SessionState.INITIALIZING
        self.exit_code: Optional[int] = None
        self.schema: Optional[SchemaDescription] = None
        self._messages: List[Message] = []
        self._last_response = ""
        self._statements: List[str] = []
        self._results = ""

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def _expect(self, *states: SessionState) -> None:
        if self.state not in states:
            raise InvalidTransition(f"cannot step from {self.state.value}")

    # --- Steps ---

    def initialize(self) -> None:
        """Read the schema. DatabaseError propagates: no schema, no session."""
        self._expect(SessionState.INITIALIZING)
        self.schema = describe(self.db, with_examples=self.with_examples)
        logger.info("schema loaded: %d tables", len(self.schema.tables))
        self.state = SessionState.AWAITING_QUESTION

    def ask_question(self) -> None:
        self._expect(SessionState.AWAITING_QUESTION)
        question = self.terminal.prompt_line(INITIAL_QUESTION_PROMPT)
        if question == QUIT_TOKEN:
            self.terminate(0)
            return
        self._messages.extend(opening_messages(self.schema.render(), question))
        self.state = SessionState.GENERATING

    def generate(self) -> None:
        self._expect(SessionState.GENERATING)
        self.terminal.print("Calling GPT...")
        outcome = self.completion.complete(self._messages)
        if isinstance(outcome, ExhaustedRetries):
            self.terminal.print(f"ERROR {outcome.last_error}")
            self.terminal.print("Giving up.")
            self.terminate(1)
            return
        self.terminal.print(f"completion: {outcome.elapsed:.3f}s")
        if outcome.usage is not None:
            self.terminal.print(str(outcome.usage))
        self.terminal.print(f"\n\nASSISTANT:\n\n{outcome.text}\n")
        self._messages.append(Message(role="assistant", content=outcome.text))
        self._last_response = outcome.text
        self.state = SessionState.EXTRACTING

    def extract(self) -> None:
        self._expect(SessionState.EXTRACTING)
        self._statements = extract_statements(self._last_response)
        self.state = SessionState.EXECUTING

    def execute(self) -> None:
        self._expect(SessionState.EXECUTING)
        outcomes = executor.run_all(self.db, self._statements, self.statement_timeout_ms)
        for outcome in outcomes:
            if isinstance(outcome, executor.QueryFailure):
                self.terminal.print_table([{"error": f"Error: {outcome.error_message}"}])
            else:
                self.terminal.print_table(list(outcome.rows))
        self._results = executor.summarize(outcomes)
        self.state = SessionState.AWAITING_REPLY

    def await_reply(self) -> None:
        self._expect(SessionState.AWAITING_REPLY)
        reply = self.terminal.prompt_line(REPLY_PROMPT)
        if reply == QUIT_TOKEN:
            self.terminate(0)
            return
        self._messages.append(continuation_message(reply, self._results))
        self._results = ""
        self.state = SessionState.GENERATING

    def terminate(self, exit_code: int) -> None:
        if self.state is SessionState.TERMINATED:
            return
        self.db.close()
        self.exit_code = exit_code
        self.state = SessionState.TERMINATED

    # --- Driver ---

    _STEPS = {
        SessionState.INITIALIZING: initialize,
        SessionState.AWAITING_QUESTION: ask_question,
        SessionState.GENERATING: generate,
        SessionState.EXTRACTING: extract,
        SessionState.EXECUTING: execute,
        SessionState.AWAITING_REPLY: await_reply,
    }

    def run(self) -> int:
        """Step until terminated; returns the process exit code."""
        try:
            while self.state is not SessionState.TERMINATED:
                self._STEPS[self.state](self)
        finally:
            # Exceptions (schema failure, Ctrl-C) still release the connection
            if self.state is not SessionState.TERMINATED:
                self.db.close()
        return self.exit_code
