"""Prompt templates for the conversation."""

from typing import List

from .models import Message

SYSTEM_PROMPT = (
    "You are a helpful assistant that writes SQL queries in order to answer "
    "questions about a database."
)

INITIAL_QUESTION_PROMPT = "What is the initial question?"
REPLY_PROMPT = (
    "How would you like to respond? Any query results will be automatically "
    "sent with your response. (q to quit)"
)

QUIT_TOKEN = "q"

_FIRST_MESSAGE = """Hello, I have a database with the following schema:

{schema}

I'd like to work with you to answer a question I have. I can run several queries to get the answer, and tell you the results along the way.
I'd like to use the fewest queries possible, so use joins where you can. If you're not sure what to do, you can ask me questions about the database
or run intermediate queries to learn more about the data.

The question I have is:

"{question}\""""


def opening_messages(schema_text: str, question: str) -> List[Message]:
    return [
        Message(role="system", content=SYSTEM_PROMPT),
        Message(role="user", content=_FIRST_MESSAGE.format(schema=schema_text, question=question)),
    ]


def continuation_message(reply: str, results: str) -> Message:
    # Query results ride along in the same user turn as the reply
    content = f"{reply}\n\n{results}" if results else reply
    return Message(role="user", content=content)
