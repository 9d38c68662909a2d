import os

import pytest
from dotenv import load_dotenv

from src.sqlchat.completion import CompletionClient, CompletionSuccess
from src.sqlchat.config import load_settings
from src.sqlchat.models import Message

load_dotenv()


@pytest.mark.skipif(not os.getenv("OPENAI_API_KEY"), reason="OPENAI_API_KEY not set")
def test_completion_smoke():
    env = dict(os.environ)
    env.setdefault("DATABASE_URL", "postgresql://unused")
    client = CompletionClient.from_settings(load_settings(env), timeout=60.0)
    outcome = client.complete([
        Message(role="system", content="Reply with a single SQL statement in a ```sql fence."),
        Message(role="user", content="Select the number one."),
    ])
    assert isinstance(outcome, CompletionSuccess)
    assert "```" in outcome.text
