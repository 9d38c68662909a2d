import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure project root is on sys.path so 'from src....' imports work under pytest
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Load .env early for all tests
load_dotenv()

from src.tests.fakes import column  # noqa: E402


@pytest.fixture
def catalog_columns():
    """information_schema rows for two tables, already in table/ordinal order."""
    return [
        column("movies", "id", "integer", nullable=False),
        column("movies", "title", "text"),
        column("movies", "released", "boolean"),
        column("users", "id", "int", nullable=False),
        column("users", "name", "text"),
    ]
