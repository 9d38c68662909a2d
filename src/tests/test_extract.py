import pytest

from src.sqlchat.extract import extract_statements


def test_two_fenced_blocks_in_order():
    text = "x```sql\nSELECT 1```y```SELECT 2```z"
    assert extract_statements(text) == ["SELECT 1", "SELECT 2"]


def test_no_fences_yields_nothing():
    assert extract_statements("Could you tell me more about the users table?") == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a```SELECT 1", []),
        ("a```SELECT 1```b```SELECT 2", ["SELECT 1"]),
        ("```sql\nSELECT 1\n```\nthen\n```sql\nSELECT 2\n```\n```SELECT 3", ["SELECT 1", "SELECT 2"]),
    ],
)
def test_unmatched_trailing_fence_is_ignored(text, expected):
    assert extract_statements(text) == expected


def test_empty_block_is_kept():
    assert extract_statements("try this: ``````") == [""]
    assert extract_statements("```sql\n```") == [""]


def test_only_leading_sql_tag_is_removed():
    text = "```sql\nSELECT sql FROM t\n```"
    assert extract_statements(text) == ["SELECT sql FROM t"]


def test_sql_prefix_of_other_word_is_not_a_tag():
    # "sqlite" is a different tag; leave it alone
    assert extract_statements("```sqlite\nSELECT 1\n```") == ["sqlite\nSELECT 1"]


def test_multiline_statement_is_trimmed_not_altered():
    text = "Here you go:\n```sql\n  SELECT u.name\n  FROM users u\n  JOIN movies m ON m.id = u.id;\n```\n"
    assert extract_statements(text) == ["SELECT u.name\n  FROM users u\n  JOIN movies m ON m.id = u.id;"]
