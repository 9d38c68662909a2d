"""In-memory stand-ins for the database, terminal and OpenAI client."""

from types import SimpleNamespace

from src.sqlchat.db import DatabaseError


class FakeDatabase:
    """
    results: statement -> list of rows, or an Exception instance to raise.
    Unknown statements fail like a missing relation.
    """

    def __init__(self, columns=None, first_rows=None, results=None):
        self.columns = columns or []
        self.first_rows = first_rows or {}
        self.results = results or {}
        self.executed = []
        self.closed = False
        self.close_calls = 0

    def list_columns(self):
        return list(self.columns)

    def first_row(self, table):
        return self.first_rows.get(table)

    def query(self, statement, timeout_ms=None):
        self.executed.append((statement, timeout_ms))
        if statement == "":
            raise DatabaseError("can't execute an empty query")
        result = self.results.get(statement)
        if result is None:
            raise DatabaseError(f'relation for "{statement}" does not exist')
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.close_calls += 1
        self.closed = True


class FakeTerminal:
    def __init__(self, inputs):
        self.inputs = list(inputs)
        self.prompts = []
        self.printed = []
        self.tables = []

    def prompt_line(self, message):
        self.prompts.append(message)
        return self.inputs.pop(0)

    def print(self, content=""):
        self.printed.append(content)

    def print_table(self, rows):
        self.tables.append(rows)


class FakeOpenAI:
    """Mimics client.chat.completions.create; scripted items are texts or exceptions."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=item))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )


def column(table, name, data_type="text", nullable=True):
    return {
        "table_name": table,
        "column_name": name,
        "data_type": data_type,
        "is_nullable": "YES" if nullable else "NO",
        "column_default": None,
    }
