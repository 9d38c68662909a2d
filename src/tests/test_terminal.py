import builtins

from src.sqlchat.terminal import Terminal


def test_prompt_line_reads_input(monkeypatch):
    seen = []

    def fake_input(prompt):
        seen.append(prompt)
        return "top 5 movies by rating"

    monkeypatch.setattr(builtins, "input", fake_input)
    assert Terminal().prompt_line("What is the initial question?") == "top 5 movies by rating"
    assert seen == ["? What is the initial question? "]


def test_end_of_input_quits(monkeypatch):
    def eof(prompt):
        raise EOFError

    monkeypatch.setattr(builtins, "input", eof)
    assert Terminal().prompt_line("How would you like to respond?") == "q"


def test_print_table(capsys):
    Terminal().print_table([{"id": 1, "name": "Ada"}, {"id": 2, "name": "Grace"}])
    out = capsys.readouterr().out
    assert "name" in out and "Grace" in out


def test_print_empty_table(capsys):
    Terminal().print_table([])
    assert capsys.readouterr().out == "(no rows)\n"
