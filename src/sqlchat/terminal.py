from typing import Dict, List

import pandas as pd

from .prompts import QUIT_TOKEN


class Terminal:
    """Line prompts and table printing on stdin/stdout."""

    def prompt_line(self, message: str) -> str:
        try:
            return input(f"? {message} ")
        except EOFError:
            # Ctrl-D ends the session like "q"
            print()
            return QUIT_TOKEN

    def print(self, content: str = "") -> None:
        print(content)

    def print_table(self, rows: List[Dict]) -> None:
        if not rows:
            print("(no rows)")
            return
        df = pd.DataFrame.from_records(rows)
        with pd.option_context("display.max_columns", None, "display.width", 200):
            print(df.to_string())
