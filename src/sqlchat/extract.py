import re
from typing import List

FENCE = "```"
_SQL_TAG = re.compile(r"^sql(?=\s|$)")


def extract_statements(response_text: str) -> List[str]:
    """
    Pull the contents of ```-fenced blocks out of a model response.

    A leading `sql` language tag is dropped and each block is stripped.
    Text after an unmatched trailing fence is ignored. Empty blocks are kept
    as "" so they fail visibly at execution time.
    """
    chunks = response_text.split(FENCE)
    # Odd-indexed chunks sit between fences; the last chunk never has a closing fence.
    fenced = chunks[1:-1:2]
    return [_SQL_TAG.sub("", chunk, count=1).strip() for chunk in fenced]
