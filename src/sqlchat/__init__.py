"""
Natural-language Q&A over a Postgres database via iterative SQL generation
"""

from .session import Session, SessionState

__all__ = ["Session", "SessionState"]
