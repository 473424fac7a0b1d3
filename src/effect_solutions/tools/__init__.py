"""Effect Solutions tool implementations."""

from . import get_help, open_issue, search_effect_solutions

__all__ = [
    "get_help",
    "open_issue",
    "search_effect_solutions",
]
