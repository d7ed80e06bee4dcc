"""
Utilities Module
Helper functions for the context pipeline
"""

from .context_helpers import (
    collapse_whitespace,
    truncate_text,
    round_rating,
    merge_displayed_cards,
)

__all__ = [
    "collapse_whitespace",
    "truncate_text",
    "round_rating",
    "merge_displayed_cards",
]
