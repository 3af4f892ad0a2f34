"""Fuzzy correction hints based on Levenshtein distance."""

from .lib import (
    MIN_SUGGESTION_DISTANCE,
    levenshtein,
    max_suggestion_distance,
    rank_options,
    suggest_closest,
)

__all__ = [
    "MIN_SUGGESTION_DISTANCE",
    "levenshtein",
    "max_suggestion_distance",
    "rank_options",
    "suggest_closest",
]
