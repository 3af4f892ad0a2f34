"""Edit-distance suggestions for enum and option mismatches."""

from collections.abc import Sequence
from typing import Any, TypeVar

T = TypeVar("T")

MIN_SUGGESTION_DISTANCE = 3


def levenshtein(a: str, b: str) -> int:
    """Levenshtein edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def _normalize(value: Any) -> str:
    return str(value).strip().lower()


def max_suggestion_distance(received: str) -> int:
    """Largest distance at which a suggestion is still considered useful."""
    return max(MIN_SUGGESTION_DISTANCE, len(_normalize(received)) // 2)


def suggest_closest(received: Any, options: Sequence[T]) -> T | None:
    """Pick the allowed option closest to a received value.

    Comparison is on trimmed, lower-cased string forms. Ties keep the
    earliest option.

    Args:
        received: The value that failed to match.
        options: Allowed values.

    Returns:
        The closest option, or None when even the best candidate is further
        than max(3, len(received) // 2) edits away.

    Example:
        >>> suggest_closest("amdin", ["admin", "user"])
        'admin'
        >>> suggest_closest("xyz123zzz", ["admin", "user"]) is None
        True
    """
    if not options:
        return None

    needle = _normalize(received)
    best: T | None = None
    best_distance: int | None = None
    for option in options:
        distance = levenshtein(needle, _normalize(option))
        if best_distance is None or distance < best_distance:
            best, best_distance = option, distance

    if best_distance is None or best_distance > max_suggestion_distance(needle):
        return None
    return best


def rank_options(received: Any, options: Sequence[T]) -> list[T]:
    """Return options with the closest match (if any) moved to the front."""
    closest = suggest_closest(received, options)
    if closest is None:
        return list(options)
    return [closest, *(o for o in options if o is not closest)]


__all__ = [
    "MIN_SUGGESTION_DISTANCE",
    "levenshtein",
    "max_suggestion_distance",
    "rank_options",
    "suggest_closest",
]
