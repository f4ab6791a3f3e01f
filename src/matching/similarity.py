"""Lexical similarity between ingredient names.

Levenshtein edit distance normalized to [0, 1]. Callers lower-case both
inputs before comparing.
"""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions or substitutions turning `a` into `b`."""
    return Levenshtein.distance(a, b)


def string_similarity(a: str, b: str) -> float:
    """Return `(max_len - distance) / max_len`, or 1.0 when both strings are empty."""
    return Levenshtein.normalized_similarity(a, b)
