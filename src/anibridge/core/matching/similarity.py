"""Textual similarity between normalized titles.

The metric is rapidfuzz's normalized Indel ratio: symmetric, bounded to
[0, 1], equal to 1 for identical strings and close to 0 for strings that
share no characters in order.
"""

from __future__ import annotations

from typing import Callable

from rapidfuzz import fuzz

MAX_SCORE = 100.0

SimilarityFunction = Callable[[str, str], float]


def similarity(a: str, b: str) -> float:
    """Calculate similarity between two normalized strings.

    Args:
        a: First string
        b: Second string

    Returns:
        Score between 0.0 and 1.0

    Examples:
        >>> similarity("attack on titan", "attack on titan")
        1.0
        >>> similarity("naruto", "")
        0.0
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    score = float(fuzz.ratio(a, b)) / MAX_SCORE
    return max(0.0, min(1.0, score))
