"""Title normalization for AniBridge.

Canonicalizes free-text titles so that two labels of the same release
compare as equal or near-equal strings. The resolver compares normalized
titles only; heuristics keep working on the raw display title.

The normalization process includes:
1. Case folding
2. Removal of every character that is not a letter, digit, whitespace or hyphen
3. Whitespace collapsing
4. Removal of standalone English articles
"""

from __future__ import annotations

import logging
import re

from anibridge.shared.constants import TitleRules

logger = logging.getLogger(__name__)

# Compile patterns once at module level; underscore is part of \w but not a letter
_DISALLOWED_CHARS_PATTERN = re.compile(r"[^\w\s-]|_")


def normalize_title(title: str) -> str:
    """Normalize a title for comparison.

    Pure and total: never raises, and ``normalize_title`` of its own output
    returns the same string.

    Args:
        title: Raw title

    Returns:
        Normalized title (possibly empty)

    Examples:
        >>> normalize_title("The Promised Neverland!")
        'promised neverland'
        >>> normalize_title("  Re:ZERO -Starting Life in Another World-  ")
        'rezero -starting life in another world-'
    """
    if not title:
        return ""

    folded = title.casefold()
    stripped = _DISALLOWED_CHARS_PATTERN.sub("", folded)
    words = [word for word in stripped.split() if word not in TitleRules.ARTICLES]
    return " ".join(words)


def simplify_title(title: str) -> str:
    """Drop the subtitle: keep the text before the first colon, then before the first hyphen.

    Examples:
        >>> simplify_title("Demon Slayer: Kimetsu no Yaiba - Mugen Train")
        'Demon Slayer'
        >>> simplify_title("Naruto")
        'Naruto'
    """
    simplified = title
    for separator in TitleRules.SUBTITLE_SEPARATORS:
        simplified = simplified.split(separator, 1)[0]
    return simplified.strip()
