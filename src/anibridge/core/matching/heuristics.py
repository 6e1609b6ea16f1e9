"""Display-title heuristics for candidate scoring.

Binary checks run against a candidate's raw (non-normalized) display
title. They are advisory signals for the ranker, never filters. Keywords
are matched as whole words, case-insensitively.
"""

from __future__ import annotations

import functools
import re

from anibridge.core.matching.models import ContentType
from anibridge.shared.constants import HeuristicKeywords, TitleRules

_YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
_SEASON_NUMBER_PATTERN = re.compile(
    r"\bseason\s*(\d+)\b|\b(\d+)(?:st|nd|rd|th)\s+season\b",
    re.IGNORECASE,
)
_SEQUEL_WORD = "(?:{})".format("|".join(HeuristicKeywords.SEQUEL_WORDS))
_ROMAN = HeuristicKeywords.ROMAN_MARKER
_ORDINAL = HeuristicKeywords.ORDINAL_MARKER

_SEQUEL_MARKER_PATTERN = re.compile(
    rf"\b{_SEQUEL_WORD}\s*(?:{_ORDINAL}|\d+|{_ROMAN})\b"
    rf"|\b{_ORDINAL}\s+season\b"
    rf"|\b{_ROMAN}\b",
    re.IGNORECASE,
)
# Any marker the candidate side recognizes must also count here
_SEASON_INDICATOR_PATTERN = re.compile(
    rf"\b{_SEQUEL_WORD}\b|\b{_ORDINAL}\b|\b{_ROMAN}\b",
    re.IGNORECASE,
)
_ROMAN_NUMERAL_PATTERN = re.compile(rf"\b({_ROMAN})\b", re.IGNORECASE)


@functools.lru_cache(maxsize=None)
def _keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf"(?<![\w-])(?:{alternation})(?![\w-])", re.IGNORECASE)


def _contains_keyword(title: str, keywords: tuple[str, ...]) -> bool:
    return bool(title) and _keyword_pattern(keywords).search(title) is not None


def is_movie_title(title: str) -> bool:
    """Whether the title carries a theatrical-release marker."""
    return _contains_keyword(title, HeuristicKeywords.MOVIE)


def is_ova_title(title: str) -> bool:
    """Whether the title carries an OVA/special/ONA/extra marker."""
    return _contains_keyword(title, HeuristicKeywords.OVA)


def is_season_title(title: str) -> bool:
    """Whether the title looks like a season or sequel entry."""
    return _contains_keyword(title, HeuristicKeywords.SEASON)


def has_season_indicators(title: str) -> bool:
    """Whether a query title itself asks for a later season or part."""
    return bool(title) and _SEASON_INDICATOR_PATTERN.search(title) is not None


def type_match(display_title: str, expected_type: ContentType | None) -> bool:
    """Check the candidate title against the expected content type.

    Args:
        display_title: Raw candidate title
        expected_type: Expected content type, if known

    Returns:
        False when no type is expected or the type has no title markers
    """
    if expected_type is None:
        return False

    if expected_type is ContentType.MOVIE:
        return is_movie_title(display_title)
    if expected_type is ContentType.TV:
        return not is_movie_title(display_title) and not is_ova_title(display_title)
    if expected_type in (ContentType.OVA, ContentType.SPECIAL):
        return is_ova_title(display_title)
    return False


def extract_year(title: str) -> int | None:
    """Return the first year token (1900-2099) found in the title."""
    match = _YEAR_PATTERN.search(title or "")
    if not match:
        return None
    year = int(match.group(0))
    if TitleRules.MIN_YEAR <= year <= TitleRules.MAX_YEAR:
        return year
    return None


def year_match(display_title: str, expected_year: int | None) -> bool:
    """Match when the title's year token is within one year of the expected year."""
    if not expected_year:
        return False

    title_year = extract_year(display_title)
    if title_year is None:
        return False
    return abs(title_year - expected_year) <= TitleRules.YEAR_TOLERANCE


def season_match(
    display_title: str,
    expected_season: str | None,
    original_title: str | None,
) -> bool:
    """Guard against picking a sequel when the query was for the first entry.

    Args:
        display_title: Raw candidate title
        expected_season: Season label from metadata, if any
        original_title: The raw query title

    Returns:
        False when the candidate carries a season/sequel marker that the
        original query title does not, or when neither input is available
    """
    if not expected_season and not original_title:
        return False

    has_sequel_marker = _SEQUEL_MARKER_PATTERN.search(display_title or "") is not None
    if has_sequel_marker and not has_season_indicators(original_title or ""):
        return False
    return True


def detect_content_type(title: str) -> ContentType | None:
    """Guess the content type from a title's markers.

    Examples:
        >>> detect_content_type("Demon Slayer: Mugen Train")
        <ContentType.MOVIE: 'Movie'>
        >>> detect_content_type("Naruto") is None
        True
    """
    if is_movie_title(title):
        return ContentType.MOVIE
    if is_ova_title(title):
        return ContentType.OVA
    if is_season_title(title):
        return ContentType.TV
    return None


def extract_season_number(title: str) -> int | None:
    """Extract a season number from ``season N``, ``Nth season`` or a roman numeral.

    Examples:
        >>> extract_season_number("Attack on Titan Season 3")
        3
        >>> extract_season_number("Overlord II")
        2
    """
    match = _SEASON_NUMBER_PATTERN.search(title or "")
    if match:
        return int(match.group(1) or match.group(2))

    roman = _ROMAN_NUMERAL_PATTERN.search(title or "")
    if roman:
        return HeuristicKeywords.ROMAN_NUMERALS[roman.group(1).lower()]
    return None
