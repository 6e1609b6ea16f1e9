"""
Resolution Constants

Scoring weights, acceptance threshold, confidence tiers and the keyword
tables used by the title heuristics.
"""

from typing import ClassVar


class ScoringWeights:
    """Additive weights for candidate scoring.

    Fixed policy values, not tuned from data.
    """

    SIMILARITY = 0.6
    TYPE_MATCH = 0.2
    YEAR_MATCH = 0.1
    SEASON_MATCH = 0.1

    MOVIE_SEQUEL_PENALTY = 0.3  # Movie expected, candidate looks like a season
    TV_MOVIE_PENALTY = 0.3  # TV expected, candidate looks like a movie


class ConfidenceThresholds:
    """Thresholds applied to ranked candidates and resolution results."""

    # Minimum total score for the top candidate to be accepted
    ACCEPTANCE = 0.4

    # Episode lists are only fetched for results strictly above this
    EPISODE_FLOOR = 0.5


class ConfidenceTier:
    """Confidence reported for each resolution strategy.

    A higher tier always means an earlier, more specific strategy.
    """

    DIRECT = 0.9
    ALTERNATE_LABEL = 0.8
    SIMPLIFIED_TITLE = 0.7
    NONE = 0.0


class HeuristicKeywords:
    """Keyword tables for display-title heuristics (matched as whole words)."""

    MOVIE: ClassVar[tuple[str, ...]] = (
        "movie",
        "film",
        "the movie",
        "gekijouban",
        "gekijo-ban",
        "infinity castle",
        "mugen train",
    )
    OVA: ClassVar[tuple[str, ...]] = ("ova", "special", "ona", "extra")
    SEASON: ClassVar[tuple[str, ...]] = (
        "season",
        "part",
        "series",
        "cour",
        "2nd",
        "3rd",
        "4th",
        "ii",
        "iii",
        "iv",
    )

    ROMAN_NUMERALS: ClassVar[dict[str, int]] = {"ii": 2, "iii": 3, "iv": 4, "v": 5}

    # Shared by the candidate-side sequel check and the query-side indicator
    # check, so both sides agree on what counts as a marker
    SEQUEL_WORDS: ClassVar[tuple[str, ...]] = ("season", "part", "series", "cour")
    ROMAN_MARKER = r"(?:iii|ii|iv|v)"
    ORDINAL_MARKER = r"\d+(?:st|nd|rd|th)"


class TitleRules:
    """Normalization and year-extraction rules."""

    ARTICLES: ClassVar[frozenset[str]] = frozenset({"the", "a", "an"})
    MIN_YEAR = 1900
    MAX_YEAR = 2099
    YEAR_TOLERANCE = 1

    # Subtitle separators for the simplified-title strategy, in order
    SUBTITLE_SEPARATORS: ClassVar[tuple[str, ...]] = (":", "-")
