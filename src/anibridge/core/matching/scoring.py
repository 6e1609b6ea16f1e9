"""Candidate scoring for catalog search results.

This module combines textual similarity with the display-title heuristics
into a single additive score per candidate. Scores are not clamped: the
mismatch penalties may push a candidate below zero.
"""

from __future__ import annotations

import logging

from anibridge.core.matching.heuristics import (
    is_movie_title,
    is_season_title,
    season_match,
    type_match,
    year_match,
)
from anibridge.core.matching.models import (
    Candidate,
    ContentMetadata,
    ContentType,
    ScoredCandidate,
)
from anibridge.core.matching.similarity import SimilarityFunction, similarity
from anibridge.core.normalization import normalize_title
from anibridge.shared.constants import ScoringWeights

logger = logging.getLogger(__name__)


def score_candidate(
    candidate: Candidate,
    normalized_query: str,
    original_title: str,
    metadata: ContentMetadata | None = None,
    similarity_fn: SimilarityFunction = similarity,
) -> ScoredCandidate:
    """Score one candidate against a query.

    Args:
        candidate: Raw search result
        normalized_query: Normalized query title
        original_title: Raw query title (drives the sequel guard)
        metadata: Optional metadata for the heuristics
        similarity_fn: Similarity primitive

    Returns:
        ScoredCandidate carrying every scoring component

    Example:
        >>> scored = score_candidate(
        ...     Candidate("100", "Attack on Titan"), "attack on titan", "Attack on Titan"
        ... )
        >>> round(scored.total_score, 2)
        0.7
    """
    metadata = metadata or ContentMetadata()
    normalized_candidate = normalize_title(candidate.display_title)

    title_similarity = similarity_fn(normalized_candidate, normalized_query)
    is_type_match = type_match(candidate.display_title, metadata.type)
    is_year_match = year_match(candidate.display_title, metadata.year)
    is_season_match = season_match(
        candidate.display_title,
        metadata.season,
        original_title,
    )
    penalty = _calculate_mismatch_penalty(candidate.display_title, metadata.type)

    total_score = _aggregate_scores(
        title_similarity,
        type_match=is_type_match,
        year_match=is_year_match,
        season_match=is_season_match,
        penalty=penalty,
    )

    return ScoredCandidate(
        candidate=candidate,
        normalized_title=normalized_candidate,
        similarity=title_similarity,
        type_match=is_type_match,
        year_match=is_year_match,
        season_match=is_season_match,
        total_score=total_score,
    )


def _calculate_mismatch_penalty(
    display_title: str,
    expected_type: ContentType | None,
) -> float:
    """Penalty for a movie query hitting a season title, or a TV query hitting a movie."""
    penalty = 0.0
    if expected_type is ContentType.MOVIE and is_season_title(display_title):
        penalty += ScoringWeights.MOVIE_SEQUEL_PENALTY
    if expected_type is ContentType.TV and is_movie_title(display_title):
        penalty += ScoringWeights.TV_MOVIE_PENALTY
    return penalty


def _aggregate_scores(
    title_similarity: float,
    *,
    type_match: bool,
    year_match: bool,
    season_match: bool,
    penalty: float,
) -> float:
    """Weighted additive aggregation; never multiplicative, never clamped."""
    total = title_similarity * ScoringWeights.SIMILARITY
    if type_match:
        total += ScoringWeights.TYPE_MATCH
    if year_match:
        total += ScoringWeights.YEAR_MATCH
    if season_match:
        total += ScoringWeights.SEASON_MATCH
    return total - penalty
