"""Candidate ranking for catalog search results.

This module provides the CandidateRanker class that scores every
candidate of one query, orders them and applies the acceptance threshold.
"""

from __future__ import annotations

import logging

from anibridge.core.matching.models import (
    Candidate,
    ContentMetadata,
    RankingOutcome,
    ScoredCandidate,
)
from anibridge.core.matching.scoring import score_candidate
from anibridge.core.matching.similarity import SimilarityFunction, similarity
from anibridge.core.normalization import normalize_title
from anibridge.shared.constants import ConfidenceThresholds

logger = logging.getLogger(__name__)

# Number of top candidates echoed to the debug log
_LOGGED_CANDIDATES = 3


class CandidateRanker:
    """Score, rank and select catalog candidates.

    Candidates are ordered by total score, highest first. The sort is
    stable, so equal scores keep their discovery order. The top candidate
    is accepted only when its total score reaches the acceptance threshold.

    Attributes:
        threshold: Minimum total score for acceptance
        similarity_fn: Similarity primitive

    Example:
        >>> ranker = CandidateRanker()
        >>> outcome = ranker.rank("Attack on Titan", candidates)
        >>> outcome.best.external_id if outcome.best else None
    """

    def __init__(
        self,
        threshold: float = ConfidenceThresholds.ACCEPTANCE,
        similarity_fn: SimilarityFunction = similarity,
    ) -> None:
        self.threshold = threshold
        self.similarity_fn = similarity_fn

    def score_candidates(
        self,
        title: str,
        candidates: list[Candidate],
        metadata: ContentMetadata | None = None,
    ) -> list[ScoredCandidate]:
        """Score candidates in discovery order."""
        normalized_query = normalize_title(title)
        return [
            score_candidate(
                candidate,
                normalized_query,
                title,
                metadata,
                self.similarity_fn,
            )
            for candidate in candidates
        ]

    @staticmethod
    def rank_candidates(scored: list[ScoredCandidate]) -> list[ScoredCandidate]:
        """Return a new list sorted by total score (desc), ties in discovery order."""
        return sorted(scored, key=lambda item: item.total_score, reverse=True)

    def accepts(self, scored: ScoredCandidate) -> bool:
        """Whether a candidate's total score reaches the acceptance threshold."""
        return scored.total_score >= self.threshold

    def select_best(self, ranked: list[ScoredCandidate]) -> ScoredCandidate | None:
        """Return the top candidate if it is confident enough, else None."""
        if not ranked:
            return None

        best = ranked[0]
        if self.accepts(best):
            logger.debug(
                "Best match selected: '%s' (score: %.3f)",
                best.display_title,
                best.total_score,
            )
            return best

        logger.debug(
            "No confident match found. Best score: %.3f < %.3f",
            best.total_score,
            self.threshold,
        )
        return None

    def rank(
        self,
        title: str,
        candidates: list[Candidate],
        metadata: ContentMetadata | None = None,
    ) -> RankingOutcome:
        """Score, rank and select in one call.

        Args:
            title: Raw query title
            candidates: Candidates in discovery order
            metadata: Optional metadata for the heuristics

        Returns:
            RankingOutcome with the ranked list and the accepted winner
        """
        ranked = self.rank_candidates(self.score_candidates(title, candidates, metadata))

        for item in ranked[:_LOGGED_CANDIDATES]:
            logger.debug(
                "Candidate '%s': similarity=%.3f total=%.3f type=%s year=%s season=%s",
                item.display_title,
                item.similarity,
                item.total_score,
                item.type_match,
                item.year_match,
                item.season_match,
            )

        return RankingOutcome(ranked=ranked, best=self.select_best(ranked))
