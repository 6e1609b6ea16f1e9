"""Title matching: scoring, ranking and confidence-tiered resolution."""

from anibridge.core.matching.engine import TitleResolver
from anibridge.core.matching.ranker import CandidateRanker
from anibridge.core.matching.scoring import score_candidate
from anibridge.core.matching.similarity import similarity

__all__ = ["CandidateRanker", "TitleResolver", "score_candidate", "similarity"]
