"""
AniBridge - cross-catalog anime title resolver

Maps titles from a canonical metadata provider to records in an
independent streaming catalog and retrieves their episode lists.
"""

__version__ = "0.1.0"

from anibridge.core.matching.models import (
    Candidate,
    ContentMetadata,
    ContentType,
    EpisodeItem,
    ResolutionResult,
    ScoredCandidate,
    TitleQuery,
)

__all__ = [
    "Candidate",
    "ContentMetadata",
    "ContentType",
    "EpisodeItem",
    "ResolutionResult",
    "ScoredCandidate",
    "TitleQuery",
]
