"""
AniBridge constants.

Constants are grouped by concern in sibling modules and re-exported here.
"""

from .cache import Cache, CacheKeys, CacheTTL
from .matching import (
    ConfidenceThresholds,
    ConfidenceTier,
    HeuristicKeywords,
    ScoringWeights,
    TitleRules,
)
from .network import (
    CatalogEndpoints,
    HTTPStatusCodes,
    MetadataEndpoints,
    PlayerServers,
    RetryDefaults,
    Timeout,
)
from .recommendations import RecommendationPolicy
from .system import HOUR, MINUTE, SECOND, Application, Logging

__all__ = [
    "HOUR",
    "MINUTE",
    "SECOND",
    "Application",
    "Cache",
    "CacheKeys",
    "CacheTTL",
    "CatalogEndpoints",
    "ConfidenceThresholds",
    "ConfidenceTier",
    "HTTPStatusCodes",
    "HeuristicKeywords",
    "Logging",
    "MetadataEndpoints",
    "PlayerServers",
    "RecommendationPolicy",
    "RetryDefaults",
    "ScoringWeights",
    "TitleRules",
    "Timeout",
]
