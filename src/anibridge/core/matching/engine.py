"""Resolution engine for mapping titles onto streaming catalog records.

TitleResolver searches the catalog, ranks the candidates and applies the
confidence-tiered fallback strategies. It performs no retries: network
errors raised by the catalog searcher propagate to the caller.
"""

from __future__ import annotations

import logging
import time

from anibridge.core.matching.models import (
    ContentMetadata,
    RankingOutcome,
    ResolutionResult,
    TitleQuery,
)
from anibridge.core.matching.ranker import CandidateRanker
from anibridge.core.matching.strategies import (
    DirectStrategy,
    ResolutionStrategy,
    default_strategies,
)
from anibridge.shared.constants import CacheKeys, CacheTTL
from anibridge.shared.logging import log_operation_success
from anibridge.shared.protocols.services import (
    CatalogSearcherProtocol,
    KeyValueCacheProtocol,
)

logger = logging.getLogger(__name__)


class TitleResolver:
    """Resolve a title to a streaming catalog identifier.

    Strategies run strictly in sequence and stop at the first confident
    match; the result carries the confidence tier of the strategy that
    produced it. Exhausting every strategy yields ``ResolutionResult.no_match()``,
    which is a normal outcome rather than an error.

    Results (including misses) are memoized in an optional cache keyed by
    the normalized title and the metadata.

    Args:
        catalog: Catalog searcher
        ranker: Candidate ranker
        cache: Optional cache for resolution results
        strategies: Fallback strategies in application order

    Example:
        >>> resolver = TitleResolver(catalog_client)
        >>> result = resolver.resolve_with_fallback("Shingeki no Kyojin: The Final Season")
        >>> result.external_id, result.confidence
        ('100', 0.7)
    """

    def __init__(
        self,
        catalog: CatalogSearcherProtocol,
        ranker: CandidateRanker | None = None,
        cache: KeyValueCacheProtocol | None = None,
        strategies: list[ResolutionStrategy] | None = None,
        cache_ttl: float = CacheTTL.RESOLUTION,
    ) -> None:
        self.catalog = catalog
        self.ranker = ranker or CandidateRanker()
        self.cache = cache
        self.strategies = strategies if strategies is not None else default_strategies()
        self.cache_ttl = cache_ttl

    def find_best(
        self,
        label: str,
        metadata: ContentMetadata | None = None,
    ) -> RankingOutcome:
        """Search the catalog for one label and rank the results."""
        candidates = self.catalog.search(label)
        logger.debug("Found %d search results for '%s'", len(candidates), label)
        if not candidates:
            return RankingOutcome()
        return self.ranker.rank(label, candidates, metadata)

    def resolve(
        self,
        title: str,
        metadata: ContentMetadata | None = None,
    ) -> ResolutionResult:
        """Resolve with the direct strategy only.

        Raises:
            ValueError: If title is empty or whitespace
        """
        query = TitleQuery(title=title, metadata=metadata)
        return self._cached("direct", query, lambda: self._run(query, [DirectStrategy()]))

    def resolve_with_fallback(
        self,
        title: str,
        metadata: ContentMetadata | None = None,
    ) -> ResolutionResult:
        """Resolve with direct, alternate-label and simplified-title strategies.

        Args:
            title: Title as known to the metadata provider
            metadata: Optional loose metadata

        Returns:
            ResolutionResult with confidence 0.9, 0.8, 0.7 or 0.0

        Raises:
            ValueError: If title is empty or whitespace
        """
        query = TitleQuery(title=title, metadata=metadata)
        return self._cached("fallback", query, lambda: self._run(query, self.strategies))

    def _run(
        self,
        query: TitleQuery,
        strategies: list[ResolutionStrategy],
    ) -> ResolutionResult:
        start = time.perf_counter()
        for strategy in strategies:
            label = strategy.label_for(query)
            if label is None:
                logger.debug("Strategy '%s' skipped for '%s'", strategy.name, query.title)
                continue

            outcome = self.find_best(label, query.metadata)
            if outcome.best is None:
                logger.debug("Strategy '%s' found no confident match", strategy.name)
                continue

            result = ResolutionResult(
                external_id=outcome.best.external_id,
                confidence=strategy.tier,
                matched_title=label,
            )
            log_operation_success(
                logger=logger,
                operation="resolve_title",
                duration_ms=(time.perf_counter() - start) * 1000,
                result_info={
                    "strategy": strategy.name,
                    "external_id": result.external_id,
                    "confidence": result.confidence,
                },
            )
            return result

        logger.info("No confident match for '%s'", query.title)
        return ResolutionResult.no_match()

    def _cached(self, mode: str, query: TitleQuery, compute) -> ResolutionResult:
        if self.cache is None:
            return compute()

        key = self.cache_key(mode, query)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Resolution cache hit: %s", key)
            return ResolutionResult.from_dict(cached)

        result = compute()
        self.cache.set(key, result.to_dict(), self.cache_ttl)
        return result

    @staticmethod
    def cache_key(mode: str, query: TitleQuery) -> str:
        fragment = (query.metadata or ContentMetadata()).cache_fragment()
        return f"{CacheKeys.RESOLUTION}{mode}:{query.title.strip()}:{fragment}"
