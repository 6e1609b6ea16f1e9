"""Base protocol for resolution strategies.

A strategy decides which label to search the catalog with. The engine
runs strategies in order and stops at the first confident match.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from anibridge.core.matching.models import TitleQuery


@runtime_checkable
class ResolutionStrategy(Protocol):
    """Protocol for resolution strategies.

    Attributes:
        name: Short identifier used in logs and cache keys
        tier: Confidence reported when this strategy produces the match

    Example:
        >>> class UppercaseStrategy:
        ...     name = "uppercase"
        ...     tier = 0.5
        ...
        ...     def label_for(self, query):
        ...         return query.title.upper()
    """

    name: str
    tier: float

    def label_for(self, query: TitleQuery) -> str | None:
        """Return the label to search with, or None to skip this strategy."""
        ...
