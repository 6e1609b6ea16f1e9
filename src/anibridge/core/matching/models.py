"""Resolution Domain Models.

This module defines immutable domain models for title resolution and
episode listing. These models use frozen dataclasses for immutability;
the ``to_dict``/``from_dict`` pairs are the cache serialization format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from anibridge.shared.constants import ConfidenceTier


class ContentType(str, Enum):
    """Content type labels used by the metadata provider."""

    TV = "TV"
    MOVIE = "Movie"
    OVA = "OVA"
    SPECIAL = "Special"
    ONA = "ONA"
    MUSIC = "Music"

    @classmethod
    def parse(cls, value: str | ContentType | None) -> ContentType | None:
        """Parse a label case-insensitively; unknown labels yield None.

        Example:
            >>> ContentType.parse("movie")
            <ContentType.MOVIE: 'Movie'>
            >>> ContentType.parse("TV Special") is None
            True
        """
        if value is None or isinstance(value, ContentType):
            return value
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


@dataclass(frozen=True)
class ContentMetadata:
    """Loose metadata known about a title.

    Every field is optional; a missing field disables the heuristic that
    would have used it.

    Attributes:
        type: Content type label
        year: Release year
        season: Airing season label from the provider (e.g. "spring")
        episode_count: Number of episodes
        alternate_titles: Other labels for the same title (e.g. English title)
    """

    type: ContentType | None = None
    year: int | None = None
    season: str | None = None
    episode_count: int | None = None
    alternate_titles: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.type, str) and not isinstance(self.type, ContentType):
            object.__setattr__(self, "type", ContentType.parse(self.type))
        if not isinstance(self.alternate_titles, tuple):
            object.__setattr__(self, "alternate_titles", tuple(self.alternate_titles))

    def cache_fragment(self) -> str:
        """Stable string identifying this metadata inside a cache key."""
        return "|".join(
            [
                self.type.value if self.type else "",
                str(self.year or ""),
                self.season or "",
                str(self.episode_count or ""),
                ",".join(self.alternate_titles),
            ]
        )


@dataclass(frozen=True)
class TitleQuery:
    """Immutable input to resolution."""

    title: str
    metadata: ContentMetadata | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Title cannot be empty or whitespace")


@dataclass(frozen=True)
class Candidate:
    """One scraped search result from the streaming catalog."""

    external_id: str
    display_title: str


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with its similarity, heuristic flags and total score.

    ``total_score`` is not bounded to [0, 1]; penalties can make it negative.
    """

    candidate: Candidate
    normalized_title: str
    similarity: float
    type_match: bool
    year_match: bool
    season_match: bool
    total_score: float

    @property
    def external_id(self) -> str:
        return self.candidate.external_id

    @property
    def display_title(self) -> str:
        return self.candidate.display_title


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving a title against the streaming catalog.

    ``external_id is None`` means no confident match; that is a normal
    result, not an error.

    Attributes:
        external_id: Catalog identifier, or None
        confidence: Confidence tier of the strategy that produced the result
        matched_title: The label that produced the match
    """

    external_id: str | None
    confidence: float
    matched_title: str | None = None

    @classmethod
    def no_match(cls) -> ResolutionResult:
        return cls(external_id=None, confidence=ConfidenceTier.NONE)

    @property
    def is_resolved(self) -> bool:
        return self.external_id is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "external_id": self.external_id,
            "confidence": self.confidence,
            "matched_title": self.matched_title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolutionResult:
        return cls(
            external_id=data.get("external_id"),
            confidence=float(data.get("confidence", ConfidenceTier.NONE)),
            matched_title=data.get("matched_title"),
        )


@dataclass(frozen=True)
class EpisodeItem:
    """One episode of a catalog record.

    Attributes:
        episode_id: Catalog episode identifier
        number: Episode ordinal (>= 1)
        title: Episode title
    """

    episode_id: str
    number: int
    title: str | None = None

    def __post_init__(self) -> None:
        if self.number < 1:
            msg = f"Episode number must be >= 1, got {self.number}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return {"episode_id": self.episode_id, "number": self.number, "title": self.title}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EpisodeItem:
        return cls(
            episode_id=str(data["episode_id"]),
            number=int(data["number"]),
            title=data.get("title"),
        )


@dataclass(frozen=True)
class RankingOutcome:
    """Ranked candidates for one query plus the accepted winner, if any."""

    ranked: list[ScoredCandidate] = field(default_factory=list)
    best: ScoredCandidate | None = None
