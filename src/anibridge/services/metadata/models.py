"""Metadata provider (Jikan v4) response models.

Pydantic models validate the JSON at the external API boundary. Unknown
fields are ignored so upstream additions do not break parsing.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from anibridge.core.matching.models import ContentMetadata, ContentType

T = TypeVar("T")


class ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Genre(ProviderModel):
    """Genre reference."""

    mal_id: int
    name: str
    type: str | None = None


class RelationEntry(ProviderModel):
    mal_id: int
    type: str = "anime"
    name: str = ""


class Relation(ProviderModel):
    """Related-entries group (``Sequel``, ``Prequel`` and so on)."""

    relation: str
    entry: list[RelationEntry] = Field(default_factory=list)


class ImageSet(ProviderModel):
    image_url: str | None = None
    small_image_url: str | None = None
    large_image_url: str | None = None


class Images(ProviderModel):
    jpg: ImageSet = Field(default_factory=ImageSet)


class AnimeRecord(ProviderModel):
    """Anime record as returned by the metadata provider.

    Only the fields the resolver and recommendations consume are typed.
    """

    mal_id: int
    title: str
    title_english: str | None = None
    title_japanese: str | None = None
    type: str | None = None
    episodes: int | None = None
    status: str | None = None
    score: float | None = None
    popularity: int | None = None
    season: str | None = None
    year: int | None = None
    synopsis: str | None = None
    images: Images = Field(default_factory=Images)
    genres: list[Genre] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)

    @property
    def preferred_title(self) -> str:
        """English title when present, otherwise the default title."""
        return self.title_english or self.title

    def to_metadata(self) -> ContentMetadata:
        """Loose metadata for resolution; the English title becomes an alternate title."""
        alternates = (
            (self.title_english,)
            if self.title_english and self.title_english != self.title
            else ()
        )
        return ContentMetadata(
            type=ContentType.parse(self.type),
            year=self.year,
            season=self.season,
            episode_count=self.episodes,
            alternate_titles=alternates,
        )


class RecommendationTarget(ProviderModel):
    mal_id: int
    title: str
    images: Images = Field(default_factory=Images)


class RecommendationEntry(ProviderModel):
    """User recommendation pointing at another title."""

    entry: RecommendationTarget
    votes: int = 0


class Pagination(ProviderModel):
    last_visible_page: int = 1
    has_next_page: bool = False
    current_page: int | None = None


class ProviderResponse(ProviderModel, Generic[T]):
    """``{"data": ..., "pagination": ...}`` envelope."""

    data: T
    pagination: Pagination | None = None
