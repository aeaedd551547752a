from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Rating(BaseModel):
    """A single album rating. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    album_id: str
    score: float = Field(ge=0.0, le=10.0, description="Rating on a 0-10 scale")
    created_at: datetime
    review_text: str | None = None

    @property
    def word_count(self) -> int:
        if not self.review_text:
            return 0
        return len(self.review_text.split())


class AlbumMetadata(BaseModel):
    """Read-only album metadata resolved from the catalog."""

    model_config = ConfigDict(frozen=True)

    album_id: str
    artist: str
    genres: list[str] = Field(default_factory=list)
    release_year: int
    popularity_rank: int | None = Field(default=None, ge=1, description="1 = most popular")
    community_average: float | None = Field(default=None, ge=0.0, le=10.0)

    @property
    def decade(self) -> str:
        return f"{(self.release_year // 10) * 10}s"

    @property
    def normalized_genres(self) -> list[str]:
        """Lower-cased, de-duplicated genres in their original order."""
        seen: list[str] = []
        for genre in self.genres:
            key = genre.strip().lower()
            if key and key not in seen:
                seen.append(key)
        return seen


class RatedAlbum(BaseModel):
    """A rating joined with the metadata of the album it rates."""

    model_config = ConfigDict(frozen=True)

    rating: Rating
    album: AlbumMetadata


class EngagementCounters(BaseModel):
    """
    Social and visual engagement counts supplied by external collaborators.

    Every counter defaults to zero so a missing source degrades the Social and
    Aesthetic networks toward zero instead of failing.
    """

    collaborations: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    list_shares: int = Field(default=0, ge=0)
    follows: int = Field(default=0, ge=0)
    album_art_views: int = Field(default=0, ge=0)
    artwork_saves: int = Field(default=0, ge=0)
