from pydantic import BaseModel, Field

from tasteid.models.rating import EngagementCounters


class ArtistAffinity(BaseModel):
    artist: str
    weight: float = Field(ge=0.0, le=1.0, description="Evidence-weighted affinity, 1.0 for the favourite")
    avg_rating: float
    review_count: int = Field(ge=1)


class TasteSignal(BaseModel):
    """
    Normalized per-user aggregate of a full rating history.

    Recomputed wholesale on every request; a new signal supersedes the old one.
    Vector values are min-max normalized within the user's own history, so they
    express relative emphasis, not absolute volume.
    """

    user_id: str

    # Core signal
    genre_vector: dict[str, float] = Field(default_factory=dict, description="Genre → 0-1 affinity")
    artist_vector: dict[str, float] = Field(default_factory=dict, description="Artist → 0-1 affinity")
    artist_frequency: dict[str, int] = Field(default_factory=dict, description="Artist → rating count")
    decade_vector: dict[str, float] = Field(default_factory=dict, description="Decade ('1990s') → 0-1 affinity")
    rating_mean: float = 0.0
    rating_std_dev: float = 0.0
    review_count: int = Field(default=0, ge=0)
    avg_review_length: float = Field(default=0.0, ge=0.0, description="Mean words per review")

    # Raw counts used by the mapper, classifier and pattern detector
    genre_counts: dict[str, int] = Field(default_factory=dict)
    decade_counts: dict[str, int] = Field(default_factory=dict)
    artist_mean_rating: dict[str, float] = Field(default_factory=dict)
    rating_histogram: dict[int, int] = Field(default_factory=dict, description="floor(score) → count")

    # Behavioural ratios, each 0-1
    recent_release_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    written_review_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    emotional_review_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    sentiment_variance: float = Field(default=0.0, ge=0.0, le=1.0)
    mainstream_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    obscure_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    contrarian_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    consensus_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    avg_album_age: float = Field(default=0.0, ge=0.0, description="Mean years since release")

    engagement: EngagementCounters = Field(default_factory=EngagementCounters)

    @property
    def distinct_artists(self) -> int:
        return len(self.artist_frequency)

    @property
    def distinct_genres(self) -> int:
        return len(self.genre_counts) or len(self.genre_vector)

    def get_top_genres(self, limit: int = 5) -> list[str]:
        """Top genres by affinity, ties broken alphabetically."""
        ranked = sorted(self.genre_vector.items(), key=lambda x: (-x[1], x[0]))
        return [genre for genre, _ in ranked[:limit]]

    def get_top_artists(self, limit: int = 10) -> list[str]:
        """
        Top artists by affinity, then rating count, ties broken alphabetically.

        Signals built without an artist vector fall back to rating count alone.
        """
        ranked = sorted(
            self.artist_frequency,
            key=lambda a: (-self.artist_vector.get(a, 0.0), -self.artist_frequency[a], a),
        )
        return ranked[:limit]

    def get_artist_dna(self, limit: int = 20) -> list[ArtistAffinity]:
        return [
            ArtistAffinity(
                artist=artist,
                weight=self.artist_vector.get(artist, 0.0),
                avg_rating=self.artist_mean_rating.get(artist, 0.0),
                review_count=self.artist_frequency[artist],
            )
            for artist in self.get_top_artists(limit)
        ]

    def get_top_decades(self, limit: int = 3) -> list[str]:
        ranked = sorted(self.decade_vector.items(), key=lambda x: (-x[1], x[0]))
        return [decade for decade, _ in ranked[:limit]]
