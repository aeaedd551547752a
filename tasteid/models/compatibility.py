from enum import Enum

from pydantic import BaseModel, Field


class MatchType(str, Enum):
    TASTE_TWIN = "taste_twin"
    STRONG_MATCH = "strong_match"
    COMPATIBLE = "compatible"
    LOW_MATCH = "low_match"


class CompatibilityBreakdown(BaseModel):
    genre_overlap: int = Field(ge=0, le=100)
    artist_overlap: int = Field(ge=0, le=100)
    rating_alignment: int = Field(ge=0, le=100)


class CompatibilityResult(BaseModel):
    """
    Pairwise match between two users.

    ``user_a`` is always the lexically smaller id so the result does not depend
    on argument order.
    """

    user_a: str
    user_b: str
    overall_score: int = Field(ge=0, le=100)
    match_type: MatchType
    breakdown: CompatibilityBreakdown
    shared_genres: list[str] = Field(default_factory=list)
    shared_artists: list[str] = Field(default_factory=list)


class SimilarTaster(BaseModel):
    """Another user ranked by compatibility with the subject."""

    user_id: str
    compatibility: int = Field(ge=0, le=100)
    match_type: MatchType
    shared_genres: list[str] = Field(default_factory=list)
    shared_artists: list[str] = Field(default_factory=list)
    archetype: str | None = None
