from enum import Enum

from pydantic import BaseModel, Field


class TasteKind(str, Enum):
    GENRE = "genre"
    ARTIST = "artist"


class TasteTrend(str, Enum):
    STRENGTHENING = "strengthening"
    FADING = "fading"
    STABLE = "stable"


class ConsolidatedTaste(BaseModel):
    name: str
    type: TasteKind
    trend: TasteTrend
    recent_avg: float
    older_avg: float
    total_reviews: int = Field(ge=0)
    consistency: float = Field(ge=0.0, le=1.0, description="1 - |recent_avg - older_avg| / 10")
    strength: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Genre or artist affinity from the user's signal"
    )


class ConsolidationSummary(BaseModel):
    headline: str
    details: str = ""
    core_genres: list[str] = Field(default_factory=list)
    core_artists: list[str] = Field(default_factory=list)
