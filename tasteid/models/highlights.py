from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MomentKind(str, Enum):
    FIRST_TEN = "first_10"
    FIRST_ZERO = "first_0"
    EMOTIONAL_REVIEW = "emotional_review"


class MemorableMoment(BaseModel):
    """A rating worth remembering in a user's history."""

    type: MomentKind
    album_id: str
    artist: str
    rating: float = Field(ge=0.0, le=10.0)
    date: datetime
    description: str = ""


class MusicalFutureSelf(BaseModel):
    """A listening path the user is already partway along."""

    id: str
    name: str
    description: str
    progress: float = Field(ge=0.0, le=1.0, description="How far along the path, 0-1")
    next_steps: list[str] = Field(default_factory=list)
    related_genres: list[str] = Field(default_factory=list)
    related_artists: list[str] = Field(default_factory=list)
