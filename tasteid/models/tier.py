from pydantic import BaseModel, ConfigDict, Field


class TasteTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    min_ratings: int
    max_confidence: int = Field(description="Confidence ceiling shown for this tier, 0-100")
    description: str


class TierProgress(BaseModel):
    current: TasteTier
    next: TasteTier | None = None
    progress: float = Field(ge=0.0, le=100.0)
    ratings_to_next: int = Field(ge=0)
