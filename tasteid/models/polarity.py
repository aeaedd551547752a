from pydantic import BaseModel, Field


class PolarityComponents(BaseModel):
    signature_strength: float = Field(ge=0.0, le=1.0)
    pattern_diversity: float = Field(ge=0.0, le=1.0)
    consolidation_score: float = Field(ge=0.0, le=1.0)
    uniqueness_score: float = Field(ge=0.0, le=1.0)
    engagement_depth: float = Field(ge=0.0, le=1.0)


class PolarityScore(BaseModel):
    """How distinctive a taste signature is: a fixed weighted sum of five components."""

    value: float = Field(ge=0.0, le=1.0)
    components: PolarityComponents
