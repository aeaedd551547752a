from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from tasteid.models.archetype import ArchetypeAssignment
from tasteid.models.consolidation import ConsolidatedTaste, ConsolidationSummary
from tasteid.models.highlights import MemorableMoment, MusicalFutureSelf
from tasteid.models.networks import ListeningSignature
from tasteid.models.polarity import PolarityScore
from tasteid.models.signal import ArtistAffinity, TasteSignal
from tasteid.models.tier import TierProgress


class TasteProfile(BaseModel):
    """Everything the engine derives for one user in a single recompute."""

    signal: TasteSignal
    signature: ListeningSignature
    archetype: ArchetypeAssignment
    patterns: list[str] = Field(default_factory=list)
    consolidation: list[ConsolidatedTaste] = Field(default_factory=list)
    consolidation_summary: ConsolidationSummary
    polarity: PolarityScore
    tier: TierProgress

    top_genres: list[str] = Field(default_factory=list)
    top_artists: list[str] = Field(default_factory=list)
    top_decades: list[str] = Field(default_factory=list)
    artist_dna: list[ArtistAffinity] = Field(default_factory=list)
    signature_albums: list[str] = Field(default_factory=list, description="Album ids")
    memorable_moments: list[MemorableMoment] = Field(default_factory=list)
    future_selves: list[MusicalFutureSelf] = Field(default_factory=list)
    rating_skew: Literal["harsh", "balanced", "lenient"] = "balanced"
    review_depth: Literal["rater", "writer", "essayist"] = "rater"
    adventurousness: float = Field(default=0.0, ge=0.0, le=1.0)

    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
