from pydantic import BaseModel, ConfigDict, Field

from tasteid.models.networks import MusicNetwork

UNCLASSIFIED = "unclassified"


class Archetype(BaseModel):
    """
    One row of the archetype registry.

    An archetype is described entirely by data: a reference activation profile
    over the seven networks plus a single affinity source, either a set of
    genres or the name of a behavioural trait.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    profile: dict[MusicNetwork, float]
    genres: tuple[str, ...] = ()
    trait: str | None = None

    @property
    def behavioral(self) -> bool:
        return not self.genres


class ArchetypeAssignment(BaseModel):
    primary: str = UNCLASSIFIED
    primary_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    secondary: str | None = None
    scores: dict[str, float] = Field(default_factory=dict, description="Archetype id → fit, 0-1")

    @property
    def is_classified(self) -> bool:
        return self.primary != UNCLASSIFIED
