from enum import Enum

from pydantic import BaseModel, Field, model_validator


class MusicNetwork(str, Enum):
    """The seven listening networks. Independent axes, never normalized together."""

    DISCOVERY = "discovery"
    COMFORT = "comfort"
    DEEP_DIVE = "deep_dive"
    REACTIVE = "reactive"
    EMOTIONAL = "emotional"
    SOCIAL = "social"
    AESTHETIC = "aesthetic"


class NetworkActivation(BaseModel):
    network: MusicNetwork
    activation: float = Field(ge=0.0, le=1.0)


class TypicalRange(BaseModel):
    """Population reference band for one network. Display reference only."""

    min: float
    max: float
    typical: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


class ListeningSignature(BaseModel):
    """Fixed-size map of all seven network activations."""

    activations: dict[MusicNetwork, float]

    @model_validator(mode="after")
    def _check_networks(self) -> "ListeningSignature":
        missing = set(MusicNetwork) - set(self.activations)
        if missing:
            raise ValueError(f"Missing network activations: {sorted(n.value for n in missing)}")
        for network, value in self.activations.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Activation for {network.value} must be within [0, 1], got {value}")
        return self

    def __getitem__(self, network: MusicNetwork) -> float:
        return self.activations[network]

    def as_list(self) -> list[NetworkActivation]:
        """Activations in enum declaration order."""
        return [NetworkActivation(network=n, activation=self.activations[n]) for n in MusicNetwork]

    def values(self) -> list[float]:
        return [self.activations[n] for n in MusicNetwork]

    @property
    def total(self) -> float:
        return sum(self.values())

    def share(self, network: MusicNetwork) -> float:
        """Fraction of total activation held by one network (0 when all are zero)."""
        total = self.total
        return self.activations[network] / total if total > 0 else 0.0


class StandoutNetwork(BaseModel):
    network: MusicNetwork
    direction: str = Field(description="'high' or 'low'")
    deviation: float


class SignatureUniqueness(BaseModel):
    score: float = Field(ge=0.0, le=1.0)
    standout_networks: list[StandoutNetwork] = Field(default_factory=list)


class NetworkChange(BaseModel):
    network: MusicNetwork
    change: float
    direction: str = Field(description="'increased', 'decreased' or 'stable'")


class SignatureDrift(BaseModel):
    overall_drift: float = Field(ge=0.0, le=1.0)
    changes: list[NetworkChange] = Field(default_factory=list)
