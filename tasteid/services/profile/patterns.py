from typing import Callable, Final

from pydantic import BaseModel, ConfigDict

from tasteid.models.networks import ListeningSignature, MusicNetwork
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import PATTERN_LIMIT, PATTERN_MIN_REVIEWS


class PatternRule(BaseModel):
    """A named behavioural pattern and the predicate that detects it."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    detect: Callable[[TasteSignal, ListeningSignature], bool]


def _bucket_count(signal: TasteSignal, predicate: Callable[[int], bool]) -> int:
    return sum(count for bucket, count in signal.rating_histogram.items() if predicate(bucket))


def _polarized(signal: TasteSignal, _: ListeningSignature) -> bool:
    extreme = _bucket_count(signal, lambda b: b <= 3 or b >= 8)
    middle = _bucket_count(signal, lambda b: 3 < b < 8)
    return signal.review_count > PATTERN_MIN_REVIEWS and extreme > middle * 1.5


def _perfection_seeker(signal: TasteSignal, _: ListeningSignature) -> bool:
    perfect = signal.rating_histogram.get(10, 0)
    near_perfect = _bucket_count(signal, lambda b: 8 <= b < 10)
    return perfect >= 3 and perfect > near_perfect


def _artist_loyalist(signal: TasteSignal, _: ListeningSignature) -> bool:
    loyal = [
        artist
        for artist, count in signal.artist_frequency.items()
        if count >= 3 and signal.artist_mean_rating.get(artist, 0.0) >= 7.0
    ]
    return len(loyal) >= 3


def _genre_specialist(signal: TasteSignal, _: ListeningSignature) -> bool:
    if signal.review_count <= PATTERN_MIN_REVIEWS:
        return False
    top_three = sum(sorted(signal.genre_counts.values(), reverse=True)[:3])
    return top_three / signal.review_count > 0.7


def _era_specialist(signal: TasteSignal, _: ListeningSignature) -> bool:
    if not signal.decade_counts:
        return False
    return max(signal.decade_counts.values()) / signal.review_count > 0.6


def _ratio_over(field: str, threshold: float) -> Callable[[TasteSignal, ListeningSignature], bool]:
    def detect(signal: TasteSignal, _: ListeningSignature) -> bool:
        return signal.review_count > PATTERN_MIN_REVIEWS and getattr(signal, field) > threshold

    return detect


# Network patterns compare each network's share of total activation, so the
# thresholds read the same however strongly a user engages overall.
PATTERNS: Final[tuple[PatternRule, ...]] = (
    PatternRule(
        name="Discovery↔Comfort Oscillation",
        description="Healthy balance between new and familiar",
        detect=lambda s, sig: sig.share(MusicNetwork.DISCOVERY) > 0.18 and sig.share(MusicNetwork.COMFORT) > 0.15,
    ),
    PatternRule(
        name="Deep Dive Sprints",
        description="Goes all-in on artists",
        detect=lambda s, sig: sig.share(MusicNetwork.DEEP_DIVE) > 0.15,
    ),
    PatternRule(
        name="New Release Hunter",
        description="Stays on top of current music",
        detect=lambda s, sig: sig.share(MusicNetwork.REACTIVE) > 0.2,
    ),
    PatternRule(
        name="Emotional Listener",
        description="Strong reactions to music",
        detect=lambda s, sig: sig.share(MusicNetwork.EMOTIONAL) > 0.25,
    ),
    PatternRule(
        name="Critical Ear",
        description="Harsh on average",
        detect=lambda s, sig: s.review_count > 0 and s.rating_mean < 5.5,
    ),
    PatternRule(
        name="Music Optimist",
        description="Generous on average",
        detect=lambda s, sig: s.review_count > 0 and s.rating_mean > 7.5,
    ),
    PatternRule(name="Polarized Taste", description="Loves it or hates it", detect=_polarized),
    PatternRule(name="Perfection Seeker", description="Gives 10s, rarely 8s or 9s", detect=_perfection_seeker),
    PatternRule(
        name="Discography Completionist",
        description="Deep dives into artist catalogs",
        detect=lambda s, sig: bool(s.artist_frequency) and max(s.artist_frequency.values()) >= 5,
    ),
    PatternRule(name="Artist Loyalist", description="Keeps rating favourite artists highly", detect=_artist_loyalist),
    PatternRule(
        name="Genre Explorer",
        description="Wide genre coverage",
        detect=lambda s, sig: s.distinct_genres > 15,
    ),
    PatternRule(name="Genre Specialist", description="Most ratings in three genres", detect=_genre_specialist),
    PatternRule(
        name="Archive Diver",
        description="Prefers music more than 15 years old",
        detect=lambda s, sig: s.review_count > 0 and s.avg_album_age > 15,
    ),
    PatternRule(name="Era Specialist", description="Most ratings from one decade", detect=_era_specialist),
    PatternRule(
        name="Essay Writer",
        description="Long, thoughtful reviews",
        detect=lambda s, sig: s.avg_review_length > 100,
    ),
    PatternRule(name="Contrarian", description="Often far from the consensus", detect=_ratio_over("contrarian_ratio", 0.3)),
    PatternRule(
        name="Consensus Builder",
        description="Usually aligns with popular opinion",
        detect=_ratio_over("consensus_ratio", 0.6),
    ),
    PatternRule(
        name="Hidden Gem Hunter",
        description="Spends time on obscure releases",
        detect=_ratio_over("obscure_ratio", 0.3),
    ),
)


class PatternDetector:
    def __init__(self, rules: tuple[PatternRule, ...] = PATTERNS, limit: int = PATTERN_LIMIT):
        self.rules = rules
        self.limit = limit

    @property
    def registry_size(self) -> int:
        return len(self.rules)

    @property
    def max_detected(self) -> int:
        """Most patterns ``detect`` can ever return."""
        return min(self.limit, self.registry_size)

    def detect(self, signal: TasteSignal, signature: ListeningSignature) -> list[str]:
        """Names of detected patterns in registry order, at most ``limit``."""
        if signal.review_count == 0:
            return []
        found = [rule.name for rule in self.rules if rule.detect(signal, signature)]
        return found[: self.limit]
