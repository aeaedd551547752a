import math
from typing import Final

from loguru import logger

from tasteid.core.exceptions import ComputationError
from tasteid.models.networks import (
    ListeningSignature,
    MusicNetwork,
    SignatureUniqueness,
    StandoutNetwork,
    TypicalRange,
)
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import (
    AESTHETIC_WEIGHT_ART_VIEWS,
    AESTHETIC_WEIGHT_ARTWORK_SAVES,
    EMOTIONAL_STDDEV_SCALE,
    EMOTIONAL_WEIGHT_EXTREMES,
    EMOTIONAL_WEIGHT_SENTIMENT,
    EMOTIONAL_WEIGHT_STDDEV,
    EXTREME_HIGH_MIN,
    EXTREME_LOW_MAX,
    MAX_NETWORK_DEVIATION,
    SOCIAL_WEIGHT_COLLABORATIONS,
    SOCIAL_WEIGHT_COMMENTS,
    SOCIAL_WEIGHT_FOLLOWS,
    SOCIAL_WEIGHT_LIST_SHARES,
    SQUASH_AESTHETIC,
    SQUASH_COMFORT,
    SQUASH_DEEP_DIVE,
    SQUASH_DISCOVERY,
    SQUASH_EMOTIONAL,
    SQUASH_REACTIVE,
    SQUASH_SOCIAL,
    STANDOUT_NETWORK_LIMIT,
)

# Population baseline per network, shown next to a user's activation
TYPICAL_NETWORK_RANGES: Final[dict[MusicNetwork, TypicalRange]] = {
    MusicNetwork.DISCOVERY: TypicalRange(min=0.15, max=0.30, typical=0.22),
    MusicNetwork.COMFORT: TypicalRange(min=0.18, max=0.32, typical=0.25),
    MusicNetwork.DEEP_DIVE: TypicalRange(min=0.08, max=0.20, typical=0.14),
    MusicNetwork.REACTIVE: TypicalRange(min=0.10, max=0.22, typical=0.16),
    MusicNetwork.EMOTIONAL: TypicalRange(min=0.08, max=0.20, typical=0.14),
    MusicNetwork.SOCIAL: TypicalRange(min=0.03, max=0.12, typical=0.06),
    MusicNetwork.AESTHETIC: TypicalRange(min=0.02, max=0.10, typical=0.05),
}


def squash(x: float, k: float) -> float:
    """Monotonic saturating map of x >= 0 onto [0, 1): 1 - exp(-k * x)."""
    if x <= 0:
        return 0.0
    return 1.0 - math.exp(-k * x)


def genre_breadth(genre_counts: dict[str, int]) -> float:
    """Shannon entropy of genre counts normalized by its maximum (0 for one genre)."""
    if len(genre_counts) <= 1:
        return 0.0
    total = sum(genre_counts.values())
    if total <= 0:
        return 0.0
    entropy = 0.0
    for _, count in sorted(genre_counts.items()):
        if count > 0:
            p = count / total
            entropy -= p * math.log2(p)
    return min(1.0, entropy / math.log2(len(genre_counts)))


def ensure_unit_interval(name: str, value: float) -> float:
    """Raise ComputationError for NaN or out-of-range values; never clamps silently."""
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ComputationError(name, value, (0.0, 1.0))
    return value


class NetworkMapper:
    """
    Maps a TasteSignal onto the seven listening networks.

    Each network reads its own named inputs and is squashed independently.
    There is no normalization across networks: a user can be high on all
    seven, or on none.
    """

    @staticmethod
    def discovery_input(signal: TasteSignal) -> float:
        n = max(signal.review_count, 1)
        distinct_artist_rate = signal.distinct_artists / n
        genre_rate = min(signal.distinct_genres / (2 * n), 1.0)
        return 0.5 * distinct_artist_rate + 0.5 * genre_rate

    @staticmethod
    def comfort_input(signal: TasteSignal) -> float:
        if not signal.artist_frequency:
            return 0.0
        repeat_ratio = sum(1 for c in signal.artist_frequency.values() if c > 1) / signal.distinct_artists
        concentration = 1.0 - genre_breadth(signal.genre_counts) if signal.genre_counts else 0.0
        return 0.5 * repeat_ratio + 0.5 * concentration

    @staticmethod
    def deep_dive_input(signal: TasteSignal) -> float:
        if not signal.artist_frequency:
            return 0.0
        return float(max(signal.artist_frequency.values()) - 1)

    @staticmethod
    def reactive_input(signal: TasteSignal) -> float:
        return signal.recent_release_ratio

    @staticmethod
    def emotional_input(signal: TasteSignal) -> float:
        if signal.review_count == 0:
            return 0.0
        extremes = sum(
            count
            for bucket, count in signal.rating_histogram.items()
            if bucket <= EXTREME_LOW_MAX or bucket >= EXTREME_HIGH_MIN
        )
        spread = min(signal.rating_std_dev / EMOTIONAL_STDDEV_SCALE, 1.0)
        return (
            EMOTIONAL_WEIGHT_STDDEV * spread
            + EMOTIONAL_WEIGHT_EXTREMES * (extremes / signal.review_count)
            + EMOTIONAL_WEIGHT_SENTIMENT * signal.sentiment_variance
        )

    @staticmethod
    def social_input(signal: TasteSignal) -> float:
        e = signal.engagement
        return (
            SOCIAL_WEIGHT_COLLABORATIONS * e.collaborations
            + SOCIAL_WEIGHT_COMMENTS * e.comments
            + SOCIAL_WEIGHT_LIST_SHARES * e.list_shares
            + SOCIAL_WEIGHT_FOLLOWS * e.follows
        )

    @staticmethod
    def aesthetic_input(signal: TasteSignal) -> float:
        e = signal.engagement
        return AESTHETIC_WEIGHT_ART_VIEWS * e.album_art_views + AESTHETIC_WEIGHT_ARTWORK_SAVES * e.artwork_saves

    def map(self, signal: TasteSignal) -> ListeningSignature:
        """
        Compute all seven activations.

        Args:
            signal: The user's TasteSignal

        Returns:
            ListeningSignature with every activation in [0, 1]
        """
        raw = {
            MusicNetwork.DISCOVERY: (self.discovery_input(signal), SQUASH_DISCOVERY),
            MusicNetwork.COMFORT: (self.comfort_input(signal), SQUASH_COMFORT),
            MusicNetwork.DEEP_DIVE: (self.deep_dive_input(signal), SQUASH_DEEP_DIVE),
            MusicNetwork.REACTIVE: (self.reactive_input(signal), SQUASH_REACTIVE),
            MusicNetwork.EMOTIONAL: (self.emotional_input(signal), SQUASH_EMOTIONAL),
            MusicNetwork.SOCIAL: (self.social_input(signal), SQUASH_SOCIAL),
            MusicNetwork.AESTHETIC: (self.aesthetic_input(signal), SQUASH_AESTHETIC),
        }
        activations = {
            network: ensure_unit_interval(f"activation.{network.value}", squash(x, k))
            for network, (x, k) in raw.items()
        }
        summary = ", ".join(f"{n.value}={a:.2f}" for n, a in activations.items())
        logger.debug(f"Network activations for {signal.user_id}: {summary}")
        return ListeningSignature(activations=activations)


def typical_range(network: MusicNetwork) -> TypicalRange:
    return TYPICAL_NETWORK_RANGES[network]


def dominant_networks(signature: ListeningSignature, top_n: int = 3) -> list[MusicNetwork]:
    """Strongest networks first; ties keep enum order."""
    ranked = sorted(MusicNetwork, key=lambda n: -signature[n])
    return ranked[:top_n]


def signature_uniqueness(signature: ListeningSignature) -> SignatureUniqueness:
    """
    How far a signature sits from the population baseline.

    Total absolute deviation from each network's typical midpoint, normalized so
    that every network at its maximum deviation scores 1.
    """
    total_deviation = 0.0
    standouts: list[StandoutNetwork] = []

    for network in MusicNetwork:
        value = signature[network]
        band = TYPICAL_NETWORK_RANGES[network]
        total_deviation += abs(value - band.midpoint)
        if value > band.max:
            standouts.append(StandoutNetwork(network=network, direction="high", deviation=value - band.max))
        elif value < band.min:
            standouts.append(StandoutNetwork(network=network, direction="low", deviation=band.min - value))

    max_possible = len(MusicNetwork) * MAX_NETWORK_DEVIATION
    standouts.sort(key=lambda s: -s.deviation)
    return SignatureUniqueness(
        score=min(total_deviation / max_possible, 1.0),
        standout_networks=standouts[:STANDOUT_NETWORK_LIMIT],
    )
