import math
from typing import Final

from loguru import logger

from tasteid.core.config import settings
from tasteid.models.archetype import Archetype, ArchetypeAssignment
from tasteid.models.networks import ListeningSignature, MusicNetwork
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import (
    ALBUM_AGE_SATURATION_YEARS,
    ARCHETYPE_AFFINITY_WEIGHT,
    ARCHETYPE_NETWORK_WEIGHT,
    GENRE_BREADTH_SATURATION,
    HARSH_MEAN_CEILING,
    LENIENT_MEAN_FLOOR,
    RATING_SKEW_SPAN,
    SECONDARY_MAX_MARGIN,
    SECONDARY_MIN_SCORE,
    VERBOSITY_SATURATION_WORDS,
)
from tasteid.services.profile.networks import ensure_unit_interval, genre_breadth

D, C, DD, R, E, S, A = (
    MusicNetwork.DISCOVERY,
    MusicNetwork.COMFORT,
    MusicNetwork.DEEP_DIVE,
    MusicNetwork.REACTIVE,
    MusicNetwork.EMOTIONAL,
    MusicNetwork.SOCIAL,
    MusicNetwork.AESTHETIC,
)


def _profile(d: float, c: float, dd: float, r: float, e: float, s: float, a: float) -> dict[MusicNetwork, float]:
    return {D: d, C: c, DD: dd, R: r, E: e, S: s, A: a}


# Adding an archetype means adding a row here; the classifier has no per-archetype logic.
ARCHETYPES: Final[tuple[Archetype, ...]] = (
    # Genre-based archetypes
    Archetype(
        id="hip-hop-head",
        name="Hip-Hop Head",
        description="Lives and breathes hip-hop culture",
        profile=_profile(0.45, 0.40, 0.40, 0.45, 0.40, 0.15, 0.05),
        genres=("hip-hop", "hip hop", "rap", "trap", "southern hip hop", "east coast hip hop", "west coast hip hop"),
    ),
    Archetype(
        id="jazz-explorer",
        name="Jazz Explorer",
        description="Drawn to improvisation and complexity",
        profile=_profile(0.60, 0.30, 0.45, 0.10, 0.35, 0.05, 0.10),
        genres=("jazz", "jazz fusion", "bebop", "modal jazz", "free jazz", "contemporary jazz"),
    ),
    Archetype(
        id="rock-purist",
        name="Rock Purist",
        description="Guitar-driven music runs through their veins",
        profile=_profile(0.35, 0.55, 0.50, 0.15, 0.40, 0.10, 0.05),
        genres=("rock", "classic rock", "hard rock", "alternative rock", "indie rock", "punk rock"),
    ),
    Archetype(
        id="electronic-pioneer",
        name="Electronic Pioneer",
        description="Synths, beats, and futuristic sounds",
        profile=_profile(0.60, 0.30, 0.30, 0.40, 0.30, 0.10, 0.15),
        genres=("electronic", "house", "techno", "ambient", "edm", "drum and bass", "dubstep"),
    ),
    Archetype(
        id="soul-searcher",
        name="Soul Searcher",
        description="Connects with music on an emotional level",
        profile=_profile(0.40, 0.45, 0.35, 0.15, 0.60, 0.10, 0.05),
        genres=("soul", "r&b", "neo soul", "motown", "funk", "gospel"),
    ),
    Archetype(
        id="metal-maven",
        name="Metal Maven",
        description="Heavy riffs and intense energy",
        profile=_profile(0.35, 0.50, 0.55, 0.20, 0.55, 0.10, 0.10),
        genres=("metal", "heavy metal", "death metal", "black metal", "thrash metal", "metalcore"),
    ),
    Archetype(
        id="indie-devotee",
        name="Indie Devotee",
        description="Champions the underground and obscure",
        profile=_profile(0.60, 0.35, 0.40, 0.35, 0.40, 0.10, 0.15),
        genres=("indie", "indie pop", "indie folk", "lo-fi", "bedroom pop", "art pop"),
    ),
    Archetype(
        id="pop-connoisseur",
        name="Pop Connoisseur",
        description="Appreciates craft in mainstream music",
        profile=_profile(0.40, 0.45, 0.30, 0.55, 0.40, 0.20, 0.10),
        genres=("pop", "synth-pop", "dance pop", "electropop", "k-pop", "j-pop"),
    ),
    Archetype(
        id="country-soul",
        name="Country Soul",
        description="Stories, twang, and heartland vibes",
        profile=_profile(0.35, 0.60, 0.40, 0.15, 0.45, 0.10, 0.05),
        genres=("country", "americana", "bluegrass", "folk", "country rock", "outlaw country"),
    ),
    Archetype(
        id="classical-mind",
        name="Classical Mind",
        description="Appreciates composition and orchestration",
        profile=_profile(0.50, 0.45, 0.50, 0.05, 0.30, 0.05, 0.10),
        genres=("classical", "orchestral", "chamber music", "opera", "contemporary classical", "baroque"),
    ),
    # Behaviour-based archetypes
    Archetype(
        id="genre-fluid",
        name="Genre Fluid",
        description="Refuses to be boxed in - listens to everything",
        profile=_profile(0.75, 0.20, 0.20, 0.30, 0.35, 0.10, 0.10),
        trait="breadth",
    ),
    Archetype(
        id="decade-diver",
        name="Decade Diver",
        description="Obsessed with a specific era of music",
        profile=_profile(0.35, 0.55, 0.45, 0.05, 0.30, 0.05, 0.05),
        trait="era_focus",
    ),
    Archetype(
        id="deep-cutter",
        name="Deep Cutter",
        description="Goes beyond the hits, finds the gems",
        profile=_profile(0.65, 0.25, 0.55, 0.10, 0.35, 0.05, 0.10),
        trait="obscurity",
    ),
    Archetype(
        id="chart-chaser",
        name="Chart Chaser",
        description="Always on top of what's hot",
        profile=_profile(0.40, 0.35, 0.20, 0.75, 0.30, 0.25, 0.10),
        trait="mainstream",
    ),
    Archetype(
        id="the-critic",
        name="The Critic",
        description="High standards, few 10s given",
        profile=_profile(0.45, 0.30, 0.30, 0.20, 0.60, 0.10, 0.05),
        trait="harshness",
    ),
    Archetype(
        id="the-enthusiast",
        name="The Enthusiast",
        description="Finds joy in almost everything",
        profile=_profile(0.45, 0.45, 0.30, 0.25, 0.55, 0.15, 0.05),
        trait="leniency",
    ),
    Archetype(
        id="essay-writer",
        name="Essay Writer",
        description="Reviews are mini dissertations",
        profile=_profile(0.40, 0.40, 0.40, 0.20, 0.60, 0.15, 0.05),
        trait="verbosity",
    ),
    Archetype(
        id="album-archaeologist",
        name="Album Archaeologist",
        description="Digs into music history",
        profile=_profile(0.55, 0.40, 0.45, 0.05, 0.30, 0.05, 0.10),
        trait="vintage",
    ),
    Archetype(
        id="new-release-hunter",
        name="New Release Hunter",
        description="First to review the latest drops",
        profile=_profile(0.50, 0.25, 0.25, 0.85, 0.30, 0.15, 0.05),
        trait="recency",
    ),
    Archetype(
        id="taste-twin-seeker",
        name="Taste Twin Seeker",
        description="Always comparing and connecting with others",
        profile=_profile(0.40, 0.35, 0.25, 0.30, 0.35, 0.70, 0.15),
        trait="social",
    ),
)

ARCHETYPES_BY_ID: Final[dict[str, Archetype]] = {a.id: a for a in ARCHETYPES}

_MAX_NETWORK_DISTANCE: Final[float] = math.sqrt(len(MusicNetwork))


def get_archetype(archetype_id: str) -> Archetype | None:
    return ARCHETYPES_BY_ID.get(archetype_id)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def compute_traits(signal: TasteSignal, signature: ListeningSignature) -> dict[str, float]:
    """
    Behavioural trait strengths in [0, 1], one per trait named in the registry.

    Args:
        signal: The user's TasteSignal
        signature: Activations mapped from the same signal

    Returns:
        Trait name → strength
    """
    n = signal.review_count
    if n == 0:
        return {}

    top_decade_share = max(signal.decade_counts.values()) / n if signal.decade_counts else 0.0
    coverage = 1.0 - math.exp(-signal.distinct_genres / GENRE_BREADTH_SATURATION)

    return {
        "breadth": genre_breadth(signal.genre_counts) * coverage,
        "era_focus": _clamp((top_decade_share - 0.4) / 0.6),
        "obscurity": _clamp(signal.obscure_ratio / 0.5),
        "mainstream": _clamp(signal.mainstream_ratio / 0.5),
        "harshness": _clamp((HARSH_MEAN_CEILING - signal.rating_mean) / RATING_SKEW_SPAN),
        "leniency": _clamp((signal.rating_mean - LENIENT_MEAN_FLOOR) / RATING_SKEW_SPAN),
        "verbosity": 1.0 - math.exp(-signal.avg_review_length / VERBOSITY_SATURATION_WORDS),
        "vintage": 1.0 - math.exp(-signal.avg_album_age / ALBUM_AGE_SATURATION_YEARS),
        "recency": signal.recent_release_ratio,
        "social": signature[MusicNetwork.SOCIAL],
    }


def network_similarity(signature: ListeningSignature, profile: dict[MusicNetwork, float]) -> float:
    """Euclidean distance to the reference profile, inverted and scaled to [0, 1]."""
    distance = math.sqrt(sum((signature[n] - profile[n]) ** 2 for n in MusicNetwork))
    return _clamp(1.0 - distance / _MAX_NETWORK_DISTANCE)


class ArchetypeClassifier:
    """
    Assigns primary/secondary archetypes by scoring every registry row.

    Fit = affinity (genre or trait) blended with how close the user's
    activation vector sits to the archetype's reference profile.
    """

    def __init__(self, archetypes: tuple[Archetype, ...] = ARCHETYPES, min_reviews: int | None = None):
        self.archetypes = archetypes
        self.min_reviews = settings.MIN_REVIEWS_FOR_ARCHETYPE if min_reviews is None else min_reviews

    @staticmethod
    def affinity(archetype: Archetype, signal: TasteSignal, traits: dict[str, float]) -> float:
        if archetype.genres:
            return max((signal.genre_vector.get(g, 0.0) for g in archetype.genres), default=0.0)
        if archetype.trait:
            return traits.get(archetype.trait, 0.0)
        return 0.0

    def fit(
        self, archetype: Archetype, signature: ListeningSignature, signal: TasteSignal, traits: dict[str, float]
    ) -> float:
        score = ARCHETYPE_AFFINITY_WEIGHT * self.affinity(
            archetype, signal, traits
        ) + ARCHETYPE_NETWORK_WEIGHT * network_similarity(signature, archetype.profile)
        return ensure_unit_interval(f"archetype.{archetype.id}", _clamp(score))

    def classify(self, signature: ListeningSignature, signal: TasteSignal) -> ArchetypeAssignment:
        """
        Classify a user.

        Args:
            signature: Activations mapped from the signal
            signal: The user's TasteSignal

        Returns:
            ArchetypeAssignment; "unclassified" when review_count < min_reviews
        """
        if signal.review_count < self.min_reviews:
            logger.debug(
                f"{signal.user_id} has {signal.review_count} ratings (< {self.min_reviews}), leaving unclassified"
            )
            return ArchetypeAssignment()

        traits = compute_traits(signal, signature)
        scores = {a.id: self.fit(a, signature, signal, traits) for a in self.archetypes}

        # Stable sort keeps registry order on ties
        ranked = sorted(self.archetypes, key=lambda a: -scores[a.id])
        primary = ranked[0]
        primary_score = scores[primary.id]

        secondary = None
        if len(ranked) > 1:
            runner_up = ranked[1]
            runner_score = scores[runner_up.id]
            if primary_score - runner_score <= SECONDARY_MAX_MARGIN and runner_score >= SECONDARY_MIN_SCORE:
                secondary = runner_up.id

        logger.debug(
            f"Classified {signal.user_id} as {primary.id} ({primary_score:.2f})"
            + (f", secondary {secondary}" if secondary else "")
        )
        return ArchetypeAssignment(
            primary=primary.id,
            primary_confidence=primary_score,
            secondary=secondary,
            scores=scores,
        )
