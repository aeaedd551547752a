"""
Stateless entry points for callers that already hold the data.

Each function builds its component on demand; use ``TasteIDService`` when
ratings should be read through collaborators instead.
"""

from datetime import datetime

from tasteid.models.archetype import ArchetypeAssignment
from tasteid.models.compatibility import CompatibilityResult, SimilarTaster
from tasteid.models.consolidation import ConsolidatedTaste
from tasteid.models.networks import ListeningSignature, NetworkActivation
from tasteid.models.polarity import PolarityScore
from tasteid.models.rating import EngagementCounters, RatedAlbum
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.archetypes import ArchetypeClassifier
from tasteid.services.profile.compatibility import CompatibilityMatcher
from tasteid.services.profile.consolidation import ConsolidationTracker, summarize_consolidation
from tasteid.services.profile.constants import SIMILAR_TASTERS_LIMIT
from tasteid.services.profile.extractor import SignalExtractor
from tasteid.services.profile.highlights import (
    detect_future_selves,
    extract_memorable_moments,
    find_signature_albums,
)
from tasteid.services.profile.networks import NetworkMapper
from tasteid.services.profile.polarity import PolarityScorer
from tasteid.services.profile.service import as_signature


def extract_taste_signal(
    user_id: str,
    history: list[RatedAlbum],
    engagement: EngagementCounters | None = None,
    reference_time: datetime | None = None,
) -> TasteSignal:
    return SignalExtractor().extract(user_id, history, engagement=engagement, reference_time=reference_time)


def compute_activations(signature: TasteSignal) -> ListeningSignature:
    return NetworkMapper().map(signature)


def compute_archetype(signature: TasteSignal, min_reviews: int | None = None) -> ArchetypeAssignment:
    """Classify a stored signature; its listening networks are derived from it."""
    return ArchetypeClassifier(min_reviews=min_reviews).classify(NetworkMapper().map(signature), signature)


def compute_polarity_score(
    signature: TasteSignal,
    activations: ListeningSignature | list[NetworkActivation],
    consolidations: list[ConsolidatedTaste],
) -> PolarityScore:
    return PolarityScorer().score(signature, as_signature(activations), consolidations)


def compute_consolidation(
    rating_history: list[RatedAlbum], reference_time: datetime | None = None
) -> list[ConsolidatedTaste]:
    return ConsolidationTracker().track(rating_history, reference_time=reference_time)


def compute_compatibility(signature_a: TasteSignal, signature_b: TasteSignal) -> CompatibilityResult:
    return CompatibilityMatcher().match(signature_a, signature_b)


def find_similar_tasters(
    signature: TasteSignal, candidates: list[TasteSignal], limit: int = SIMILAR_TASTERS_LIMIT
) -> list[SimilarTaster]:
    return CompatibilityMatcher().rank(signature, candidates, limit)


__all__ = [
    "compute_activations",
    "compute_archetype",
    "compute_compatibility",
    "compute_consolidation",
    "compute_polarity_score",
    "detect_future_selves",
    "extract_memorable_moments",
    "extract_taste_signal",
    "find_signature_albums",
    "find_similar_tasters",
    "summarize_consolidation",
]
