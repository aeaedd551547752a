from tasteid.api import (
    compute_activations,
    compute_archetype,
    compute_compatibility,
    compute_consolidation,
    compute_polarity_score,
    detect_future_selves,
    extract_memorable_moments,
    extract_taste_signal,
    find_signature_albums,
    find_similar_tasters,
    summarize_consolidation,
)
from tasteid.core.version import __version__
from tasteid.services.profile.drift import compare_signatures
from tasteid.services.profile.service import TasteIDService
from tasteid.services.profile.tiers import tier_progress

__all__ = [
    "TasteIDService",
    "compare_signatures",
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
    "tier_progress",
    "__version__",
]
