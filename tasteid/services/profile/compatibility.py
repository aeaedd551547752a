from loguru import logger

from tasteid.core.config import settings
from tasteid.models.compatibility import CompatibilityBreakdown, CompatibilityResult, MatchType, SimilarTaster
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import (
    COMPATIBILITY_SHARED_GENRES_TOP,
    COMPATIBILITY_WEIGHT_ARTIST,
    COMPATIBILITY_WEIGHT_GENRE,
    COMPATIBILITY_WEIGHT_RATING,
    MATCH_COMPATIBLE_MIN,
    MATCH_STRONG_MIN,
    MATCH_TASTE_TWIN_MIN,
    RATING_ALIGNMENT_MEAN_SCALE,
    RATING_ALIGNMENT_MEAN_WEIGHT,
    RATING_ALIGNMENT_STDDEV_SCALE,
    RATING_ALIGNMENT_STDDEV_WEIGHT,
    SIMILAR_TASTERS_LIMIT,
)
from tasteid.services.profile.similarity import cosine_similarity, jaccard_similarity


def match_type_for(overall_score: int) -> MatchType:
    if overall_score >= MATCH_TASTE_TWIN_MIN:
        return MatchType.TASTE_TWIN
    if overall_score >= MATCH_STRONG_MIN:
        return MatchType.STRONG_MATCH
    if overall_score >= MATCH_COMPATIBLE_MIN:
        return MatchType.COMPATIBLE
    return MatchType.LOW_MATCH


def rating_alignment(a: TasteSignal, b: TasteSignal) -> float:
    """1 for identical rating behaviour, falling with mean and spread differences."""
    mean_gap = abs(a.rating_mean - b.rating_mean) / RATING_ALIGNMENT_MEAN_SCALE
    spread_gap = abs(a.rating_std_dev - b.rating_std_dev) / RATING_ALIGNMENT_STDDEV_SCALE
    return max(0.0, 1.0 - (RATING_ALIGNMENT_MEAN_WEIGHT * mean_gap + RATING_ALIGNMENT_STDDEV_WEIGHT * spread_gap))


class CompatibilityMatcher:
    """
    Symmetric pairwise match between two taste signals.

    Read-only: never touches either user's signature. Every computation here
    is order-independent, so ``match(a, b) == match(b, a)`` holds exactly.
    """

    def __init__(self, top_artists: int | None = None):
        self.top_artists = settings.COMPATIBILITY_TOP_ARTISTS if top_artists is None else top_artists

    def match(self, signal_a: TasteSignal, signal_b: TasteSignal) -> CompatibilityResult:
        """
        Compute compatibility.

        Args:
            signal_a: One user's TasteSignal
            signal_b: The other user's TasteSignal

        Returns:
            CompatibilityResult with user ids in sorted order
        """
        first, second = sorted((signal_a, signal_b), key=lambda s: s.user_id)

        genre = cosine_similarity(first.genre_vector, second.genre_vector)

        artists_first = set(first.get_top_artists(self.top_artists))
        artists_second = set(second.get_top_artists(self.top_artists))
        artist = jaccard_similarity(artists_first, artists_second)

        rating = rating_alignment(first, second)

        breakdown = CompatibilityBreakdown(
            genre_overlap=round(genre * 100),
            artist_overlap=round(artist * 100),
            rating_alignment=round(rating * 100),
        )

        # Artist weight is spread over the other two when either side has no artist data
        if artists_first and artists_second:
            weights = (COMPATIBILITY_WEIGHT_GENRE, COMPATIBILITY_WEIGHT_ARTIST, COMPATIBILITY_WEIGHT_RATING)
        else:
            remaining = COMPATIBILITY_WEIGHT_GENRE + COMPATIBILITY_WEIGHT_RATING
            weights = (COMPATIBILITY_WEIGHT_GENRE / remaining, 0.0, COMPATIBILITY_WEIGHT_RATING / remaining)

        blended = weights[0] * genre + weights[1] * artist + weights[2] * rating
        overall = max(0, min(100, round(blended * 100)))

        shared_genres = sorted(
            set(first.get_top_genres(COMPATIBILITY_SHARED_GENRES_TOP))
            & set(second.get_top_genres(COMPATIBILITY_SHARED_GENRES_TOP))
        )
        shared_artists = sorted(artists_first & artists_second)

        logger.debug(f"Compatibility {first.user_id} <> {second.user_id}: {overall}")
        return CompatibilityResult(
            user_a=first.user_id,
            user_b=second.user_id,
            overall_score=overall,
            match_type=match_type_for(overall),
            breakdown=breakdown,
            shared_genres=shared_genres,
            shared_artists=shared_artists,
        )

    def rank(
        self, signal: TasteSignal, candidates: list[TasteSignal], limit: int = SIMILAR_TASTERS_LIMIT
    ) -> list[SimilarTaster]:
        """
        Rank other users by compatibility with ``signal``.

        Args:
            signal: The subject's TasteSignal
            candidates: Other users' signals; the subject itself is skipped
            limit: Maximum number of tasters

        Returns:
            Best match first, ties broken by user id
        """
        tasters = []
        for candidate in candidates:
            if candidate.user_id == signal.user_id:
                continue
            result = self.match(signal, candidate)
            tasters.append(
                SimilarTaster(
                    user_id=candidate.user_id,
                    compatibility=result.overall_score,
                    match_type=result.match_type,
                    shared_genres=result.shared_genres,
                    shared_artists=result.shared_artists,
                )
            )
        tasters.sort(key=lambda t: (-t.compatibility, t.user_id))
        return tasters[:limit]
