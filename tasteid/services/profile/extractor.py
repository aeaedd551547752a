import statistics
from collections import defaultdict
from datetime import datetime, timezone

from loguru import logger

from tasteid.models.rating import EngagementCounters, RatedAlbum
from tasteid.models.signal import TasteSignal
from tasteid.services.profile import sentiment
from tasteid.services.profile.constants import (
    CONSENSUS_MAX_DIFF,
    CONTRARIAN_MIN_DIFF,
    EMOTIONAL_REVIEW_MIN_CHARS,
    MAINSTREAM_RANK_MAX,
    OBSCURE_RANK_MIN,
    RECENT_RELEASE_YEARS,
)
from tasteid.services.profile.evidence import EvidenceCalculator, as_utc


def normalize_to_max(scores: dict[str, float]) -> dict[str, float]:
    """
    Scale a user's scores into 0-1 against that user's own maximum.

    The floor stays at zero so every observed key keeps a positive value.
    """
    if not scores:
        return {}
    max_score = max(scores.values())
    if max_score <= 0:
        return {k: 0.0 for k in scores}
    return {k: v / max_score for k, v in scores.items()}


class SignalExtractor:
    """
    Builds a TasteSignal from a user's full rating history.

    Design principles:
    - Total recompute: no incremental state, the old signal is simply replaced
    - Accumulate first, normalize once at the end (per user, never globally)
    - History order does not matter; entries are sorted before accumulation
    """

    def __init__(self, evidence_calculator: EvidenceCalculator | None = None):
        self.evidence_calculator = evidence_calculator or EvidenceCalculator()

    def extract(
        self,
        user_id: str,
        history: list[RatedAlbum],
        engagement: EngagementCounters | None = None,
        reference_time: datetime | None = None,
    ) -> TasteSignal:
        """
        Extract the taste signal for one user.

        Args:
            user_id: Owner of the history
            history: Every rating of the user joined with its album metadata
            engagement: Optional social/visual counters from collaborators
            reference_time: The "now" used for recency; defaults to the current UTC time

        Returns:
            TasteSignal; an all-zero signal with review_count=0 for an empty history
        """
        engagement = engagement or EngagementCounters()
        if not history:
            logger.debug(f"Empty rating history for {user_id}, returning zero signal")
            return TasteSignal(user_id=user_id, engagement=engagement)

        now = as_utc(reference_time or datetime.now(timezone.utc))
        entries = sorted(history, key=lambda e: (as_utc(e.rating.created_at), e.rating.album_id))
        count = len(entries)

        genre_scores: dict[str, float] = defaultdict(float)
        decade_scores: dict[str, float] = defaultdict(float)
        artist_scores: dict[str, float] = defaultdict(float)
        genre_counts: dict[str, int] = defaultdict(int)
        decade_counts: dict[str, int] = defaultdict(int)
        artist_ratings: dict[str, list[float]] = defaultdict(list)
        rating_histogram: dict[int, int] = defaultdict(int)

        scores: list[float] = []
        word_counts: list[int] = []
        sentiments: list[float] = []
        recent_releases = written = emotional = 0
        mainstream = obscure = contrarian = consensus = 0
        album_ages: list[int] = []

        for entry in entries:
            rating, album = entry.rating, entry.album
            weight = self.evidence_calculator.calculate_evidence_weight(rating, now)

            for genre in album.normalized_genres:
                genre_scores[genre] += weight
                genre_counts[genre] += 1

            decade_scores[album.decade] += weight
            decade_counts[album.decade] += 1
            artist_scores[album.artist] += weight
            artist_ratings[album.artist].append(rating.score)
            rating_histogram[int(rating.score)] += 1

            scores.append(rating.score)
            word_counts.append(rating.word_count)
            if rating.review_text and rating.review_text.strip():
                sentiments.append(sentiment.polarity(rating.review_text))
            if self.evidence_calculator.is_written_review(rating):
                written += 1
            if sentiment.is_emotional(rating.review_text, EMOTIONAL_REVIEW_MIN_CHARS):
                emotional += 1

            if album.release_year >= now.year - RECENT_RELEASE_YEARS:
                recent_releases += 1
            album_ages.append(max(0, now.year - album.release_year))

            if album.popularity_rank is not None:
                if album.popularity_rank <= MAINSTREAM_RANK_MAX:
                    mainstream += 1
                elif album.popularity_rank >= OBSCURE_RANK_MIN:
                    obscure += 1

            if album.community_average is not None:
                diff = abs(rating.score - album.community_average)
                if diff > CONTRARIAN_MIN_DIFF:
                    contrarian += 1
                elif diff <= CONSENSUS_MAX_DIFF:
                    consensus += 1

        signal = TasteSignal(
            user_id=user_id,
            genre_vector=normalize_to_max(dict(sorted(genre_scores.items()))),
            artist_vector=normalize_to_max(dict(sorted(artist_scores.items()))),
            artist_frequency={a: len(r) for a, r in sorted(artist_ratings.items())},
            decade_vector=normalize_to_max(dict(sorted(decade_scores.items()))),
            rating_mean=statistics.mean(scores),
            rating_std_dev=statistics.stdev(scores) if count > 1 else 0.0,
            review_count=count,
            avg_review_length=sum(word_counts) / count,
            genre_counts=dict(sorted(genre_counts.items())),
            decade_counts=dict(sorted(decade_counts.items())),
            artist_mean_rating={a: sum(r) / len(r) for a, r in sorted(artist_ratings.items())},
            rating_histogram=dict(sorted(rating_histogram.items())),
            recent_release_ratio=recent_releases / count,
            written_review_ratio=written / count,
            emotional_review_ratio=emotional / count,
            sentiment_variance=min(1.0, sentiment.variance(sentiments)),
            mainstream_ratio=mainstream / count,
            obscure_ratio=obscure / count,
            contrarian_ratio=contrarian / count,
            consensus_ratio=consensus / count,
            avg_album_age=sum(album_ages) / count,
            engagement=engagement,
        )

        logger.debug(
            f"Extracted signal for {user_id}: {count} ratings, "
            f"{len(signal.genre_vector)} genres, {signal.distinct_artists} artists"
        )
        return signal
