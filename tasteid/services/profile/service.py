import threading
from datetime import datetime, timezone
from typing import Callable

from cachetools import TTLCache
from loguru import logger

from tasteid.core.config import settings
from tasteid.models.archetype import ArchetypeAssignment
from tasteid.models.compatibility import CompatibilityResult, SimilarTaster
from tasteid.models.consolidation import ConsolidatedTaste
from tasteid.models.networks import ListeningSignature, NetworkActivation
from tasteid.models.polarity import PolarityScore
from tasteid.models.profile import TasteProfile
from tasteid.models.rating import RatedAlbum
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.archetypes import ArchetypeClassifier
from tasteid.services.profile.compatibility import CompatibilityMatcher
from tasteid.services.profile.consolidation import ConsolidationTracker, summarize_consolidation
from tasteid.services.profile.constants import (
    ARTIST_DNA_LIMIT,
    HARSH_SKEW_MAX,
    LENIENT_SKEW_MIN,
    RATER_MAX_WORDS,
    SIMILAR_TASTERS_LIMIT,
    TOP_ARTISTS_LIMIT,
    TOP_DECADES_LIMIT,
    TOP_GENRES_LIMIT,
    WRITER_MAX_WORDS,
)
from tasteid.services.profile.extractor import SignalExtractor
from tasteid.services.profile.highlights import (
    detect_future_selves,
    extract_memorable_moments,
    find_signature_albums,
)
from tasteid.services.profile.networks import NetworkMapper, genre_breadth
from tasteid.services.profile.patterns import PatternDetector
from tasteid.services.profile.polarity import PolarityScorer
from tasteid.services.profile.tiers import tier_progress
from tasteid.services.sources import AlbumResolver, EngagementSource, RatingReader


def as_signature(activations: ListeningSignature | list[NetworkActivation]) -> ListeningSignature:
    if isinstance(activations, ListeningSignature):
        return activations
    return ListeningSignature(activations={a.network: a.activation for a in activations})


def rating_skew(rating_mean: float) -> str:
    if rating_mean < HARSH_SKEW_MAX:
        return "harsh"
    if rating_mean > LENIENT_SKEW_MIN:
        return "lenient"
    return "balanced"


def review_depth(avg_review_length: float) -> str:
    if avg_review_length < RATER_MAX_WORDS:
        return "rater"
    if avg_review_length < WRITER_MAX_WORDS:
        return "writer"
    return "essayist"


class CompatibilityCache:
    """
    TTL cache of compatibility results keyed by the unordered user pair.

    Thread-safe; entries touching a user are dropped when that user's signal is
    recomputed.
    """

    def __init__(self, maxsize: int, ttl: int):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    @staticmethod
    def key(user_a: str, user_b: str) -> frozenset[str]:
        return frozenset((user_a, user_b))

    def get(self, user_a: str, user_b: str) -> CompatibilityResult | None:
        with self._lock:
            return self._cache.get(self.key(user_a, user_b))

    def set(self, result: CompatibilityResult) -> None:
        with self._lock:
            self._cache[self.key(result.user_a, result.user_b)] = result

    def invalidate(self, user_id: str) -> None:
        with self._lock:
            for key in [k for k in self._cache.keys() if user_id in k]:
                self._cache.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class TasteIDService:
    """
    Service for computing TasteIDs from collaborator data.

    Wires the rating store and album catalog into the pure engine components.
    Every computation is a total recompute; nothing is persisted here.
    """

    def __init__(
        self,
        ratings: RatingReader,
        albums: AlbumResolver,
        engagement: EngagementSource | None = None,
        clock: Callable[[], datetime] | None = None,
        cache_enabled: bool | None = None,
    ):
        self.ratings = ratings
        self.albums = albums
        self.engagement = engagement
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.extractor = SignalExtractor()
        self.mapper = NetworkMapper()
        self.classifier = ArchetypeClassifier()
        self.pattern_detector = PatternDetector()
        self.polarity_scorer = PolarityScorer(self.pattern_detector)
        self.tracker = ConsolidationTracker()
        self.matcher = CompatibilityMatcher()

        enabled = settings.COMPATIBILITY_CACHE_ENABLED if cache_enabled is None else cache_enabled
        self.compatibility_cache: CompatibilityCache | None = None
        if enabled:
            self.compatibility_cache = CompatibilityCache(
                maxsize=settings.COMPATIBILITY_CACHE_MAXSIZE,
                ttl=settings.COMPATIBILITY_CACHE_TTL_SECONDS,
            )
            logger.info(
                f"Compatibility cache enabled (maxsize={settings.COMPATIBILITY_CACHE_MAXSIZE}, "
                f"ttl={settings.COMPATIBILITY_CACHE_TTL_SECONDS}s)"
            )

    def load_history(self, user_id: str) -> list[RatedAlbum]:
        """
        Join a user's ratings with album metadata.

        Ratings whose album cannot be resolved are skipped.
        """
        history = []
        for rating in self.ratings.get_ratings(user_id):
            album = self.albums.get_album(rating.album_id)
            if album is None:
                logger.warning(f"Skipping rating of unknown album {rating.album_id} for {user_id}")
                continue
            history.append(RatedAlbum(rating=rating, album=album))
        return history

    def _signal_from_history(self, user_id: str, history: list[RatedAlbum], now: datetime) -> TasteSignal:
        counters = self.engagement.get_counters(user_id) if self.engagement else None
        signal = self.extractor.extract(user_id, history, engagement=counters, reference_time=now)
        if self.compatibility_cache is not None:
            self.compatibility_cache.invalidate(user_id)
        return signal

    def compute_taste_signal(self, user_id: str) -> TasteSignal:
        return self._signal_from_history(user_id, self.load_history(user_id), self.clock())

    def compute_signature(self, signal: TasteSignal) -> ListeningSignature:
        return self.mapper.map(signal)

    def compute_archetype(self, signal: TasteSignal) -> ArchetypeAssignment:
        return self.classifier.classify(self.mapper.map(signal), signal)

    def compute_consolidation(self, history: list[RatedAlbum]) -> list[ConsolidatedTaste]:
        return self.tracker.track(history, reference_time=self.clock())

    def compute_polarity_score(
        self,
        signal: TasteSignal,
        activations: ListeningSignature | list[NetworkActivation],
        consolidations: list[ConsolidatedTaste],
    ) -> PolarityScore:
        return self.polarity_scorer.score(signal, as_signature(activations), consolidations)

    def compute_compatibility(self, signal_a: TasteSignal, signal_b: TasteSignal) -> CompatibilityResult:
        if self.compatibility_cache is not None:
            cached = self.compatibility_cache.get(signal_a.user_id, signal_b.user_id)
            if cached is not None:
                logger.debug(f"Compatibility cache hit for {signal_a.user_id} <> {signal_b.user_id}")
                return cached

        result = self.matcher.match(signal_a, signal_b)
        if self.compatibility_cache is not None:
            self.compatibility_cache.set(result)
        return result

    def find_similar_tasters(
        self, user_id: str, candidate_ids: list[str], limit: int = SIMILAR_TASTERS_LIMIT
    ) -> list[SimilarTaster]:
        """
        Rank candidate users by compatibility with ``user_id``.

        Every signal involved is recomputed from the rating store.
        """
        signal = self.compute_taste_signal(user_id)
        candidates = [self.compute_taste_signal(c) for c in sorted(set(candidate_ids)) if c != user_id]
        by_id = {c.user_id: c for c in candidates}

        tasters = self.matcher.rank(signal, candidates, limit)
        logger.debug(f"Ranked {len(candidates)} candidates for {user_id}, kept {len(tasters)}")
        return [
            taster.model_copy(update={"archetype": self.compute_archetype(by_id[taster.user_id]).primary})
            for taster in tasters
        ]

    def compute_profile(self, user_id: str) -> TasteProfile:
        """
        Compute the complete TasteID for one user in a single pass.

        Args:
            user_id: The user to profile

        Returns:
            TasteProfile bundling signal, networks, archetype, patterns,
            consolidation, polarity, tier and highlights
        """
        now = self.clock()
        history = self.load_history(user_id)
        signal = self._signal_from_history(user_id, history, now)
        signature = self.mapper.map(signal)
        archetype = self.classifier.classify(signature, signal)
        patterns = self.pattern_detector.detect(signal, signature)
        consolidation = self.tracker.track(history, reference_time=now, signal=signal)
        polarity = self.polarity_scorer.score(signal, signature, consolidation, patterns)

        logger.info(
            f"Computed TasteID for {user_id}: {archetype.primary} "
            f"({signal.review_count} ratings, polarity {polarity.value:.2f})"
        )
        return TasteProfile(
            signal=signal,
            signature=signature,
            archetype=archetype,
            patterns=patterns,
            consolidation=consolidation,
            consolidation_summary=summarize_consolidation(consolidation),
            polarity=polarity,
            tier=tier_progress(signal.review_count),
            top_genres=signal.get_top_genres(TOP_GENRES_LIMIT),
            top_artists=signal.get_top_artists(TOP_ARTISTS_LIMIT),
            top_decades=signal.get_top_decades(TOP_DECADES_LIMIT),
            artist_dna=signal.get_artist_dna(ARTIST_DNA_LIMIT),
            signature_albums=find_signature_albums(history),
            memorable_moments=extract_memorable_moments(history),
            future_selves=detect_future_selves(signal),
            rating_skew=rating_skew(signal.rating_mean) if signal.review_count else "balanced",
            review_depth=review_depth(signal.avg_review_length),
            adventurousness=genre_breadth(signal.genre_counts),
            computed_at=now,
        )
