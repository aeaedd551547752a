from collections import defaultdict
from datetime import datetime, timedelta, timezone

from loguru import logger

from tasteid.models.consolidation import ConsolidatedTaste, ConsolidationSummary, TasteKind, TasteTrend
from tasteid.models.rating import RatedAlbum
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import (
    CONSOLIDATION_ARTIST_MIN_TOTAL,
    CONSOLIDATION_CORE_LIMIT,
    CONSOLIDATION_DEFAULT_ARTIST_STRENGTH,
    CONSOLIDATION_GENRE_MIN_PER_WINDOW,
    CONSOLIDATION_RECENT_WINDOW_DAYS,
    CONSOLIDATION_TREND_DELTA,
)
from tasteid.services.profile.evidence import as_utc
from tasteid.services.profile.extractor import SignalExtractor


def classify_trend(recent_avg: float, older_avg: float) -> TasteTrend:
    delta = recent_avg - older_avg
    if delta >= CONSOLIDATION_TREND_DELTA:
        return TasteTrend.STRENGTHENING
    if delta <= -CONSOLIDATION_TREND_DELTA:
        return TasteTrend.FADING
    return TasteTrend.STABLE


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


def _entry(
    name: str, kind: TasteKind, recent: list[float], older: list[float], strength: float
) -> ConsolidatedTaste:
    recent_avg, older_avg = _mean(recent), _mean(older)
    return ConsolidatedTaste(
        name=name,
        type=kind,
        trend=classify_trend(recent_avg, older_avg),
        recent_avg=recent_avg,
        older_avg=older_avg,
        total_reviews=len(recent) + len(older),
        consistency=max(0.0, 1.0 - abs(recent_avg - older_avg) / 10.0),
        strength=strength,
    )


class ConsolidationTracker:
    """
    Detects which genres and artists are strengthening, fading or holding steady.

    Entities below the sample thresholds are left out entirely rather than
    reported with a trend drawn from too little data.
    """

    def track(
        self,
        history: list[RatedAlbum],
        reference_time: datetime | None = None,
        signal: TasteSignal | None = None,
    ) -> list[ConsolidatedTaste]:
        """
        Split the history into recent/older windows and compare averages.

        Args:
            history: Full rating history joined with album metadata
            reference_time: End of the recent window; defaults to the current UTC time
            signal: The user's TasteSignal for strengths; extracted from history when omitted

        Returns:
            Genres then artists, each ordered by total reviews desc, then name
        """
        now = as_utc(reference_time or datetime.now(timezone.utc))
        cutoff = now - timedelta(days=CONSOLIDATION_RECENT_WINDOW_DAYS)
        if signal is None:
            signal = SignalExtractor().extract("", history, reference_time=now)

        recent_genres: dict[str, list[float]] = defaultdict(list)
        older_genres: dict[str, list[float]] = defaultdict(list)
        recent_artists: dict[str, list[float]] = defaultdict(list)
        older_artists: dict[str, list[float]] = defaultdict(list)

        for entry in sorted(history, key=lambda e: (as_utc(e.rating.created_at), e.rating.album_id)):
            is_recent = as_utc(entry.rating.created_at) > cutoff
            genres = recent_genres if is_recent else older_genres
            artists = recent_artists if is_recent else older_artists
            for genre in entry.album.normalized_genres:
                genres[genre].append(entry.rating.score)
            artists[entry.album.artist].append(entry.rating.score)

        genre_entries = [
            _entry(
                genre,
                TasteKind.GENRE,
                recent_genres[genre],
                older_genres[genre],
                signal.genre_vector.get(genre, 0.0),
            )
            for genre in sorted(set(recent_genres) & set(older_genres))
            if len(recent_genres[genre]) >= CONSOLIDATION_GENRE_MIN_PER_WINDOW
            and len(older_genres[genre]) >= CONSOLIDATION_GENRE_MIN_PER_WINDOW
        ]
        # Both averages are needed, so an artist must also appear in each window
        artist_entries = [
            _entry(
                artist,
                TasteKind.ARTIST,
                recent_artists[artist],
                older_artists[artist],
                signal.artist_vector.get(artist, CONSOLIDATION_DEFAULT_ARTIST_STRENGTH),
            )
            for artist in sorted(set(recent_artists) & set(older_artists))
            if len(recent_artists[artist]) + len(older_artists[artist]) >= CONSOLIDATION_ARTIST_MIN_TOTAL
        ]

        genre_entries.sort(key=lambda c: (-c.total_reviews, c.name))
        artist_entries.sort(key=lambda c: (-c.total_reviews, c.name))

        logger.debug(
            f"Consolidation: {len(genre_entries)} genres, {len(artist_entries)} artists "
            f"from {len(history)} ratings (cutoff {cutoff.date()})"
        )
        return genre_entries + artist_entries


def summarize_consolidation(consolidated: list[ConsolidatedTaste]) -> ConsolidationSummary:
    """
    Human-readable headline for a consolidation report.

    Core genres and artists are the strongest entries of each kind.
    """
    by_strength = sorted(consolidated, key=lambda c: (-c.strength, -c.total_reviews, c.name))
    genres = [c.name for c in by_strength if c.type == TasteKind.GENRE]
    artists = [c.name for c in by_strength if c.type == TasteKind.ARTIST]
    strengthening = sum(1 for c in consolidated if c.trend == TasteTrend.STRENGTHENING)
    fading = sum(1 for c in consolidated if c.trend == TasteTrend.FADING)

    if len(genres) >= 3 and len(artists) >= 2:
        headline = "Strong taste foundation."
        details = (
            f"Your love for {' and '.join(genres[:2])} is well-established, "
            f"along with consistent appreciation for {' and '.join(artists[:2])}."
        )
    elif len(genres) >= 2:
        headline = "Core genres emerging."
        details = f"{genres[0]} and {genres[1]} are becoming your musical home."
    elif strengthening > fading:
        headline = "Taste is crystallizing."
        details = "Your preferences are becoming clearer and more defined."
    elif fading > strengthening:
        headline = "Taste in flux."
        details = "You're in an exploration phase: old favorites are making room for new discoveries."
    else:
        headline = "Your taste is evolving."
        details = ""

    return ConsolidationSummary(
        headline=headline,
        details=details,
        core_genres=genres[:CONSOLIDATION_CORE_LIMIT],
        core_artists=artists[:CONSOLIDATION_CORE_LIMIT],
    )
