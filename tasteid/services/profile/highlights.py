"""
Signature albums, memorable moments and musical future selves.

These read the same history and signal as the rest of the engine and never
feed back into scoring.
"""

from typing import Final

from pydantic import BaseModel, ConfigDict

from tasteid.models.highlights import MemorableMoment, MomentKind, MusicalFutureSelf
from tasteid.models.rating import RatedAlbum
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import (
    BRIDGE_BUILDER_MIN_GENRES,
    BRIDGE_BUILDER_SATURATION_GENRES,
    FUTURE_SELF_LIMIT,
    FUTURE_SELF_MIN_SCORE,
    FUTURE_SELF_SCORE_SATURATION,
    MAINSTREAM_RANK_MAX,
    MEMORABLE_MOMENT_LIMIT,
    MEMORABLE_REVIEW_LIMIT,
    MEMORABLE_REVIEW_MIN_CHARS,
    SIGNATURE_ALBUM_LIMIT,
    SIGNATURE_ALBUM_MIN_SCORE,
)
from tasteid.services.profile.evidence import EvidenceCalculator, as_utc


class FuturePath(BaseModel):
    """A genre family a listener can grow into."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    genres: tuple[str, ...]
    next_steps: tuple[str, ...]
    artists: tuple[str, ...]


FUTURE_PATHS: Final[tuple[FuturePath, ...]] = (
    FuturePath(
        id="jazz-connoisseur",
        name="Jazz Connoisseur",
        description="Deep appreciation for improvisation and complexity",
        genres=("jazz", "jazz fusion", "bebop", "modal jazz", "free jazz"),
        next_steps=("Explore bebop classics", "Discover modal jazz", "Try free jazz"),
        artists=("Miles Davis", "John Coltrane", "Thelonious Monk"),
    ),
    FuturePath(
        id="hip-hop-historian",
        name="Hip-Hop Historian",
        description="Master of hip-hop's evolution and subgenres",
        genres=("hip-hop", "rap", "southern hip hop", "east coast hip hop", "west coast hip hop"),
        next_steps=("Trace regional styles", "Explore underground scenes", "Study production evolution"),
        artists=("Kendrick Lamar", "OutKast", "Wu-Tang Clan"),
    ),
    FuturePath(
        id="electronic-explorer",
        name="Electronic Explorer",
        description="Navigator of electronic music's vast landscape",
        genres=("electronic", "house", "techno", "ambient", "drum and bass"),
        next_steps=("Discover classic house", "Explore Detroit techno", "Try ambient"),
        artists=("Aphex Twin", "Boards of Canada", "Daft Punk"),
    ),
)


def _chronological(history: list[RatedAlbum]) -> list[RatedAlbum]:
    return sorted(history, key=lambda e: (as_utc(e.rating.created_at), e.rating.album_id))


def find_signature_albums(history: list[RatedAlbum], limit: int = SIGNATURE_ALBUM_LIMIT) -> list[str]:
    """
    Album ids that define the user: high scores with a written review, chart staples excluded.

    Args:
        history: Full rating history joined with album metadata
        limit: Maximum number of albums

    Returns:
        Album ids ordered by score desc, earliest rating first on ties
    """
    candidates = [
        entry
        for entry in _chronological(history)
        if entry.rating.score >= SIGNATURE_ALBUM_MIN_SCORE
        and EvidenceCalculator.is_written_review(entry.rating)
        and (entry.album.popularity_rank is None or entry.album.popularity_rank > MAINSTREAM_RANK_MAX)
    ]
    candidates.sort(key=lambda e: -e.rating.score)
    return [entry.album.album_id for entry in candidates[:limit]]


def _moment(entry: RatedAlbum, kind: MomentKind, description: str) -> MemorableMoment:
    return MemorableMoment(
        type=kind,
        album_id=entry.album.album_id,
        artist=entry.album.artist,
        rating=entry.rating.score,
        date=entry.rating.created_at,
        description=description,
    )


def extract_memorable_moments(history: list[RatedAlbum]) -> list[MemorableMoment]:
    """First perfect score, first zero, then the longest reviews."""
    entries = _chronological(history)
    moments = []

    first_ten = next((e for e in entries if e.rating.score == 10), None)
    if first_ten:
        moments.append(_moment(first_ten, MomentKind.FIRST_TEN, "First perfect score"))

    first_zero = next((e for e in entries if e.rating.score == 0), None)
    if first_zero:
        moments.append(_moment(first_zero, MomentKind.FIRST_ZERO, "First zero - memorable for a reason"))

    long_reviews = [e for e in entries if len(e.rating.review_text or "") > MEMORABLE_REVIEW_MIN_CHARS]
    long_reviews.sort(key=lambda e: -len(e.rating.review_text))
    for entry in long_reviews[:MEMORABLE_REVIEW_LIMIT]:
        moments.append(_moment(entry, MomentKind.EMOTIONAL_REVIEW, "Deeply felt review"))

    return moments[:MEMORABLE_MOMENT_LIMIT]


def detect_future_selves(signal: TasteSignal) -> list[MusicalFutureSelf]:
    """
    Listening paths the user is already heading down.

    A genre-family path opens once the summed affinity of its genres passes a
    threshold. Very broad listeners also get the Genre Bridge Builder path,
    pointing at their emerging genres (ranks 6-10 with real affinity).
    """
    futures = []
    for path in FUTURE_PATHS:
        score = sum(signal.genre_vector.get(genre, 0.0) for genre in path.genres)
        if score > FUTURE_SELF_MIN_SCORE:
            futures.append(
                MusicalFutureSelf(
                    id=path.id,
                    name=path.name,
                    description=path.description,
                    progress=min(score / FUTURE_SELF_SCORE_SATURATION, 1.0),
                    next_steps=list(path.next_steps),
                    related_genres=list(path.genres),
                    related_artists=list(path.artists),
                )
            )

    distinct = len(signal.genre_vector)
    if distinct > BRIDGE_BUILDER_MIN_GENRES:
        ranked = sorted(signal.genre_vector.items(), key=lambda x: (-x[1], x[0]))
        emerging = [genre for genre, value in ranked[5:10] if value > 0.2]
        futures.append(
            MusicalFutureSelf(
                id="genre-bridge-builder",
                name="Genre Bridge Builder",
                description="Connecting disparate sounds into a unified taste map",
                progress=min(distinct / BRIDGE_BUILDER_SATURATION_GENRES, 1.0),
                next_steps=["Find cross-genre artists", "Create genre playlists", "Map your taste universe"],
                related_genres=emerging,
            )
        )

    return futures[:FUTURE_SELF_LIMIT]
