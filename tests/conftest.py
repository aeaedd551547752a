from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from tasteid.models.rating import AlbumMetadata, RatedAlbum, Rating
from tasteid.models.signal import TasteSignal

REFERENCE_TIME = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

_album_ids = count(1)


def days_ago(days: float) -> datetime:
    return REFERENCE_TIME - timedelta(days=days)


def make_album(
    artist: str = "Artist",
    genres: tuple[str, ...] = ("rock",),
    release_year: int = 2010,
    album_id: str | None = None,
    **kwargs,
) -> AlbumMetadata:
    return AlbumMetadata(
        album_id=album_id or f"album-{next(_album_ids)}",
        artist=artist,
        genres=list(genres),
        release_year=release_year,
        **kwargs,
    )


def make_entry(
    score: float,
    created_days_ago: float = 30,
    user_id: str = "user-1",
    review_text: str | None = None,
    **album_kwargs,
) -> RatedAlbum:
    album = make_album(**album_kwargs)
    rating = Rating(
        user_id=user_id,
        album_id=album.album_id,
        score=score,
        created_at=days_ago(created_days_ago),
        review_text=review_text,
    )
    return RatedAlbum(rating=rating, album=album)


@pytest.fixture
def reference_time() -> datetime:
    return REFERENCE_TIME


@pytest.fixture
def mixed_history() -> list[RatedAlbum]:
    """Thirty ratings across four genres, three decades and ten artists."""
    genres = [("hip-hop", "rap"), ("jazz",), ("rock", "indie rock"), ("electronic",)]
    entries = []
    for i in range(30):
        entries.append(
            make_entry(
                score=float(4 + (i * 3) % 7),
                created_days_ago=5 + i * 20,
                artist=f"Artist {i % 10}",
                genres=genres[i % 4],
                release_year=1995 + (i % 3) * 10,
                review_text="Loved this record, amazing production!!" if i % 3 == 0 else None,
                popularity_rank=50 if i % 5 == 0 else 8000,
                community_average=7.0,
            )
        )
    return entries


@pytest.fixture
def hip_hop_signal() -> TasteSignal:
    """Fifty-rating listener dominated by hip-hop with some jazz."""
    return TasteSignal(
        user_id="hip-hop-fan",
        genre_vector={"hip-hop": 0.9, "jazz": 0.3},
        artist_frequency={f"Artist {i}": 2 for i in range(25)},
        decade_vector={"1990s": 0.4, "2000s": 0.6, "2010s": 1.0},
        rating_mean=7.2,
        rating_std_dev=1.4,
        review_count=50,
        avg_review_length=30.0,
        genre_counts={"hip-hop": 40, "jazz": 15},
        decade_counts={"1990s": 10, "2000s": 15, "2010s": 25},
        artist_mean_rating={f"Artist {i}": 7.2 for i in range(25)},
        rating_histogram={5: 5, 6: 10, 7: 15, 8: 15, 9: 5},
        recent_release_ratio=0.2,
        written_review_ratio=0.3,
        sentiment_variance=0.1,
        avg_album_age=12.0,
    )
