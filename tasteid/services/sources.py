"""
Collaborator interfaces the engine reads from.

The engine never owns storage: ratings, album metadata and engagement
counters all come from the host application through these interfaces.
In-memory implementations are provided for embedding and tests.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from tasteid.models.rating import AlbumMetadata, EngagementCounters, Rating


class RatingReader(ABC):
    """
    Interface for reading a user's ratings.
    """

    @abstractmethod
    def get_ratings(self, user_id: str) -> list[Rating]:
        """
        Full, consistent snapshot of a user's ratings, in any order.
        """
        pass


class AlbumResolver(ABC):
    @abstractmethod
    def get_album(self, album_id: str) -> AlbumMetadata | None:
        pass

    def get_album_genres(self, album_id: str) -> set[str]:
        album = self.get_album(album_id)
        return set(album.normalized_genres) if album else set()

    def get_release_year(self, album_id: str) -> int | None:
        album = self.get_album(album_id)
        return album.release_year if album else None


class EngagementSource(ABC):
    """
    Interface for social and visual engagement counters.

    Optional: without one, the Social and Aesthetic networks read zero.
    """

    @abstractmethod
    def get_counters(self, user_id: str) -> EngagementCounters | None:
        pass


class InMemoryRatingStore(RatingReader):
    """Dict-backed RatingReader."""

    def __init__(self, ratings: Iterable[Rating] = ()):
        self._ratings: dict[str, dict[str, Rating]] = {}
        for rating in ratings:
            self.add(rating)

    def add(self, rating: Rating) -> None:
        """Store a rating; the one with the latest created_at wins per album."""
        by_album = self._ratings.setdefault(rating.user_id, {})
        current = by_album.get(rating.album_id)
        if current is not None and current.created_at > rating.created_at:
            return
        by_album[rating.album_id] = rating

    def delete(self, user_id: str, album_id: str) -> None:
        self._ratings.get(user_id, {}).pop(album_id, None)

    def get_ratings(self, user_id: str) -> list[Rating]:
        return list(self._ratings.get(user_id, {}).values())

    def user_ids(self) -> list[str]:
        return sorted(uid for uid, by_album in self._ratings.items() if by_album)


class InMemoryAlbumCatalog(AlbumResolver):
    def __init__(self, albums: Iterable[AlbumMetadata] = ()):
        self._albums = {album.album_id: album for album in albums}

    def add(self, album: AlbumMetadata) -> None:
        self._albums[album.album_id] = album

    def get_album(self, album_id: str) -> AlbumMetadata | None:
        return self._albums.get(album_id)


class InMemoryEngagementSource(EngagementSource):
    def __init__(self, counters: dict[str, EngagementCounters] | None = None):
        self._counters = dict(counters or {})

    def set(self, user_id: str, counters: EngagementCounters) -> None:
        self._counters[user_id] = counters

    def get_counters(self, user_id: str) -> EngagementCounters | None:
        return self._counters.get(user_id)
