import pytest

from tasteid.api import compute_compatibility
from tasteid.models.compatibility import MatchType
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.compatibility import CompatibilityMatcher, match_type_for, rating_alignment
from tasteid.services.profile.extractor import SignalExtractor
from tasteid.services.profile.similarity import cosine_similarity, jaccard_similarity
from tests.conftest import REFERENCE_TIME, make_entry


@pytest.fixture
def matcher():
    return CompatibilityMatcher(top_artists=20)


@pytest.fixture
def mixed_signal(mixed_history):
    return SignalExtractor().extract("user-1", mixed_history, reference_time=REFERENCE_TIME)


class TestSimilarity:
    def test_cosine(self):
        assert cosine_similarity({"a": 1.0}, {"a": 0.5}) == pytest.approx(1.0)
        assert cosine_similarity({"a": 1.0}, {"b": 1.0}) == 0.0
        assert cosine_similarity({}, {"a": 1.0}) == 0.0

    def test_cosine_is_bit_symmetric(self):
        a = {"rock": 0.31, "jazz": 0.77, "pop": 0.05}
        b = {"jazz": 0.12, "metal": 0.9, "rock": 0.44}
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_jaccard(self):
        assert jaccard_similarity({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard_similarity(set(), {"a"}) == 0.0


class TestRatingAlignment:
    def test_identical_behaviour_aligns_fully(self):
        a = TasteSignal(user_id="a", rating_mean=7.0, rating_std_dev=1.5)
        b = TasteSignal(user_id="b", rating_mean=7.0, rating_std_dev=1.5)
        assert rating_alignment(a, b) == 1.0

    def test_mean_gap_lowers_alignment(self):
        a = TasteSignal(user_id="a", rating_mean=7.0)
        b = TasteSignal(user_id="b", rating_mean=2.0)
        assert rating_alignment(a, b) == pytest.approx(0.3)

    def test_never_negative(self):
        a = TasteSignal(user_id="a", rating_mean=10.0, rating_std_dev=0.0)
        b = TasteSignal(user_id="b", rating_mean=0.0, rating_std_dev=5.0)
        assert rating_alignment(a, b) == 0.0


@pytest.mark.parametrize(
    "score, expected",
    [
        (100, MatchType.TASTE_TWIN),
        (80, MatchType.TASTE_TWIN),
        (79, MatchType.STRONG_MATCH),
        (60, MatchType.STRONG_MATCH),
        (59, MatchType.COMPATIBLE),
        (40, MatchType.COMPATIBLE),
        (39, MatchType.LOW_MATCH),
        (0, MatchType.LOW_MATCH),
    ],
)
def test_match_type_buckets(score, expected):
    assert match_type_for(score) == expected


class TestCompatibilityMatcher:
    def test_identical_genres_and_means_score_at_least_95(self, matcher):
        a = TasteSignal(user_id="alice", genre_vector={"rock": 1.0, "jazz": 0.4}, rating_mean=7.1)
        b = TasteSignal(user_id="bob", genre_vector={"rock": 1.0, "jazz": 0.4}, rating_mean=7.1)

        result = matcher.match(a, b)
        assert result.overall_score >= 95
        assert result.match_type == MatchType.TASTE_TWIN

    def test_same_taste_under_different_ids_is_a_perfect_match(self, matcher, mixed_signal):
        twin = mixed_signal.model_copy(update={"user_id": "user-2"})
        result = matcher.match(mixed_signal, twin)

        assert result.overall_score == 100
        assert result.breakdown.genre_overlap == 100
        assert result.breakdown.artist_overlap == 100
        assert result.breakdown.rating_alignment == 100

    def test_symmetric(self, matcher, hip_hop_signal, mixed_signal):
        assert matcher.match(hip_hop_signal, mixed_signal) == matcher.match(mixed_signal, hip_hop_signal)

    def test_users_are_reported_in_sorted_order(self, matcher, hip_hop_signal, mixed_signal):
        result = matcher.match(mixed_signal, hip_hop_signal)
        assert (result.user_a, result.user_b) == ("hip-hop-fan", "user-1")

    def test_bounds(self, matcher, hip_hop_signal, mixed_signal):
        result = matcher.match(hip_hop_signal, mixed_signal)
        assert 0 <= result.overall_score <= 100
        for value in result.breakdown.model_dump().values():
            assert 0 <= value <= 100

    def test_disjoint_users_match_poorly(self, matcher):
        a = TasteSignal(
            user_id="a", genre_vector={"metal": 1.0}, artist_frequency={"Slayer": 5}, rating_mean=3.0
        )
        b = TasteSignal(
            user_id="b", genre_vector={"pop": 1.0}, artist_frequency={"ABBA": 5}, rating_mean=9.0, rating_std_dev=2.0
        )
        result = matcher.match(a, b)

        assert result.breakdown.genre_overlap == 0
        assert result.breakdown.artist_overlap == 0
        assert result.match_type == MatchType.LOW_MATCH
        assert result.shared_genres == []
        assert result.shared_artists == []

    def test_shared_lists(self, matcher):
        a = TasteSignal(
            user_id="a",
            genre_vector={"rock": 1.0, "jazz": 0.5},
            artist_frequency={"Can": 3, "Neu!": 2},
            rating_mean=7.0,
        )
        b = TasteSignal(
            user_id="b",
            genre_vector={"jazz": 1.0, "soul": 0.8},
            artist_frequency={"Neu!": 4, "Sade": 1},
            rating_mean=7.0,
        )
        result = matcher.match(a, b)
        assert result.shared_genres == ["jazz"]
        assert result.shared_artists == ["Neu!"]
        assert result.breakdown.artist_overlap == 33

    def test_functional_entry_point(self, hip_hop_signal, mixed_signal):
        assert compute_compatibility(hip_hop_signal, mixed_signal) == compute_compatibility(
            mixed_signal, hip_hop_signal
        )

    def test_matching_genres_and_rating_style_outweigh_disjoint_artists(self, matcher):
        extractor = SignalExtractor()
        histories = {
            user: [
                make_entry(7, created_days_ago=10 + i, user_id=user, artist=f"{prefix}{i}", genres=("rock",))
                for i in range(10)
            ]
            for user, prefix in (("alice", "A"), ("bob", "B"))
        }
        alice = extractor.extract("alice", histories["alice"], reference_time=REFERENCE_TIME)
        bob = extractor.extract("bob", histories["bob"], reference_time=REFERENCE_TIME)

        result = matcher.match(alice, bob)
        assert result.breakdown.artist_overlap == 0
        assert result.overall_score >= 95
        assert result.match_type == MatchType.TASTE_TWIN

    def test_artist_overlap_ranks_by_affinity_not_count(self):
        extractor = SignalExtractor()
        alice = extractor.extract(
            "alice",
            [make_entry(1, user_id="alice", artist="Hated") for _ in range(3)]
            + [make_entry(10, user_id="alice", artist="Loved") for _ in range(2)],
            reference_time=REFERENCE_TIME,
        )
        bob = extractor.extract(
            "bob", [make_entry(10, user_id="bob", artist="Loved")], reference_time=REFERENCE_TIME
        )

        result = CompatibilityMatcher(top_artists=1).match(alice, bob)
        assert result.shared_artists == ["Loved"]
        assert result.breakdown.artist_overlap == 100
