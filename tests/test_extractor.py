import math

import pytest

from tasteid.models.rating import EngagementCounters
from tasteid.services.profile import sentiment
from tasteid.services.profile.evidence import EvidenceCalculator
from tasteid.services.profile.extractor import SignalExtractor, normalize_to_max
from tests.conftest import REFERENCE_TIME, days_ago, make_entry

LONG_REVIEW = "A sprawling record that rewards patience with every single listen it gets."


@pytest.fixture
def extractor():
    return SignalExtractor()


class TestEvidenceWeight:
    def test_higher_scores_carry_more_evidence(self):
        low = make_entry(4, created_days_ago=0).rating
        high = make_entry(9, created_days_ago=0).rating
        assert EvidenceCalculator.calculate_evidence_weight(high, REFERENCE_TIME) > (
            EvidenceCalculator.calculate_evidence_weight(low, REFERENCE_TIME)
        )

    def test_recency_decays_to_floor(self):
        assert EvidenceCalculator.calculate_recency_multiplier(days_ago(0), REFERENCE_TIME) == 1.0
        assert EvidenceCalculator.calculate_recency_multiplier(days_ago(180), REFERENCE_TIME) == pytest.approx(
            math.exp(-1)
        )
        assert EvidenceCalculator.calculate_recency_multiplier(days_ago(5000), REFERENCE_TIME) == 0.1

    def test_future_ratings_count_as_recent(self):
        assert EvidenceCalculator.calculate_recency_multiplier(days_ago(-3), REFERENCE_TIME) == 1.0

    def test_written_review_bonus(self):
        plain = make_entry(8, created_days_ago=0).rating
        written = make_entry(8, created_days_ago=0, review_text=LONG_REVIEW).rating
        assert EvidenceCalculator.calculate_evidence_weight(written, REFERENCE_TIME) == pytest.approx(
            EvidenceCalculator.calculate_evidence_weight(plain, REFERENCE_TIME) * 1.3
        )


class TestNormalizeToMax:
    def test_scales_against_user_maximum(self):
        assert normalize_to_max({"a": 2.0, "b": 1.0}) == {"a": 1.0, "b": 0.5}

    def test_all_zero_stays_zero(self):
        assert normalize_to_max({"a": 0.0}) == {"a": 0.0}

    def test_empty(self):
        assert normalize_to_max({}) == {}


class TestSignalExtractor:
    def test_empty_history_gives_zero_signal(self, extractor):
        signal = extractor.extract("nobody", [], reference_time=REFERENCE_TIME)

        assert signal.review_count == 0
        assert signal.genre_vector == {}
        assert signal.decade_vector == {}
        assert signal.artist_frequency == {}
        assert signal.rating_mean == 0.0
        assert signal.rating_std_dev == 0.0

    def test_vectors_are_normalized_per_user(self, extractor, mixed_history):
        signal = extractor.extract("user-1", mixed_history, reference_time=REFERENCE_TIME)

        for vector in (signal.genre_vector, signal.decade_vector):
            assert vector
            assert max(vector.values()) == pytest.approx(1.0)
            assert all(0.0 <= value <= 1.0 for value in vector.values())

    def test_better_rated_genre_has_higher_affinity(self, extractor):
        history = [
            make_entry(9, created_days_ago=10, genres=("jazz",)),
            make_entry(3, created_days_ago=10, genres=("rock",)),
        ]
        signal = extractor.extract("user-1", history, reference_time=REFERENCE_TIME)

        assert signal.genre_vector["jazz"] == 1.0
        assert signal.genre_vector["rock"] == pytest.approx(3 / 9)

    def test_rating_statistics(self, extractor):
        history = [
            make_entry(6, created_days_ago=3, artist="A", review_text="fine"),
            make_entry(8, created_days_ago=2, artist="A", review_text="really quite good"),
            make_entry(10, created_days_ago=1, artist="B"),
        ]
        signal = extractor.extract("user-1", history, reference_time=REFERENCE_TIME)

        assert signal.review_count == 3
        assert signal.rating_mean == pytest.approx(8.0)
        assert signal.rating_std_dev == pytest.approx(2.0)  # sample std-dev
        assert signal.avg_review_length == pytest.approx(4 / 3)
        assert signal.artist_frequency == {"A": 2, "B": 1}
        assert signal.artist_mean_rating == {"A": 7.0, "B": 10.0}
        assert signal.rating_histogram == {6: 1, 8: 1, 10: 1}

    def test_artist_affinity_weighs_rating_over_count(self, extractor):
        history = [make_entry(1, created_days_ago=10, artist="Hated") for _ in range(3)]
        history += [make_entry(10, created_days_ago=10, artist="Loved") for _ in range(2)]
        signal = extractor.extract("user-1", history, reference_time=REFERENCE_TIME)

        assert signal.artist_frequency == {"Hated": 3, "Loved": 2}
        assert signal.artist_vector == {"Hated": pytest.approx(0.15), "Loved": 1.0}
        assert signal.get_top_artists(1) == ["Loved"]

        dna = signal.get_artist_dna()
        assert [(a.artist, a.avg_rating, a.review_count) for a in dna] == [("Loved", 10.0, 2), ("Hated", 1.0, 3)]

    def test_single_rating_has_zero_spread(self, extractor):
        signal = extractor.extract("user-1", [make_entry(7)], reference_time=REFERENCE_TIME)
        assert signal.rating_std_dev == 0.0

    def test_decade_keys(self, extractor):
        history = [make_entry(7, release_year=1994), make_entry(7, release_year=2021)]
        signal = extractor.extract("user-1", history, reference_time=REFERENCE_TIME)

        assert set(signal.decade_vector) == {"1990s", "2020s"}
        assert signal.decade_counts == {"1990s": 1, "2020s": 1}

    def test_history_order_does_not_matter(self, extractor, mixed_history):
        forward = extractor.extract("user-1", mixed_history, reference_time=REFERENCE_TIME)
        backward = extractor.extract("user-1", list(reversed(mixed_history)), reference_time=REFERENCE_TIME)
        assert forward == backward

    def test_deterministic(self, extractor, mixed_history):
        first = extractor.extract("user-1", mixed_history, reference_time=REFERENCE_TIME)
        second = extractor.extract("user-1", mixed_history, reference_time=REFERENCE_TIME)
        assert first.model_dump() == second.model_dump()

    def test_behavioural_ratios(self, extractor):
        history = [
            make_entry(9, release_year=2026, popularity_rank=10, community_average=8.5),
            make_entry(2, release_year=1980, popularity_rank=9000, community_average=8.0),
            make_entry(7, release_year=2001, community_average=7.5, review_text=LONG_REVIEW),
            make_entry(5, release_year=2025),
        ]
        signal = extractor.extract("user-1", history, reference_time=REFERENCE_TIME)

        assert signal.recent_release_ratio == pytest.approx(0.5)
        assert signal.mainstream_ratio == pytest.approx(0.25)
        assert signal.obscure_ratio == pytest.approx(0.25)
        assert signal.contrarian_ratio == pytest.approx(0.25)
        assert signal.consensus_ratio == pytest.approx(0.5)
        assert signal.written_review_ratio == pytest.approx(0.25)
        assert signal.avg_album_age == pytest.approx((0 + 46 + 25 + 1) / 4)

    def test_engagement_is_carried_through(self, extractor):
        counters = EngagementCounters(comments=4, artwork_saves=2)
        signal = extractor.extract("user-1", [make_entry(7)], engagement=counters, reference_time=REFERENCE_TIME)
        assert signal.engagement == counters


class TestSentiment:
    def test_polarity(self):
        assert sentiment.polarity("An amazing, beautiful record") == 1.0
        assert sentiment.polarity("boring and overrated") == -1.0
        assert sentiment.polarity("it exists") == 0.0
        assert sentiment.polarity(None) == 0.0

    def test_emotional_review_needs_length_and_intensity(self):
        short = "I love it!!"
        long_flat = "The album runs forty minutes across ten tracks and was recorded in two sessions in a studio. " * 2
        long_intense = long_flat + "I love it!!"
        assert not sentiment.is_emotional(short, 100)
        assert not sentiment.is_emotional(long_flat, 100)
        assert sentiment.is_emotional(long_intense, 100)
