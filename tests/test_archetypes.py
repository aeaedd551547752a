import pytest

from tasteid.api import compute_archetype
from tasteid.models.archetype import UNCLASSIFIED
from tasteid.models.networks import MusicNetwork
from tasteid.services.profile.archetypes import (
    ARCHETYPES,
    ARCHETYPES_BY_ID,
    ArchetypeClassifier,
    compute_traits,
    get_archetype,
)
from tasteid.services.profile.extractor import SignalExtractor
from tasteid.services.profile.networks import NetworkMapper
from tests.conftest import REFERENCE_TIME, make_entry


@pytest.fixture
def classifier():
    return ArchetypeClassifier(min_reviews=20)


def _classify(classifier, signal):
    return classifier.classify(NetworkMapper().map(signal), signal)


class TestRegistry:
    def test_registry_rows_are_well_formed(self):
        assert 20 <= len(ARCHETYPES) <= 30
        assert len(ARCHETYPES_BY_ID) == len(ARCHETYPES)
        for archetype in ARCHETYPES:
            assert set(archetype.profile) == set(MusicNetwork)
            assert all(0.0 <= v <= 1.0 for v in archetype.profile.values())
            # Exactly one affinity source per row
            assert bool(archetype.genres) != bool(archetype.trait)

    def test_every_trait_is_computed(self, hip_hop_signal):
        traits = compute_traits(hip_hop_signal, NetworkMapper().map(hip_hop_signal))
        for archetype in ARCHETYPES:
            if archetype.trait:
                assert archetype.trait in traits
        assert all(0.0 <= v <= 1.0 for v in traits.values())

    def test_lookup(self):
        assert get_archetype("jazz-explorer").name == "Jazz Explorer"
        assert get_archetype("missing") is None


class TestClassification:
    def test_hip_hop_listener(self, classifier, hip_hop_signal):
        assignment = _classify(classifier, hip_hop_signal)

        assert assignment.primary == "hip-hop-head"
        assert get_archetype(assignment.primary).name == "Hip-Hop Head"
        assert assignment.primary_confidence > 0.7
        assert assignment.is_classified

    def test_scores_cover_registry_and_stay_bounded(self, classifier, hip_hop_signal):
        assignment = _classify(classifier, hip_hop_signal)
        assert set(assignment.scores) == set(ARCHETYPES_BY_ID)
        assert all(0.0 <= s <= 1.0 for s in assignment.scores.values())
        assert assignment.primary_confidence == max(assignment.scores.values())

    def test_too_few_ratings_stays_unclassified(self, classifier):
        history = [make_entry(9, genres=("hip-hop",)), make_entry(8, genres=("hip-hop",))]
        signal = SignalExtractor().extract("new-user", history, reference_time=REFERENCE_TIME)

        assignment = _classify(classifier, signal)
        assert assignment.primary == UNCLASSIFIED
        assert assignment.primary_confidence == 0.0
        assert assignment.secondary is None
        assert not assignment.is_classified

    def test_threshold_is_configurable(self, hip_hop_signal):
        strict = ArchetypeClassifier(min_reviews=100)
        assert _classify(strict, hip_hop_signal).primary == UNCLASSIFIED

    def test_close_runner_up_becomes_secondary(self, classifier, hip_hop_signal):
        signal = hip_hop_signal.model_copy(update={"genre_vector": {"hip-hop": 1.0, "jazz": 1.0}})
        assignment = _classify(classifier, signal)

        assert {assignment.primary, assignment.secondary} == {"hip-hop-head", "jazz-explorer"}
        gap = assignment.scores[assignment.primary] - assignment.scores[assignment.secondary]
        assert 0.0 <= gap <= 0.15

    def test_distant_runner_up_is_not_secondary(self, classifier, hip_hop_signal):
        signal = hip_hop_signal.model_copy(update={"genre_vector": {"hip-hop": 1.0}})
        assignment = _classify(classifier, signal)

        assert assignment.primary == "hip-hop-head"
        assert assignment.secondary is None

    def test_deterministic(self, classifier, hip_hop_signal):
        assert _classify(classifier, hip_hop_signal) == _classify(classifier, hip_hop_signal)

    def test_functional_entry_point(self, hip_hop_signal):
        assignment = compute_archetype(hip_hop_signal, min_reviews=20)
        assert assignment.primary == "hip-hop-head"
