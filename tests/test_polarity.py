import pytest

from tasteid.api import compute_polarity_score
from tasteid.models.consolidation import ConsolidatedTaste, TasteKind, TasteTrend
from tasteid.models.networks import ListeningSignature, MusicNetwork
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.extractor import SignalExtractor
from tasteid.services.profile.networks import NetworkMapper
from tasteid.services.profile.patterns import PATTERNS, PatternDetector
from tasteid.services.profile.polarity import POLARITY_WEIGHTS, PolarityScorer
from tests.conftest import REFERENCE_TIME


def _taste(name: str, trend: TasteTrend) -> ConsolidatedTaste:
    return ConsolidatedTaste(
        name=name,
        type=TasteKind.GENRE,
        trend=trend,
        recent_avg=7.0,
        older_avg=7.0,
        total_reviews=4,
        consistency=1.0,
    )


@pytest.fixture
def scorer():
    return PolarityScorer()


def test_weights_sum_to_one():
    assert sum(POLARITY_WEIGHTS.values()) == pytest.approx(1.0)
    assert POLARITY_WEIGHTS == {
        "signature_strength": 0.25,
        "pattern_diversity": 0.20,
        "consolidation_score": 0.20,
        "uniqueness_score": 0.20,
        "engagement_depth": 0.15,
    }


def test_value_is_exact_weighted_sum(scorer, hip_hop_signal, mixed_history):
    mixed = SignalExtractor().extract("user-1", mixed_history, reference_time=REFERENCE_TIME)
    consolidations = [_taste("jazz", TasteTrend.FADING), _taste("rock", TasteTrend.STABLE)]

    for signal in (hip_hop_signal, mixed):
        result = scorer.score(signal, NetworkMapper().map(signal), consolidations)
        components = result.components.model_dump()
        expected = sum(components[name] * weight for name, weight in POLARITY_WEIGHTS.items())
        assert result.value == pytest.approx(expected, abs=1e-9)
        assert 0.0 <= result.value <= 1.0
        assert all(0.0 <= v <= 1.0 for v in components.values())


def test_degenerate_inputs_stay_in_bounds(scorer):
    signal = TasteSignal(user_id="nobody")
    flat = ListeningSignature(activations={network: 0.0 for network in MusicNetwork})
    result = scorer.score(signal, flat, [])

    assert 0.0 <= result.value <= 1.0
    assert result.components.signature_strength == 0.0
    assert result.components.pattern_diversity == 0.0
    assert result.components.consolidation_score == 0.0
    assert result.components.engagement_depth == 0.0


def test_pattern_diversity_reaches_one_at_the_detection_cap(scorer):
    assert scorer.pattern_detector.max_detected == 8
    assert scorer.pattern_diversity([rule.name for rule in PATTERNS[:8]]) == 1.0
    assert scorer.pattern_diversity([rule.name for rule in PATTERNS[:4]]) == pytest.approx(0.5)
    assert scorer.pattern_diversity([]) == 0.0


def test_pattern_diversity_with_uncapped_detector():
    scorer = PolarityScorer(PatternDetector(limit=len(PATTERNS)))
    assert scorer.pattern_diversity([rule.name for rule in PATTERNS]) == 1.0
    assert scorer.pattern_diversity([rule.name for rule in PATTERNS[:9]]) == pytest.approx(0.5)


def test_consolidation_score_counts_holding_tastes():
    tastes = [
        _taste("a", TasteTrend.STRENGTHENING),
        _taste("b", TasteTrend.STABLE),
        _taste("c", TasteTrend.FADING),
        _taste("d", TasteTrend.FADING),
    ]
    assert PolarityScorer.consolidation_score(tastes) == pytest.approx(0.5)
    assert PolarityScorer.consolidation_score([]) == 0.0


def test_peaked_signature_is_stronger_than_flat():
    flat = ListeningSignature(activations={network: 0.4 for network in MusicNetwork})
    peaked_values = {network: 0.0 for network in MusicNetwork}
    peaked_values[MusicNetwork.DEEP_DIVE] = 1.0
    peaked = ListeningSignature(activations=peaked_values)

    assert PolarityScorer.signature_strength(flat) == pytest.approx(0.0)
    assert PolarityScorer.signature_strength(peaked) > 0.5


def test_engagement_depth_grows_with_volume_and_length():
    light = TasteSignal(user_id="a", review_count=5, avg_review_length=2)
    heavy = TasteSignal(user_id="b", review_count=300, avg_review_length=120)
    assert PolarityScorer.engagement_depth(heavy) > PolarityScorer.engagement_depth(light)


def test_deterministic(scorer, hip_hop_signal):
    signature = NetworkMapper().map(hip_hop_signal)
    consolidations = [_taste("hip-hop", TasteTrend.STRENGTHENING)]
    assert scorer.score(hip_hop_signal, signature, consolidations) == scorer.score(
        hip_hop_signal, signature, consolidations
    )


def test_functional_entry_point_accepts_activation_list(hip_hop_signal):
    signature = NetworkMapper().map(hip_hop_signal)
    from_list = compute_polarity_score(hip_hop_signal, signature.as_list(), [])
    from_signature = compute_polarity_score(hip_hop_signal, signature, [])
    assert from_list == from_signature
