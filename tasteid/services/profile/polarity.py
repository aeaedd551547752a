import math
import statistics
from typing import Final

from loguru import logger

from tasteid.models.consolidation import ConsolidatedTaste, TasteTrend
from tasteid.models.networks import ListeningSignature
from tasteid.models.polarity import PolarityComponents, PolarityScore
from tasteid.models.signal import TasteSignal
from tasteid.services.profile.constants import (
    ENGAGEMENT_COUNT_SATURATION,
    ENGAGEMENT_LENGTH_SATURATION_WORDS,
    POLARITY_WEIGHT_CONSOLIDATION,
    POLARITY_WEIGHT_ENGAGEMENT,
    POLARITY_WEIGHT_PATTERN_DIVERSITY,
    POLARITY_WEIGHT_SIGNATURE_STRENGTH,
    POLARITY_WEIGHT_UNIQUENESS,
    SIGNATURE_STRENGTH_MAX_STDDEV,
)
from tasteid.services.profile.networks import ensure_unit_interval, signature_uniqueness
from tasteid.services.profile.patterns import PatternDetector

POLARITY_WEIGHTS: Final[dict[str, float]] = {
    "signature_strength": POLARITY_WEIGHT_SIGNATURE_STRENGTH,
    "pattern_diversity": POLARITY_WEIGHT_PATTERN_DIVERSITY,
    "consolidation_score": POLARITY_WEIGHT_CONSOLIDATION,
    "uniqueness_score": POLARITY_WEIGHT_UNIQUENESS,
    "engagement_depth": POLARITY_WEIGHT_ENGAGEMENT,
}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class PolarityScorer:
    """
    Combines five independently computed components into one distinctiveness index.

    Deterministic: no randomness, no clock, no external calls.
    """

    def __init__(self, pattern_detector: PatternDetector | None = None):
        self.pattern_detector = pattern_detector or PatternDetector()

    @staticmethod
    def signature_strength(signature: ListeningSignature) -> float:
        """Peaked vs. flat: population std-dev of the activations against its maximum."""
        return _clamp(statistics.pstdev(signature.values()) / SIGNATURE_STRENGTH_MAX_STDDEV)

    def pattern_diversity(self, patterns: list[str]) -> float:
        """Detected patterns against the most the detector can report."""
        if not self.pattern_detector.max_detected:
            return 0.0
        return _clamp(len(patterns) / self.pattern_detector.max_detected)

    @staticmethod
    def consolidation_score(consolidations: list[ConsolidatedTaste]) -> float:
        """Share of tracked tastes that are holding or growing; 0 when nothing is tracked."""
        if not consolidations:
            return 0.0
        holding = sum(1 for c in consolidations if c.trend in (TasteTrend.STRENGTHENING, TasteTrend.STABLE))
        return holding / len(consolidations)

    @staticmethod
    def uniqueness_score(signature: ListeningSignature) -> float:
        return signature_uniqueness(signature).score

    @staticmethod
    def engagement_depth(signal: TasteSignal) -> float:
        length = 1.0 - math.exp(-signal.avg_review_length / ENGAGEMENT_LENGTH_SATURATION_WORDS)
        volume = 1.0 - math.exp(-signal.review_count / ENGAGEMENT_COUNT_SATURATION)
        return _clamp(0.5 * length + 0.5 * volume)

    def score(
        self,
        signal: TasteSignal,
        signature: ListeningSignature,
        consolidations: list[ConsolidatedTaste],
        patterns: list[str] | None = None,
    ) -> PolarityScore:
        """
        Compute the Polarity Score.

        Args:
            signal: The user's TasteSignal
            signature: Activations mapped from the signal
            consolidations: Output of the consolidation tracker
            patterns: Detected pattern names; detected from the signal when omitted

        Returns:
            PolarityScore whose value is exactly the weighted sum of its components
        """
        if patterns is None:
            patterns = self.pattern_detector.detect(signal, signature)

        components = {
            "signature_strength": self.signature_strength(signature),
            "pattern_diversity": self.pattern_diversity(patterns),
            "consolidation_score": self.consolidation_score(consolidations),
            "uniqueness_score": self.uniqueness_score(signature),
            "engagement_depth": self.engagement_depth(signal),
        }
        for name, value in components.items():
            ensure_unit_interval(f"polarity.{name}", value)

        value = sum(components[name] * weight for name, weight in POLARITY_WEIGHTS.items())
        logger.debug(f"Polarity for {signal.user_id}: {value:.3f}")
        return PolarityScore(
            value=ensure_unit_interval("polarity.value", min(value, 1.0)),
            components=PolarityComponents(**components),
        )
