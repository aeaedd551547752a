import math
from datetime import datetime, timezone

from tasteid.models.rating import Rating
from tasteid.services.profile.constants import (
    RECENCY_DECAY_DAYS,
    RECENCY_MIN_MULTIPLIER,
    WRITTEN_REVIEW_BONUS,
    WRITTEN_REVIEW_MIN_CHARS,
)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class EvidenceCalculator:
    """
    Calculates how much "signal" a single rating carries.

    Pure function: no side effects, easy to test.
    """

    @staticmethod
    def rating_factor(rating: Rating) -> float:
        """A 9/10 contributes more than a 4/10."""
        return rating.score / 10.0

    @staticmethod
    def calculate_recency_multiplier(created_at: datetime, reference_time: datetime) -> float:
        """
        Calculate recency multiplier using exponential decay.

        Args:
            created_at: When the rating was made
            reference_time: The "now" the signal is computed for

        Returns:
            Multiplier (1.0 for recent, down to RECENCY_MIN_MULTIPLIER for old)
        """
        days_ago = (as_utc(reference_time) - as_utc(created_at)).total_seconds() / 86400
        if days_ago <= 0:
            return 1.0  # Future date = treat as recent

        multiplier = math.exp(-days_ago / RECENCY_DECAY_DAYS)
        return max(RECENCY_MIN_MULTIPLIER, multiplier)

    @staticmethod
    def is_written_review(rating: Rating) -> bool:
        return bool(rating.review_text) and len(rating.review_text) > WRITTEN_REVIEW_MIN_CHARS

    @staticmethod
    def calculate_evidence_weight(rating: Rating, reference_time: datetime) -> float:
        """
        Combine rating factor, recency and the written-review bonus.

        Args:
            rating: The rating to weigh
            reference_time: The "now" the signal is computed for

        Returns:
            Final evidence weight (>= 0)
        """
        text_bonus = WRITTEN_REVIEW_BONUS if EvidenceCalculator.is_written_review(rating) else 1.0
        recency = EvidenceCalculator.calculate_recency_multiplier(rating.created_at, reference_time)
        return EvidenceCalculator.rating_factor(rating) * recency * text_bonus
