from typing import Final

from tasteid.models.tier import TasteTier, TierProgress

# More ratings = more reliable profile = higher tier
TASTEID_TIERS: Final[tuple[TasteTier, ...]] = (
    TasteTier(
        id="locked",
        name="LOCKED",
        min_ratings=0,
        max_confidence=0,
        description="Rate 20 albums to unlock your TasteID",
    ),
    TasteTier(
        id="emerging",
        name="EMERGING",
        min_ratings=20,
        max_confidence=65,
        description="Your taste profile is taking shape",
    ),
    TasteTier(
        id="developing",
        name="DEVELOPING",
        min_ratings=50,
        max_confidence=75,
        description="Your musical DNA is becoming clearer",
    ),
    TasteTier(
        id="established",
        name="ESTABLISHED",
        min_ratings=100,
        max_confidence=85,
        description="A well-defined taste profile",
    ),
    TasteTier(
        id="expert",
        name="EXPERT",
        min_ratings=200,
        max_confidence=92,
        description="Deep musical understanding",
    ),
    TasteTier(
        id="master",
        name="MASTER",
        min_ratings=500,
        max_confidence=98,
        description="Elite-level taste authority",
    ),
)


def tier_for(rating_count: int) -> TasteTier:
    """Highest tier the rating count qualifies for."""
    for tier in reversed(TASTEID_TIERS):
        if rating_count >= tier.min_ratings:
            return tier
    return TASTEID_TIERS[0]


def next_tier(rating_count: int) -> TasteTier | None:
    current = tier_for(rating_count)
    index = TASTEID_TIERS.index(current)
    if index < len(TASTEID_TIERS) - 1:
        return TASTEID_TIERS[index + 1]
    return None


def tier_progress(rating_count: int) -> TierProgress:
    """Progress (0-100) from the current tier to the next one."""
    current = tier_for(rating_count)
    upcoming = next_tier(rating_count)
    if upcoming is None:
        return TierProgress(current=current, next=None, progress=100.0, ratings_to_next=0)

    span = upcoming.min_ratings - current.min_ratings
    progress = min(100.0, (max(rating_count, 0) - current.min_ratings) / span * 100)
    return TierProgress(
        current=current,
        next=upcoming,
        progress=max(0.0, progress),
        ratings_to_next=upcoming.min_ratings - max(rating_count, 0),
    )
