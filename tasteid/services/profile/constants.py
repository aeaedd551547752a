from typing import Final

# Evidence Weights (how much each rating contributes to genre/decade affinity)
RECENCY_DECAY_DAYS: Final[float] = 180.0  # exp(-age / 180)
RECENCY_MIN_MULTIPLIER: Final[float] = 0.1  # Old ratings keep some signal
WRITTEN_REVIEW_MIN_CHARS: Final[int] = 50
WRITTEN_REVIEW_BONUS: Final[float] = 1.3

# Rating buckets
EXTREME_LOW_MAX: Final[float] = 2.0  # 0-2 counts as a visceral low
EXTREME_HIGH_MIN: Final[float] = 8.0  # 8-10 counts as a visceral high
EMOTIONAL_REVIEW_MIN_CHARS: Final[int] = 100

# Release and popularity buckets
RECENT_RELEASE_YEARS: Final[int] = 1  # Released this year or last year
MAINSTREAM_RANK_MAX: Final[int] = 100  # popularity_rank <= 100
OBSCURE_RANK_MIN: Final[int] = 5000  # popularity_rank >= 5000
CONTRARIAN_MIN_DIFF: Final[float] = 3.0
CONSENSUS_MAX_DIFF: Final[float] = 1.0

# Network squashing: activation = 1 - exp(-k * x)
SQUASH_DISCOVERY: Final[float] = 1.2
SQUASH_COMFORT: Final[float] = 1.2
SQUASH_DEEP_DIVE: Final[float] = 0.15
SQUASH_REACTIVE: Final[float] = 1.0
SQUASH_EMOTIONAL: Final[float] = 1.2
SQUASH_SOCIAL: Final[float] = 0.05
SQUASH_AESTHETIC: Final[float] = 0.05

# Emotional network inputs
EMOTIONAL_STDDEV_SCALE: Final[float] = 2.5
EMOTIONAL_WEIGHT_STDDEV: Final[float] = 0.4
EMOTIONAL_WEIGHT_EXTREMES: Final[float] = 0.3
EMOTIONAL_WEIGHT_SENTIMENT: Final[float] = 0.3

# Social / Aesthetic counter weights
SOCIAL_WEIGHT_COLLABORATIONS: Final[float] = 1.0
SOCIAL_WEIGHT_COMMENTS: Final[float] = 0.5
SOCIAL_WEIGHT_LIST_SHARES: Final[float] = 0.8
SOCIAL_WEIGHT_FOLLOWS: Final[float] = 0.3
AESTHETIC_WEIGHT_ART_VIEWS: Final[float] = 0.2
AESTHETIC_WEIGHT_ARTWORK_SAVES: Final[float] = 1.0

# Uniqueness: each network can deviate from its typical midpoint by at most this
MAX_NETWORK_DEVIATION: Final[float] = 0.5
STANDOUT_NETWORK_LIMIT: Final[int] = 3

# Archetype classification
ARCHETYPE_AFFINITY_WEIGHT: Final[float] = 0.75
ARCHETYPE_NETWORK_WEIGHT: Final[float] = 0.25
SECONDARY_MAX_MARGIN: Final[float] = 0.15
SECONDARY_MIN_SCORE: Final[float] = 0.35
GENRE_BREADTH_SATURATION: Final[float] = 8.0  # distinct genres for breadth to reach ~63%
VERBOSITY_SATURATION_WORDS: Final[float] = 100.0
ALBUM_AGE_SATURATION_YEARS: Final[float] = 20.0
HARSH_MEAN_CEILING: Final[float] = 7.0  # harshness rises as the mean drops below this
LENIENT_MEAN_FLOOR: Final[float] = 6.5  # leniency rises as the mean climbs above this
RATING_SKEW_SPAN: Final[float] = 3.0

# Polarity Score
POLARITY_WEIGHT_SIGNATURE_STRENGTH: Final[float] = 0.25
POLARITY_WEIGHT_PATTERN_DIVERSITY: Final[float] = 0.20
POLARITY_WEIGHT_CONSOLIDATION: Final[float] = 0.20
POLARITY_WEIGHT_UNIQUENESS: Final[float] = 0.20
POLARITY_WEIGHT_ENGAGEMENT: Final[float] = 0.15
SIGNATURE_STRENGTH_MAX_STDDEV: Final[float] = 0.5
ENGAGEMENT_LENGTH_SATURATION_WORDS: Final[float] = 60.0
ENGAGEMENT_COUNT_SATURATION: Final[float] = 50.0

# Consolidation (observable contract, not tunable)
CONSOLIDATION_RECENT_WINDOW_DAYS: Final[int] = 180
CONSOLIDATION_GENRE_MIN_PER_WINDOW: Final[int] = 2
CONSOLIDATION_ARTIST_MIN_TOTAL: Final[int] = 3
CONSOLIDATION_TREND_DELTA: Final[float] = 0.5
CONSOLIDATION_DEFAULT_ARTIST_STRENGTH: Final[float] = 0.5  # Artists missing from the signal
CONSOLIDATION_CORE_LIMIT: Final[int] = 3

# Compatibility
COMPATIBILITY_WEIGHT_GENRE: Final[float] = 0.60
COMPATIBILITY_WEIGHT_ARTIST: Final[float] = 0.04  # Genre and rating style alone can reach 96
COMPATIBILITY_WEIGHT_RATING: Final[float] = 0.36
COMPATIBILITY_SHARED_GENRES_TOP: Final[int] = 5
RATING_ALIGNMENT_MEAN_SCALE: Final[float] = 5.0
RATING_ALIGNMENT_STDDEV_SCALE: Final[float] = 2.5
RATING_ALIGNMENT_MEAN_WEIGHT: Final[float] = 0.7
RATING_ALIGNMENT_STDDEV_WEIGHT: Final[float] = 0.3
MATCH_TASTE_TWIN_MIN: Final[int] = 80
MATCH_STRONG_MIN: Final[int] = 60
MATCH_COMPATIBLE_MIN: Final[int] = 40

# Pattern detection
PATTERN_LIMIT: Final[int] = 8
PATTERN_MIN_REVIEWS: Final[int] = 10  # Distribution patterns need at least this many ratings

# Highlights
SIGNATURE_ALBUM_MIN_SCORE: Final[float] = 8.0
SIGNATURE_ALBUM_LIMIT: Final[int] = 5
MEMORABLE_REVIEW_MIN_CHARS: Final[int] = 200
MEMORABLE_REVIEW_LIMIT: Final[int] = 3
MEMORABLE_MOMENT_LIMIT: Final[int] = 10
FUTURE_SELF_MIN_SCORE: Final[float] = 0.3  # Summed genre affinity along the path
FUTURE_SELF_SCORE_SATURATION: Final[float] = 2.0
BRIDGE_BUILDER_MIN_GENRES: Final[int] = 10
BRIDGE_BUILDER_SATURATION_GENRES: Final[float] = 30.0
FUTURE_SELF_LIMIT: Final[int] = 4
SIMILAR_TASTERS_LIMIT: Final[int] = 10

# Signature drift
DRIFT_DEAD_BAND: Final[float] = 0.05

# Profile summary
TOP_GENRES_LIMIT: Final[int] = 5
TOP_ARTISTS_LIMIT: Final[int] = 10
TOP_DECADES_LIMIT: Final[int] = 3
ARTIST_DNA_LIMIT: Final[int] = 20
HARSH_SKEW_MAX: Final[float] = 5.5
LENIENT_SKEW_MIN: Final[float] = 7.5
RATER_MAX_WORDS: Final[float] = 20.0
WRITER_MAX_WORDS: Final[float] = 100.0
