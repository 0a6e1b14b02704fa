"""Scoring weights, thresholds and guard defaults for the analysis core.

Every magic number used by the analyzers lives here so that scoring policy
stays auditable in one place. Analyzers take these values as constructor
defaults; tests and callers may override them per instance.

Weight groups sum to 1.0 unless noted otherwise.
"""

from typing import Dict

# Time units (milliseconds)
MS_PER_MINUTE: float = 60_000.0
MS_PER_HOUR: float = 3_600_000.0
MS_PER_DAY: float = 86_400_000.0

# Statistics kernel
# A raw regularity/velocity score above the threshold earns a flat bonus.
# The bonus is not clamped, so both scores may reach 1.1.
SUSTAINED_BONUS_THRESHOLD: float = 0.8
SUSTAINED_BONUS: float = 0.1
VELOCITY_CAP_ACTIONS_PER_MINUTE: float = 2.0

# Automated-pattern pass
AUTOMATED_MIN_INTERACTIONS: int = 4
AUTOMATED_MAX_MEAN_INTERVAL_MS: float = 15 * MS_PER_MINUTE
AUTOMATED_FREQUENCY_REFERENCE_MS: float = 5 * MS_PER_MINUTE
AUTOMATED_VOLUME_BONUS: float = 0.1
AUTOMATED_WEIGHTS: Dict[str, float] = {
    "regularity": 0.4,
    "velocity": 0.3,
    "frequency": 0.3,
}

# Coordinated-pattern pass
COORDINATION_WINDOW_MS: float = 30 * MS_PER_MINUTE
COORDINATION_MIN_INTERACTIONS: int = 3
COORDINATION_MIN_ACCOUNTS: int = 2
COORDINATED_CONFIDENCE: float = 0.9

# Organic fallback for content neighborhoods
ORGANIC_CONFIDENCE: float = 0.9
CONTENT_NEIGHBORHOOD_DAYS: int = 7

# Source credibility
DEFAULT_CREDIBILITY: float = 0.5  # unattributed content or unknown publisher
CREDIBILITY_WEIGHTS: Dict[str, float] = {
    "content": 0.4,
    "interaction": 0.3,
    "verification": 0.3,
}
CONTENT_QUALITY_WEIGHTS: Dict[str, float] = {
    "toxicity": 0.4,
    "sentiment": 0.3,
    "length": 0.3,
}
INTERACTION_WEIGHTS: Dict[str, float] = {
    "engagement": 0.4,
    "frequency": 0.3,
    "diversity": 0.3,
}
# Neutral content is treated as most credible.
SENTIMENT_SCORES: Dict[str, float] = {
    "neutral": 1.0,
    "positive": 0.7,
    "negative": 0.7,
}
UNKNOWN_SENTIMENT_SCORE: float = 0.5
LENGTH_NORMALIZATION_CHARS: int = 1000
# Additive, may sum to 1.0, not clamped separately.
VERIFICATION_BONUSES: Dict[str, float] = {
    "links": 0.3,
    "media": 0.2,
    "verified": 0.5,
}

# Cross references
CROSS_REFERENCE_WEIGHTS: Dict[str, float] = {
    "verified": 0.4,
    "non_contradiction": 0.4,
    "support": 0.2,
}

# Baseline score (used only when cross references exist)
BASELINE_WEIGHTS: Dict[str, float] = {
    "source_credibility": 0.4,
    "verified": 0.3,
    "non_contradiction": 0.2,
    "support": 0.1,
}

# Deviation and impact
PROPAGATION_FACTOR_DIVISOR: float = 100.0
IMPACT_WEIGHTS: Dict[str, float] = {
    "velocity": 0.3,
    "reach": 0.2,
    "engagement": 0.2,
    "spread": 0.1,
    "pattern": 0.2,
}
REACH_NORMALIZATION: float = 10_000.0

# Temporal pattern score
TEMPORAL_COUNT_NORMALIZATION: float = 1000.0
TEMPORAL_DENSITY_HORIZON_HOURS: float = 24.0
TEMPORAL_WEIGHTS: Dict[str, float] = {
    "count": 0.4,
    "consistency": 0.3,
    "density": 0.3,
}

# Narrative consistency
RELATED_CONTENT_LIMIT: int = 10
DEVIATING_FACTOR_THRESHOLD: float = 0.5
