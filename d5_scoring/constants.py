"""Constants for factor synthesis and tier classification."""

# Score scale
MIN_SCORE = 0.0
MAX_SCORE = 100.0

# Weight sum validation threshold
WEIGHT_SUM_TOLERANCE = 1e-6

# Display precision
WEIGHT_PRECISION = 2  # 0.01 steps
VALUE_PRECISION = 1  # 0.1 steps
WEIGHT_UNITS = 10**WEIGHT_PRECISION  # hundredths shared out between factors

# Worst case |weighted_sum - target| after display rounding
SYNTHESIS_TOLERANCE = 0.1

# Tier thresholds (inclusive lower bounds)
TIER_SUCCESS_MIN = 80.0
TIER_PRIMARY_MIN = 60.0
TIER_WARNING_MIN = 40.0
