"""
Engine constants and caveat thresholds.

Limits mirror what the input form accepts; thresholds drive the advisory
statistical caveats, never the significance decision itself.
"""

from dataclasses import dataclass
from typing import Tuple

ALLOWED_CONFIDENCE_LEVELS: Tuple[float, ...] = (0.80, 0.85, 0.90, 0.95, 0.99)
DEFAULT_CONFIDENCE_LEVEL = 0.95
DEFAULT_ALPHA = 0.05

MAX_NAME_LENGTH = 50
MIN_VISITORS = 1
MAX_VISITORS = 1_000_000_000
MIN_TREATMENTS = 1
MAX_TREATMENTS = 10  # interpretability limit

# Floor/ceiling applied to 0% and 100% rates before computing the p-value
RATE_EPSILON = 1e-6


@dataclass(frozen=True)
class CaveatThresholds:
    """Cut-offs below which a valid result is flagged as statistically weak."""
    min_visitors: int = 100
    min_conversions: int = 5
    min_conversion_rate: float = 0.005
    identical_rate_tolerance: float = 0.0001
    max_size_ratio: float = 3.0


DEFAULT_CAVEAT_THRESHOLDS = CaveatThresholds()
