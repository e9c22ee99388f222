"""Pairwise control-vs-treatment comparisons for multi-variation experiments."""

from typing import List, Sequence

from ..config import DEFAULT_CONFIDENCE_LEVEL
from ..schema import TwoProportionResult, Variation
from .hypothesis_tests import two_proportion_test


def pairwise_comparisons(
    control: Variation,
    treatments: Sequence[Variation],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> List[TwoProportionResult]:
    """
    Run a two-proportion test of each treatment against the control.

    Result i corresponds to treatment i. Significance flags are uncorrected;
    apply bonferroni correction over the family before reporting.
    """
    return [two_proportion_test(control, t, confidence_level) for t in treatments]
