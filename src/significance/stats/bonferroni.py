"""
Bonferroni correction for simultaneous pairwise comparisons.

Controls the family-wise error rate: each of n tests is judged at alpha / n.
Apply it to the pairwise p-values only, never to the omnibus chi-square p-value.
"""

from typing import List, Sequence

from ..config import DEFAULT_ALPHA
from ..schema import (
    BonferroniResult,
    BonferroniSummary,
    CorrectedComparison,
    TwoProportionResult,
)


def _check_alpha(alpha: float) -> None:
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")


def bonferroni_correction(
    p_values: Sequence[float],
    alpha: float = DEFAULT_ALPHA,
) -> List[BonferroniResult]:
    """
    Adjust a family of p-values.

    Args:
        p_values: P-values from the individual tests, in test order
        alpha: Desired family-wise error rate

    Returns:
        One BonferroniResult per p-value, same order
    """
    _check_alpha(alpha)
    n = len(p_values)
    if n == 0:
        return []

    corrected_alpha = alpha / n
    return [
        BonferroniResult(
            original_p_value=p,
            corrected_p_value=min(p * n, 1.0),
            corrected_alpha=corrected_alpha,
            is_significant=p <= corrected_alpha,
        )
        for p in p_values
    ]


def apply_bonferroni_to_tests(
    results: Sequence[TwoProportionResult],
    alpha: float = DEFAULT_ALPHA,
) -> List[CorrectedComparison]:
    """Pair each pairwise result with its correction, preserving order."""
    corrections = bonferroni_correction([r.p_value for r in results], alpha)
    return [
        CorrectedComparison(comparison=r, correction=c)
        for r, c in zip(results, corrections)
    ]


def bonferroni_summary(
    p_values: Sequence[float],
    alpha: float = DEFAULT_ALPHA,
) -> BonferroniSummary:
    """How many tests are significant with and without the correction."""
    corrections = bonferroni_correction(p_values, alpha)
    n = len(p_values)
    return BonferroniSummary(
        total_tests=n,
        significant_before=sum(1 for p in p_values if p <= alpha),
        significant_after=sum(1 for c in corrections if c.is_significant),
        corrected_alpha=alpha / n if n else alpha,
        family_wise_error_rate=alpha,
        correction_applied=n > 1,
    )
