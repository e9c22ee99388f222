"""
Chi-square omnibus test across three or more variations.

H0: conversion rate is the same in every group
H1: at least one group differs
"""

from typing import Sequence, Tuple

import numpy as np
from scipy import stats

from ..config import DEFAULT_CONFIDENCE_LEVEL
from ..schema import ChiSquareResult, Variation

MIN_GROUPS = 3


def contingency_tables(variations: Sequence[Variation]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build observed and expected k x 2 tables.

    Row i is [conversions, non-conversions] for group i. Expected counts
    apply the pooled conversion rate to each group's visitors.
    """
    visitors = np.array([v.visitors for v in variations], dtype=float)
    conversions = np.array([v.conversions for v in variations], dtype=float)

    overall_rate = conversions.sum() / visitors.sum()

    observed = np.column_stack([conversions, visitors - conversions])
    expected = np.column_stack([visitors * overall_rate, visitors * (1 - overall_rate)])
    return observed, expected


def chi_square_test(
    variations: Sequence[Variation],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
) -> ChiSquareResult:
    """
    Chi-square test of independence for multi-variation experiments.

    Args:
        variations: All groups including control (at least 3)
        confidence_level: e.g. 0.95

    Returns:
        ChiSquareResult with observed, expected and standardized residuals
    """
    if len(variations) < MIN_GROUPS:
        raise ValueError(
            f"Chi-square omnibus test needs at least {MIN_GROUPS} groups, got {len(variations)}. "
            "Use two_proportion_test for a single treatment."
        )

    observed, expected = contingency_tables(variations)

    # Zero expected cells only occur when the observed column is all zero too
    nonzero = expected > 0
    diff = observed - expected
    contributions = np.divide(diff ** 2, expected, out=np.zeros_like(diff), where=nonzero)
    residuals = np.divide(diff, np.sqrt(expected), out=np.zeros_like(diff), where=nonzero)

    chi2 = float(np.sum(contributions))
    df = len(variations) - 1
    p_value = float(stats.chi2.sf(chi2, df))
    p_value = min(max(p_value, 0.0), 1.0)

    return ChiSquareResult(
        is_significant=p_value < (1 - confidence_level),
        p_value=p_value,
        test_statistic=chi2,
        confidence_level=confidence_level,
        degrees_of_freedom=df,
        observed=_as_rows(observed),
        expected=_as_rows(expected),
        residuals=_as_rows(residuals),
    )


def _as_rows(table: np.ndarray) -> Tuple[Tuple[float, float], ...]:
    return tuple((float(a), float(b)) for a, b in table)
