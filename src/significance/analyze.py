"""
Experiment significance analysis entrypoint.

Input: raw experiment mapping or ExperimentInput, validated before any test runs.
Output: AnalysisResult. Two variations go through the two-proportion z-test;
three or more run the chi-square omnibus test, pairwise comparisons against
control and Bonferroni correction over the pairwise p-values.
"""

import logging
from typing import Any, List, Sequence, Union

import pandas as pd

from .schema import (
    AnalysisKind,
    AnalysisResult,
    ExperimentInput,
    FieldViolation,
    MultiVariationResult,
)
from .stats import (
    apply_bonferroni_to_tests,
    chi_square_test,
    pairwise_comparisons,
    two_proportion_test,
)
from .validation import (
    format_validation_errors,
    statistical_caveats,
    validate_experiment_input,
)

logger = logging.getLogger(__name__)

COMPARISON_COLUMNS = [
    "control",
    "treatment",
    "control_rate",
    "treatment_rate",
    "absolute_lift",
    "relative_lift_pct",
    "ci_low",
    "ci_high",
    "z",
    "p_value",
    "corrected_p_value",
    "corrected_alpha",
    "significant",
]


class ExperimentValidationError(ValueError):
    """Raised by run_analysis when the input has structural violations."""

    def __init__(self, errors: Sequence[FieldViolation]):
        self.errors = list(errors)
        super().__init__("; ".join(format_validation_errors(self.errors)))


def analyze_multi_variation(experiment: ExperimentInput) -> MultiVariationResult:
    """
    Omnibus test, pairwise comparisons, then Bonferroni over the pairwise family.

    The family-wise error budget is 1 - confidence_level.
    """
    overall = chi_square_test(experiment.variations, experiment.confidence_level)
    pairwise = pairwise_comparisons(
        experiment.control, experiment.treatments, experiment.confidence_level
    )
    corrected = apply_bonferroni_to_tests(pairwise, experiment.alpha)
    return MultiVariationResult(
        overall_test=overall,
        pairwise_comparisons=tuple(corrected),
        bonferroni_alpha=experiment.alpha / len(pairwise),
    )


def run_analysis(experiment: Union[ExperimentInput, Any]) -> AnalysisResult:
    """
    Run full significance analysis.

    Args:
        experiment: ExperimentInput or raw mapping; both are validated

    Returns:
        AnalysisResult with caveats attached

    Raises:
        ExperimentValidationError: input failed validation
    """
    if isinstance(experiment, ExperimentInput):
        # model_construct skips validation, so models are re-checked too
        experiment = experiment.model_dump()
    validation = validate_experiment_input(experiment)
    if not validation.is_valid:
        logger.warning(f"Experiment input invalid: {len(validation.errors)} violation(s)")
        raise ExperimentValidationError(validation.errors)
    experiment = validation.data

    caveats = tuple(statistical_caveats(experiment))
    kind = experiment.test_type
    logger.debug(f"Analysing {len(experiment.variations)} variations as {kind.value}")

    if kind == AnalysisKind.TWO_PROPORTION:
        result = AnalysisResult(
            test_type=kind,
            confidence_level=experiment.confidence_level,
            two_proportion=two_proportion_test(
                experiment.control, experiment.treatments[0], experiment.confidence_level
            ),
            caveats=caveats,
        )
    else:
        result = AnalysisResult(
            test_type=kind,
            confidence_level=experiment.confidence_level,
            multi_variation=analyze_multi_variation(experiment),
            caveats=caveats,
        )

    n_sig = sum(1 for row in _comparison_rows(result) if row["significant"])
    logger.info(
        f"Analysis complete: {kind.value}, {n_sig}/{len(experiment.treatments)} "
        f"significant at {experiment.confidence_level:.0%}, {len(caveats)} caveat(s)"
    )
    return result


def _comparison_rows(result: AnalysisResult) -> List[dict]:
    rows = []
    if result.two_proportion is not None:
        pairs = [(result.two_proportion, None)]
    elif result.multi_variation is not None:
        pairs = [(c.comparison, c.correction) for c in result.multi_variation.pairwise_comparisons]
    else:
        pairs = []

    for comp, corr in pairs:
        rows.append({
            "control": comp.control.name,
            "treatment": comp.treatment.name,
            "control_rate": comp.control.conversion_rate,
            "treatment_rate": comp.treatment.conversion_rate,
            "absolute_lift": comp.improvement.absolute,
            "relative_lift_pct": comp.improvement.relative,
            "ci_low": comp.improvement.confidence_interval.lower,
            "ci_high": comp.improvement.confidence_interval.upper,
            "z": comp.test_statistic,
            "p_value": comp.p_value,
            "corrected_p_value": corr.corrected_p_value if corr else comp.p_value,
            "corrected_alpha": corr.corrected_alpha if corr else 1 - comp.confidence_level,
            "significant": corr.is_significant if corr else comp.is_significant,
        })
    return rows


def comparisons_frame(result: AnalysisResult) -> pd.DataFrame:
    """One row per treatment with lift, interval, p-values and final significance flag."""
    return pd.DataFrame(_comparison_rows(result), columns=COMPARISON_COLUMNS)
