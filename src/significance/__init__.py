"""Significance engine for A/B/n conversion experiments."""

from .schema import (
    AnalysisKind,
    AnalysisResult,
    BonferroniResult,
    ChiSquareResult,
    ExperimentInput,
    FieldViolation,
    MultiVariationResult,
    StatisticalCaveat,
    TwoProportionResult,
    ValidationResult,
    Variation,
)
from .stats import (
    two_proportion_test,
    chi_square_test,
    pairwise_comparisons,
    bonferroni_correction,
    apply_bonferroni_to_tests,
    bonferroni_summary,
)
from .validation import (
    validate_experiment_input,
    format_validation_errors,
    statistical_caveats,
    sanitise_experiment_input,
)
from .analyze import run_analysis, comparisons_frame, ExperimentValidationError

__all__ = [
    "AnalysisKind",
    "AnalysisResult",
    "BonferroniResult",
    "ChiSquareResult",
    "ExperimentInput",
    "FieldViolation",
    "MultiVariationResult",
    "StatisticalCaveat",
    "TwoProportionResult",
    "ValidationResult",
    "Variation",
    "two_proportion_test",
    "chi_square_test",
    "pairwise_comparisons",
    "bonferroni_correction",
    "apply_bonferroni_to_tests",
    "bonferroni_summary",
    "validate_experiment_input",
    "format_validation_errors",
    "statistical_caveats",
    "sanitise_experiment_input",
    "run_analysis",
    "comparisons_frame",
    "ExperimentValidationError",
]
