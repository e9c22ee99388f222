"""
Data models for the significance engine.

Experiment input (Variation, ExperimentInput) is a set of frozen pydantic
models that reject invalid values at construction. Results, violations and
caveats are frozen dataclasses; every result offers to_dict() as the
hand-off format for rendering.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .config import (
    ALLOWED_CONFIDENCE_LEVELS,
    MAX_NAME_LENGTH,
    MAX_TREATMENTS,
    MAX_VISITORS,
    MIN_TREATMENTS,
    MIN_VISITORS,
)


class AnalysisKind(str, Enum):
    """Which pathway an experiment is analysed with."""
    TWO_PROPORTION = "two-proportion"
    MULTI_VARIATION = "multi-variation"


def _reject_non_numeric(value: Any, field_name: str) -> Any:
    # bool is an int subclass and numeric strings would be coerced; both are form mistakes here
    if isinstance(value, (bool, str, bytes)) or value is None:
        raise PydanticCustomError("invalid_type", f"Please enter a number for {field_name}")
    return value


class Variation(BaseModel):
    """A named group's visitor and conversion counts."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    visitors: int = Field(..., ge=MIN_VISITORS, le=MAX_VISITORS)
    conversions: int = Field(..., ge=0)

    def __init__(self, name: str, visitors: int, conversions: int, **data: Any):
        super().__init__(name=name, visitors=visitors, conversions=conversions, **data)

    @field_validator("visitors", "conversions", mode="before")
    @classmethod
    def _counts_are_numbers(cls, value: Any, info: ValidationInfo) -> Any:
        return _reject_non_numeric(value, info.field_name)

    @model_validator(mode="after")
    def _conversions_within_visitors(self) -> "Variation":
        if self.conversions > self.visitors:
            raise PydanticCustomError(
                "exceeds_visitors",
                "You can't have more conversions than visitors - please check your numbers",
            )
        return self

    @property
    def conversion_rate(self) -> float:
        return self.conversions / self.visitors


class ExperimentInput(BaseModel):
    """Validated experiment: a control, 1..10 treatments and a confidence level."""
    model_config = ConfigDict(frozen=True)

    control: Variation
    treatments: Tuple[Variation, ...] = Field(..., min_length=MIN_TREATMENTS, max_length=MAX_TREATMENTS)
    confidence_level: float

    @field_validator("confidence_level", mode="before")
    @classmethod
    def _level_is_number(cls, value: Any) -> Any:
        return _reject_non_numeric(value, "confidence level")

    @field_validator("confidence_level")
    @classmethod
    def _level_is_standard(cls, value: float) -> float:
        if value not in ALLOWED_CONFIDENCE_LEVELS:
            raise PydanticCustomError(
                "not_allowed",
                "Please choose a standard confidence level: 80%, 85%, 90%, 95%, or 99%",
            )
        return value

    @property
    def variations(self) -> Tuple[Variation, ...]:
        """All groups, control first."""
        return (self.control,) + tuple(self.treatments)

    @property
    def alpha(self) -> float:
        return 1 - self.confidence_level

    @property
    def test_type(self) -> AnalysisKind:
        if len(self.treatments) == 1:
            return AnalysisKind.TWO_PROPORTION
        return AnalysisKind.MULTI_VARIATION


@dataclass(frozen=True)
class GroupSummary:
    """Reported figures for one arm of a comparison."""
    name: str
    conversion_rate: float
    visitors: int
    conversions: int

    @classmethod
    def from_variation(cls, variation: Variation) -> "GroupSummary":
        return cls(
            name=variation.name,
            conversion_rate=variation.conversion_rate,
            visitors=variation.visitors,
            conversions=variation.conversions,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "conversion_rate": self.conversion_rate,
            "visitors": self.visitors,
            "conversions": self.conversions,
        }


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class Improvement:
    """Treatment minus control, absolute and relative (percent)."""
    absolute: float
    relative: Optional[float]  # None when the control rate is zero
    confidence_interval: ConfidenceInterval

    def to_dict(self) -> Dict[str, Any]:
        return {
            "absolute": self.absolute,
            "relative": self.relative,
            "confidence_interval": {
                "lower": self.confidence_interval.lower,
                "upper": self.confidence_interval.upper,
            },
        }


@dataclass(frozen=True)
class TwoProportionResult:
    """Two-proportion z-test of a treatment against the control."""
    is_significant: bool
    p_value: float
    test_statistic: float
    confidence_level: float
    control: GroupSummary
    treatment: GroupSummary
    improvement: Improvement

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_significant": self.is_significant,
            "p_value": self.p_value,
            "test_statistic": self.test_statistic,
            "confidence_level": self.confidence_level,
            "control": self.control.to_dict(),
            "treatment": self.treatment.to_dict(),
            "improvement": self.improvement.to_dict(),
        }


@dataclass(frozen=True)
class ChiSquareResult:
    """
    Chi-square test of independence over a k x 2 contingency table.

    Row i of observed/expected/residuals is [conversions, non-conversions]
    for group i, in input order.
    """
    is_significant: bool
    p_value: float
    test_statistic: float
    confidence_level: float
    degrees_of_freedom: int
    observed: Tuple[Tuple[float, float], ...]
    expected: Tuple[Tuple[float, float], ...]
    residuals: Tuple[Tuple[float, float], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_significant": self.is_significant,
            "p_value": self.p_value,
            "test_statistic": self.test_statistic,
            "confidence_level": self.confidence_level,
            "degrees_of_freedom": self.degrees_of_freedom,
            "observed": [list(row) for row in self.observed],
            "expected": [list(row) for row in self.expected],
            "residuals": [list(row) for row in self.residuals],
        }


@dataclass(frozen=True)
class BonferroniResult:
    """Bonferroni-adjusted decision for one p-value in a family of tests."""
    original_p_value: float
    corrected_p_value: float
    corrected_alpha: float
    is_significant: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_p_value": self.original_p_value,
            "corrected_p_value": self.corrected_p_value,
            "corrected_alpha": self.corrected_alpha,
            "is_significant": self.is_significant,
        }


@dataclass(frozen=True)
class CorrectedComparison:
    """A pairwise result paired with its Bonferroni correction."""
    comparison: TwoProportionResult
    correction: BonferroniResult

    @property
    def is_significant(self) -> bool:
        return self.correction.is_significant

    def to_dict(self) -> Dict[str, Any]:
        d = self.comparison.to_dict()
        d["uncorrected_is_significant"] = self.comparison.is_significant
        d.update(self.correction.to_dict())
        return d


@dataclass(frozen=True)
class BonferroniSummary:
    total_tests: int
    significant_before: int
    significant_after: int
    corrected_alpha: float
    family_wise_error_rate: float
    correction_applied: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_tests": self.total_tests,
            "significant_before": self.significant_before,
            "significant_after": self.significant_after,
            "corrected_alpha": self.corrected_alpha,
            "family_wise_error_rate": self.family_wise_error_rate,
            "correction_applied": self.correction_applied,
        }


@dataclass(frozen=True)
class MultiVariationResult:
    """Omnibus chi-square plus Bonferroni-corrected pairwise comparisons."""
    overall_test: ChiSquareResult
    pairwise_comparisons: Tuple[CorrectedComparison, ...]
    bonferroni_alpha: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_test": self.overall_test.to_dict(),
            "pairwise_comparisons": [c.to_dict() for c in self.pairwise_comparisons],
            "bonferroni_corrected": True,
            "bonferroni_alpha": self.bonferroni_alpha,
        }


@dataclass(frozen=True)
class FieldViolation:
    """A structural problem with one input field."""
    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass(frozen=True)
class ValidationResult:
    data: Optional[ExperimentInput] = None
    errors: Tuple[FieldViolation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.data is not None and not self.errors


@dataclass(frozen=True)
class StatisticalCaveat:
    """Advisory warning: the result is valid but weakly supported."""
    code: str
    subject: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "subject": self.subject, "message": self.message}


@dataclass(frozen=True)
class AnalysisResult:
    """Complete significance analysis of one experiment."""
    test_type: AnalysisKind
    confidence_level: float
    two_proportion: Optional[TwoProportionResult] = None
    multi_variation: Optional[MultiVariationResult] = None
    caveats: Tuple[StatisticalCaveat, ...] = field(default_factory=tuple)

    @property
    def comparisons(self) -> List[TwoProportionResult]:
        """Per-treatment comparisons regardless of pathway."""
        if self.two_proportion is not None:
            return [self.two_proportion]
        if self.multi_variation is not None:
            return [c.comparison for c in self.multi_variation.pairwise_comparisons]
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        d: Dict[str, Any] = {
            "test_type": self.test_type.value,
            "confidence_level": self.confidence_level,
            "caveats": [c.to_dict() for c in self.caveats],
        }
        if self.two_proportion is not None:
            d["two_proportion"] = self.two_proportion.to_dict()
        if self.multi_variation is not None:
            d["multi_variation"] = self.multi_variation.to_dict()
        return d
