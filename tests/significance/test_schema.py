"""Tests for the experiment input models."""
import pytest
from pydantic import ValidationError
from src.significance.schema import AnalysisKind, ExperimentInput, Variation


def _error_types(exc_info):
    return [(err["loc"], err["type"]) for err in exc_info.value.errors()]


def test_variation_positional_and_keyword_agree():
    assert Variation("A", 100, 10) == Variation(name="A", visitors=100, conversions=10)
    assert Variation("A", 100, 10).conversion_rate == pytest.approx(0.1)


def test_zero_visitors_rejected_at_construction():
    """No variation with an undefined conversion rate can exist."""
    with pytest.raises(ValidationError) as exc_info:
        Variation("A", 0, 0)
    assert _error_types(exc_info) == [(("visitors",), "greater_than_equal")]


def test_conversions_above_visitors_rejected_at_construction():
    with pytest.raises(ValidationError) as exc_info:
        Variation("A", 100, 150)
    assert _error_types(exc_info) == [((), "exceeds_visitors")]


def test_bool_and_numeric_string_counts_rejected():
    with pytest.raises(ValidationError) as exc_info:
        Variation("A", True, "5")
    assert [t for _, t in _error_types(exc_info)] == ["invalid_type", "invalid_type"]


def test_empty_treatments_rejected_at_construction():
    with pytest.raises(ValidationError) as exc_info:
        ExperimentInput(control=Variation("A", 100, 10), treatments=(), confidence_level=0.95)
    assert _error_types(exc_info) == [(("treatments",), "too_short")]


def test_non_standard_confidence_rejected_at_construction():
    with pytest.raises(ValidationError) as exc_info:
        ExperimentInput(
            control=Variation("A", 100, 10),
            treatments=(Variation("B", 100, 12),),
            confidence_level=0.97,
        )
    assert _error_types(exc_info) == [(("confidence_level",), "not_allowed")]


def test_models_are_frozen():
    v = Variation("A", 100, 10)
    with pytest.raises(ValidationError):
        v.visitors = 5


def test_experiment_properties():
    experiment = ExperimentInput(
        control=Variation("A", 100, 10),
        treatments=[Variation("B", 100, 12), Variation("C", 100, 14)],
        confidence_level=0.9,
    )
    assert isinstance(experiment.treatments, tuple)
    assert [v.name for v in experiment.variations] == ["A", "B", "C"]
    assert experiment.alpha == pytest.approx(0.1)
    assert experiment.test_type == AnalysisKind.MULTI_VARIATION
