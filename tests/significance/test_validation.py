"""Tests for input validation, caveats and sanitisation."""
import copy

import pytest
from src.significance.schema import ExperimentInput, Variation
from src.significance.validation import (
    format_validation_errors,
    sanitise_experiment_input,
    statistical_caveats,
    validate_experiment_input,
    validate_variation,
)


def _raw(**overrides):
    raw = {
        "control": {"name": "Control", "visitors": 1000, "conversions": 50},
        "treatments": [{"name": "Variation A", "visitors": 1000, "conversions": 65}],
        "confidence_level": 0.95,
    }
    raw.update(overrides)
    return raw


def _fields(result):
    return [e.field for e in result.errors]


def test_valid_input():
    result = validate_experiment_input(_raw())
    assert result.is_valid
    assert result.errors == ()
    assert result.data == ExperimentInput(
        control=Variation("Control", 1000, 50),
        treatments=(Variation("Variation A", 1000, 65),),
        confidence_level=0.95,
    )


@pytest.mark.parametrize("level", [0.8, 0.85, 0.9, 0.95, 0.99])
def test_allowed_confidence_levels(level):
    assert validate_experiment_input(_raw(confidence_level=level)).is_valid


@pytest.mark.parametrize("level", [0.75, 0.97, 1.0, 95, "0.95", None])
def test_rejected_confidence_levels(level):
    result = validate_experiment_input(_raw(confidence_level=level))
    assert not result.is_valid
    assert _fields(result) == ["confidence_level"]


def test_empty_name():
    variation, errors = validate_variation({"name": "", "visitors": 10, "conversions": 1}, "control")
    assert variation is None
    assert errors[0].field == "control.name"
    assert "Please give this variation a name" in errors[0].message


def test_long_name():
    _, errors = validate_variation({"name": "x" * 51, "visitors": 10, "conversions": 1}, "control")
    assert errors[0].code == "too_big"
    variation, errors = validate_variation({"name": "x" * 50, "visitors": 10, "conversions": 1}, "control")
    assert errors == [] and variation.name == "x" * 50


def test_conversions_exceed_visitors():
    raw = _raw(treatments=[{"name": "B", "visitors": 100, "conversions": 150}])
    result = validate_experiment_input(raw)
    assert not result.is_valid
    assert result.errors[0].field == "treatments.0.conversions"
    assert result.errors[0].code == "exceeds_visitors"


@pytest.mark.parametrize(
    "visitors, code",
    [(0, "too_small"), (-10, "too_small"), (10.5, "not_integer"), (True, "invalid_type"),
     ("1000", "invalid_type"), (2_000_000_000, "too_big")],
)
def test_bad_visitors(visitors, code):
    _, errors = validate_variation({"name": "A", "visitors": visitors, "conversions": 5}, "control")
    assert [(e.field, e.code) for e in errors] == [("control.visitors", code)]


@pytest.mark.parametrize("conversions, code", [(-5, "too_small"), (2.5, "not_integer"), (None, "invalid_type")])
def test_bad_conversions(conversions, code):
    _, errors = validate_variation({"name": "A", "visitors": 100, "conversions": conversions}, "control")
    assert [(e.field, e.code) for e in errors] == [("control.conversions", code)]


def test_integral_float_accepted_as_int():
    result = validate_experiment_input(_raw(control={"name": "C", "visitors": 1000.0, "conversions": 50.0}))
    assert result.is_valid
    assert isinstance(result.data.control.visitors, int)
    assert result.data.control.visitors == 1000


@pytest.mark.parametrize("treatments, code", [([], "too_small"), ("abc", "invalid_type"), (None, "invalid_type")])
def test_bad_treatment_list(treatments, code):
    result = validate_experiment_input(_raw(treatments=treatments))
    assert [(e.field, e.code) for e in result.errors] == [("treatments", code)]


def test_treatment_count_limits():
    one = {"name": "T", "visitors": 100, "conversions": 10}
    assert validate_experiment_input(_raw(treatments=[one] * 10)).is_valid
    result = validate_experiment_input(_raw(treatments=[one] * 11))
    assert result.errors[0].code == "too_big"


def test_collects_all_violations():
    raw = {
        "control": {"name": "", "visitors": 0, "conversions": -1},
        "treatments": [{"name": "A", "visitors": 10, "conversions": 5}, "oops"],
        "confidence_level": 0.5,
    }
    result = validate_experiment_input(raw)
    assert result.data is None
    assert _fields(result) == [
        "control.name",
        "control.visitors",
        "control.conversions",
        "treatments.1",
        "confidence_level",
    ]


def test_non_mapping_input_does_not_raise():
    for raw in (None, 42, "experiment", [1, 2]):
        result = validate_experiment_input(raw)
        assert not result.is_valid
        assert _fields(result) == ["input"]


def test_validation_does_not_mutate_input():
    raw = _raw(control={"name": "  Control  ", "visitors": 1000.0, "conversions": 50})
    before = copy.deepcopy(raw)
    result = validate_experiment_input(raw)
    assert raw == before
    assert result.data.control.name == "  Control  "


def test_format_validation_errors():
    raw = _raw(
        control={"name": "", "visitors": 10, "conversions": 1},
        treatments=[{"name": "A", "visitors": 10, "conversions": 1}, {"name": "B", "visitors": 0, "conversions": 0}],
    )
    messages = format_validation_errors(validate_experiment_input(raw).errors)
    assert messages[0].startswith("Control name: ")
    assert messages[1].startswith("Variation 2 visitors: ")


def test_sanitise_then_validate():
    """Form text with separators and percent signs becomes valid input."""
    raw = {
        "control": {"name": "  Control ", "visitors": "10,000", "conversions": " 1 200 "},
        "treatments": [{"name": "Red", "visitors": "10,000", "conversions": "1,440"}],
        "confidence_level": "95%",
    }
    cleaned = sanitise_experiment_input(raw)
    assert cleaned["control"] == {"name": "Control", "visitors": 10000.0, "conversions": 1200.0}
    assert cleaned["confidence_level"] == 0.95
    assert raw["control"]["visitors"] == "10,000"
    result = validate_experiment_input(cleaned)
    assert result.is_valid
    assert result.data.treatments[0].conversions == 1440


@pytest.mark.parametrize("value, expected", [(95, 0.95), ("90", 0.9), ("0.8", 0.8), (0.99, 0.99), ("high", "high")])
def test_sanitise_confidence_level(value, expected):
    assert sanitise_experiment_input(_raw(confidence_level=value))["confidence_level"] == expected


def test_sanitise_leaves_garbage_for_validation():
    cleaned = sanitise_experiment_input(_raw(control={"name": "C", "visitors": "lots", "conversions": 1}))
    assert cleaned["control"]["visitors"] == "lots"
    assert not validate_experiment_input(cleaned).is_valid


def _experiment(control, *treatments):
    return ExperimentInput(control=control, treatments=tuple(treatments), confidence_level=0.95)


def test_caveats_small_and_zero():
    caveats = statistical_caveats(_experiment(Variation("Control", 50, 0), Variation("B", 60, 3)))
    codes = {(c.subject, c.code) for c in caveats}
    assert ("Control", "small_sample") in codes
    assert ("Control", "zero_conversions") in codes
    assert ("Control", "low_conversion_rate") in codes
    assert ("B", "few_conversions") in codes


def test_caveats_identical_and_unbalanced():
    caveats = statistical_caveats(_experiment(Variation("Control", 1000, 100), Variation("B", 4000, 400)))
    codes = [c.code for c in caveats]
    assert "identical_rates" in codes
    assert "unbalanced_groups" in codes


def test_no_caveats_for_healthy_experiment():
    assert statistical_caveats(_experiment(Variation("Control", 10000, 1200), Variation("B", 10000, 1440))) == []
