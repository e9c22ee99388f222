"""
Input validation and statistical caveats.

validate_experiment_input runs raw input through the pydantic experiment
models and turns any ValidationError into field-scoped violations with
user-facing messages; it never raises for malformed input and never alters
values. statistical_caveats flags inputs that are valid but weak.
sanitise_experiment_input is an optional pre-step for form text and is not
applied by validation.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from .config import DEFAULT_CAVEAT_THRESHOLDS, MAX_NAME_LENGTH, MAX_TREATMENTS, CaveatThresholds
from .schema import (
    ExperimentInput,
    FieldViolation,
    StatisticalCaveat,
    ValidationResult,
    Variation,
)

logger = logging.getLogger(__name__)

_FIELD_PATH = re.compile(r"^treatments\.(\d+)\.(.+)$")

_NAME_HINT = "Please give this variation a name (e.g., 'Control', 'Red Button', 'Version A')"
_VARIATION_HINT = "Please provide name, visitors and conversions for this variation"

# (field, pydantic error type) -> (code, message)
FRIENDLY_MESSAGES: Dict[Tuple[str, str], Tuple[str, str]] = {
    ("control", "missing"): ("invalid_type", _VARIATION_HINT),
    ("name", "missing"): ("invalid_type", _NAME_HINT),
    ("name", "string_type"): ("invalid_type", _NAME_HINT),
    ("name", "string_too_short"): ("too_small", _NAME_HINT),
    ("name", "string_too_long"): ("too_big", f"Please use a shorter name ({MAX_NAME_LENGTH} characters or less)"),
    ("visitors", "missing"): ("invalid_type", "Please enter a number for visitors"),
    ("visitors", "int_type"): ("invalid_type", "Please enter a number for visitors"),
    ("visitors", "int_from_float"): ("not_integer", "Please enter a whole number for visitors (no decimals)"),
    ("visitors", "greater_than_equal"): ("too_small", "You need at least 1 visitor to run a test"),
    ("visitors", "less_than_equal"): ("too_big", "Please enter a smaller number (less than 1 billion visitors)"),
    ("conversions", "missing"): ("invalid_type", "Please enter a number for conversions"),
    ("conversions", "int_type"): ("invalid_type", "Please enter a number for conversions"),
    ("conversions", "int_from_float"): ("not_integer", "Please enter a whole number for conversions (no decimals)"),
    ("conversions", "greater_than_equal"): ("too_small", "Conversions can't be negative - enter 0 if no one converted"),
    ("treatments", "missing"): ("invalid_type", "Please provide a list of test variations"),
    ("treatments", "tuple_type"): ("invalid_type", "Please provide a list of test variations"),
    ("treatments", "too_short"): ("too_small", "You need at least one test variation to compare against your control"),
    ("treatments", "too_long"): ("too_big", f"Testing more than {MAX_TREATMENTS} variations at once makes results hard to interpret"),
    ("confidence_level", "missing"): ("invalid_type", "Please choose a confidence level"),
    ("confidence_level", "float_type"): ("invalid_type", "Please choose a confidence level"),
}

# Errors raised by the models' own validators already carry the final message
_CUSTOM_TYPES = {"invalid_type", "not_allowed", "exceeds_visitors"}


def _to_violation(error: Dict[str, Any], field_prefix: str = "") -> FieldViolation:
    loc = [str(part) for part in error["loc"]]
    err_type = error["type"]
    if err_type == "exceeds_visitors":
        loc.append("conversions")
    path = ".".join(([field_prefix] if field_prefix else []) + loc) or "input"

    if err_type in _CUSTOM_TYPES:
        return FieldViolation(path, error["msg"], err_type)
    if err_type == "model_type":
        if path == "input":
            return FieldViolation(path, "Experiment input must be a mapping of control, treatments and confidence_level", "invalid_type")
        return FieldViolation(path, _VARIATION_HINT, "invalid_type")

    leaf = loc[-1] if loc else ""
    code, message = FRIENDLY_MESSAGES.get((leaf, err_type), (err_type, error["msg"]))
    return FieldViolation(path, message, code)


def validate_variation(
    raw: Any,
    field_prefix: str,
) -> Tuple[Optional[Variation], List[FieldViolation]]:
    """
    Validate one variation mapping.

    Args:
        raw: Mapping with name, visitors, conversions
        field_prefix: Path used in violations, e.g. "control" or "treatments.2"

    Returns:
        Tuple of (Variation or None, violations)
    """
    try:
        return Variation.model_validate(raw), []
    except ValidationError as e:
        return None, [_to_violation(err, field_prefix) for err in e.errors()]


def validate_experiment_input(raw: Any) -> ValidationResult:
    """
    Validate a raw experiment mapping.

    Expected shape: {"control": {...}, "treatments": [{...}, ...], "confidence_level": 0.95}

    Returns:
        ValidationResult with data set on success, otherwise every violation found
    """
    try:
        data = ExperimentInput.model_validate(raw)
    except ValidationError as e:
        errors = tuple(_to_violation(err) for err in e.errors())
        logger.debug(f"Experiment input rejected with {len(errors)} violation(s)")
        return ValidationResult(errors=errors)
    return ValidationResult(data=data)


def format_validation_errors(errors: Sequence[FieldViolation]) -> List[str]:
    """User-facing messages with friendly field labels ("Variation 2 visitors: ...")."""
    messages = []
    for err in errors:
        label = err.field
        match = _FIELD_PATH.match(err.field)
        if err.field.startswith("control."):
            label = "Control " + err.field[len("control."):]
        elif match:
            label = f"Variation {int(match.group(1)) + 1} {match.group(2)}"
        messages.append(f"{label}: {err.message}")
    return messages


def statistical_caveats(
    experiment: ExperimentInput,
    thresholds: CaveatThresholds = DEFAULT_CAVEAT_THRESHOLDS,
) -> List[StatisticalCaveat]:
    """
    Advisory warnings for structurally valid but statistically weak input.

    Computation still proceeds; these only qualify how to read the result.
    """
    caveats: List[StatisticalCaveat] = []

    for i, v in enumerate(experiment.variations):
        label = "Control" if i == 0 else f"Variation {i}"
        rate = v.conversion_rate

        if v.visitors < thresholds.min_visitors:
            caveats.append(StatisticalCaveat(
                "small_sample", v.name,
                f"{label} has only {v.visitors} visitors. For reliable results, try to get at least "
                f"{thresholds.min_visitors} visitors per variation before drawing conclusions.",
            ))
        if v.conversions < thresholds.min_conversions:
            caveats.append(StatisticalCaveat(
                "few_conversions", v.name,
                f"{label} has only {v.conversions} conversions. With fewer than {thresholds.min_conversions} "
                "conversions, the results might change significantly with just a few more data points.",
            ))
        if rate < thresholds.min_conversion_rate:
            caveats.append(StatisticalCaveat(
                "low_conversion_rate", v.name,
                f"{label} has a {rate * 100:.2f}% conversion rate. Very low rates need much larger sample sizes.",
            ))
        if v.conversions == 0:
            caveats.append(StatisticalCaveat(
                "zero_conversions", v.name,
                f"{label} has zero conversions. The test still runs, but relative improvement "
                "cannot be calculated from a 0% baseline.",
            ))

    control_rate = experiment.control.conversion_rate
    if any(abs(t.conversion_rate - control_rate) < thresholds.identical_rate_tolerance for t in experiment.treatments):
        caveats.append(StatisticalCaveat(
            "identical_rates", experiment.control.name,
            "Some variations have identical conversion rates. If rates stay identical with large "
            "sample sizes, there may be no real difference to detect.",
        ))

    sizes = [v.visitors for v in experiment.variations]
    if max(sizes) > min(sizes) * thresholds.max_size_ratio:
        caveats.append(StatisticalCaveat(
            "unbalanced_groups", experiment.control.name,
            "Your sample sizes are quite unbalanced. More balanced groups usually give clearer results.",
        ))

    return caveats


def sanitise_experiment_input(raw: Any) -> Any:
    """
    Clean up form text before validation.

    Trims names, strips thousands separators and spaces from numeric strings,
    and turns "95%" or 95 into 0.95. Returns a new structure; unrecognised
    values pass through untouched so validation can report them.
    """
    if not isinstance(raw, Mapping):
        return raw

    treatments = raw.get("treatments")
    if isinstance(treatments, (list, tuple)):
        treatments = [_sanitise_variation(t) for t in treatments]

    return {
        "control": _sanitise_variation(raw.get("control")),
        "treatments": treatments,
        "confidence_level": _sanitise_confidence_level(raw.get("confidence_level")),
    }


def _sanitise_variation(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    name = raw.get("name")
    return {
        "name": name.strip() if isinstance(name, str) else name,
        "visitors": _sanitise_number(raw.get("visitors")),
        "conversions": _sanitise_number(raw.get("conversions")),
    }


def _sanitise_number(value: Any) -> Any:
    if isinstance(value, str):
        cleaned = re.sub(r"[,\s]", "", value)
        try:
            return float(cleaned)
        except ValueError:
            return value
    return value


def _sanitise_confidence_level(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        is_percent = text.endswith("%")
        try:
            parsed = float(text.rstrip("%"))
        except ValueError:
            return value
        return parsed / 100 if is_percent or parsed > 1 else parsed
    if isinstance(value, (int, float)) and not isinstance(value, bool) and 1 < value <= 100:
        return value / 100
    return value


