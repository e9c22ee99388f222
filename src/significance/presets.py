"""
Example experiments for demos and development.

Realistic two-variation and multi-variation scenarios covering clear winners,
null results, declines, small samples and many-treatment families.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ExperimentPreset:
    name: str
    description: str
    control: Tuple[str, int, int]  # (name, visitors, conversions)
    treatments: Tuple[Tuple[str, int, int], ...]
    confidence_level: float = 0.95

    def to_input(self) -> Dict[str, Any]:
        """Raw mapping accepted by validate_experiment_input."""
        return as_raw_input(
            _variation_dict(self.control),
            [_variation_dict(t) for t in self.treatments],
            self.confidence_level,
        )


def as_raw_input(
    control: Mapping[str, Any],
    treatments: Sequence[Mapping[str, Any]],
    confidence_level: float = 0.95,
) -> Dict[str, Any]:
    """Assemble the raw experiment mapping validate_experiment_input expects."""
    return {
        "control": dict(control),
        "treatments": [dict(t) for t in treatments],
        "confidence_level": confidence_level,
    }


def _variation_dict(row: Tuple[str, int, int]) -> Dict[str, Any]:
    name, visitors, conversions = row
    return {"name": name, "visitors": visitors, "conversions": conversions}


TWO_VARIATION_PRESETS: Tuple[ExperimentPreset, ...] = (
    ExperimentPreset(
        "Clear Winner",
        "Button colour change with significant improvement",
        ("Blue Button", 10000, 1200),
        (("Red Button", 10000, 1440),),
    ),
    ExperimentPreset(
        "No Difference",
        "Headline test with no meaningful change",
        ("Original", 8000, 480),
        (("New Copy", 8000, 495),),
    ),
    ExperimentPreset(
        "Negative Result",
        "Form change that hurt conversions",
        ("Simple Form", 5000, 750),
        (("Complex Form", 5000, 650),),
    ),
    ExperimentPreset(
        "Small Sample",
        "Test just started, not enough data yet",
        ("Control", 150, 12),
        (("Variation", 145, 15),),
    ),
    ExperimentPreset(
        "High-Stakes E-commerce",
        "Checkout flow optimisation with large traffic",
        ("Current Checkout", 25000, 3750),
        (("One-Page Checkout", 25000, 4125),),
        confidence_level=0.99,
    ),
    ExperimentPreset(
        "Mobile Landing Page",
        "Mobile-first design vs responsive",
        ("Responsive", 12000, 840),
        (("Mobile-First", 12000, 912),),
    ),
    ExperimentPreset(
        "Low Conversion Rate",
        "Newsletter signup optimisation",
        ("Small Form", 50000, 150),
        (("Exit Intent", 50000, 225),),
    ),
)

MULTI_VARIATION_PRESETS: Tuple[ExperimentPreset, ...] = (
    ExperimentPreset(
        "Button Colour Battle",
        "Testing multiple button colours against control",
        ("Blue", 8000, 800),
        (("Red", 8000, 880), ("Green", 8000, 840)),
    ),
    ExperimentPreset(
        "Headline Showdown",
        "Testing different value propositions",
        ("Save Money", 6000, 420),
        (("Save Time", 6000, 480), ("Get Results", 6000, 450), ("Join Thousands", 6000, 390)),
    ),
    ExperimentPreset(
        "Clear Multi-Winner",
        "Two variations significantly outperform control",
        ("Original", 8000, 400),
        (("Version A", 8000, 600), ("Version B", 8000, 640), ("Version C", 8000, 440)),
    ),
    ExperimentPreset(
        "Inconclusive Multi-Test",
        "Multiple variations but no clear statistical winner",
        ("Control", 4000, 280),
        (("Test 1", 4000, 300), ("Test 2", 4000, 290), ("Test 3", 4000, 295), ("Test 4", 4000, 285)),
    ),
    ExperimentPreset(
        "Pricing Page Experiment",
        "Testing different pricing page layouts",
        ("Table View", 3000, 450),
        (("Card View", 3000, 510), ("List View", 3000, 465), ("Comparison", 3000, 495), ("Minimal", 3000, 420)),
    ),
    ExperimentPreset(
        "Extreme Multi-Variation",
        "Testing many options (demonstrates correction effects)",
        ("A", 2000, 200),
        (("B", 2000, 220), ("C", 2000, 205), ("D", 2000, 215), ("E", 2000, 210), ("F", 2000, 225)),
    ),
    ExperimentPreset(
        "Single Clear Winner",
        "One variation significantly outperforms all others",
        ("Original", 10000, 500),
        (("Winner", 10000, 750), ("Similar 1", 10000, 520), ("Similar 2", 10000, 510)),
    ),
)


def get_all_presets() -> List[ExperimentPreset]:
    return list(TWO_VARIATION_PRESETS) + list(MULTI_VARIATION_PRESETS)


def get_preset_by_name(name: str) -> Optional[ExperimentPreset]:
    return next((p for p in get_all_presets() if p.name == name), None)
