#!/usr/bin/env python3
"""
Run every preset experiment through the significance engine.

Prints the omnibus result (for 3+ variations), the per-treatment comparison
table and any statistical caveats.
"""

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

import pandas as pd

logging.basicConfig(level=logging.INFO)


def main():
    from src.significance.analyze import comparisons_frame, run_analysis
    from src.significance.presets import get_all_presets

    pd.set_option("display.width", 160)
    pd.set_option("display.float_format", "{:.4f}".format)

    for i, preset in enumerate(get_all_presets(), 1):
        print(f"\n{i}. {preset.name} - {preset.description}")
        result = run_analysis(preset.to_input())

        if result.multi_variation is not None:
            overall = result.multi_variation.overall_test
            print(
                f"   Chi-square = {overall.test_statistic:.3f} (df={overall.degrees_of_freedom}), "
                f"p = {overall.p_value:.4g}, significant: {overall.is_significant}"
            )
            print(f"   Bonferroni alpha per comparison: {result.multi_variation.bonferroni_alpha:.4f}")

        print(comparisons_frame(result).to_string(index=False))
        for caveat in result.caveats:
            print(f"   [!] {caveat.message}")

    print("\n[OK] Demo complete.")


if __name__ == "__main__":
    main()
