"""Significance test statistics module."""

from .hypothesis_tests import proportions_z_test, two_proportion_test
from .chi_square import chi_square_test, contingency_tables
from .pairwise import pairwise_comparisons
from .bonferroni import bonferroni_correction, apply_bonferroni_to_tests, bonferroni_summary

__all__ = [
    "proportions_z_test",
    "two_proportion_test",
    "chi_square_test",
    "contingency_tables",
    "pairwise_comparisons",
    "bonferroni_correction",
    "apply_bonferroni_to_tests",
    "bonferroni_summary",
]
