"""
Independence test for bivariate copula data.
"""

from copulagof.stats.methods.independence.core import (
    IndependenceTestResult,
    kendall_independence_test,
)

__all__ = ["IndependenceTestResult", "kendall_independence_test"]
