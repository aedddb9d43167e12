"""
Non-nested model comparison (Vuong and Clarke tests).
"""

from copulagof.stats.methods.nonnested.core import (
    Decision,
    PairwiseTestResult,
    clarke_test,
    vuong_test,
)

__all__ = ["Decision", "PairwiseTestResult", "clarke_test", "vuong_test"]
