"""
copulagof.stats.methods.nonnested.core
======================================

Core mathematics for non-nested model comparison.

Two tests compare the per-observation log-likelihoods of two fitted models
that need not be nested in each other:

- `vuong_test`: asymptotic normal test on the mean log-likelihood ratio
- `clarke_test`: distribution-free sign test (exact binomial) on the number
  of observations favouring model 1

Both return an immutable `PairwiseTestResult` with a categorical `Decision`.

References:
    Vuong, Q. H. (1989). Ratio tests for model selection and non-nested
    hypotheses. Econometrica 57(2), 307-333.

    Clarke, K. A. (2007). A Simple Distribution-Free Test for Nonnested
    Model Selection. Political Analysis 15, 347-363.

Examples
--------
>>> import numpy as np
>>> l1 = np.zeros(10); l2 = np.zeros(10)
>>> clarke_test(l1, l2).decision
<Decision.FAVOR_SECOND: 2>
>>> vuong_test(l1, l2).decision
<Decision.NONE: 0>
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Any, Dict, Literal, Optional

import numpy as np
from scipy.stats import binom, norm

from copulagof.stats.common.descriptive import is_constant, kurtosis, sample_variance
from copulagof.stats.methods.common.statistical import (
    Correction,
    CorrectionLike,
    corrected_differences,
    normal_critical_value,
)

logger = logging.getLogger(__name__)

TestName = Literal["vuong", "clarke"]


class Decision(IntEnum):
    """Outcome of a pairwise comparison (codes match the classic 0/1/2)."""

    NONE = 0
    FAVOR_FIRST = 1
    FAVOR_SECOND = 2


@dataclass(frozen=True)
class PairwiseTestResult:
    """
    Result of one Vuong or Clarke comparison.

    Attributes:
        test: "vuong" or "clarke"
        decision: Decision, or None for an absent (not run) comparison
        statistic: nu for Vuong, the count B of positive differences for Clarke
        p_value: Two-sided p-value
        kurtosis: Kurtosis of the uncorrected log-likelihood differences
    """

    test: TestName
    decision: Optional[Decision]
    statistic: float
    p_value: float
    kurtosis: float

    @classmethod
    def absent(cls, test: TestName) -> "PairwiseTestResult":
        """Placeholder for a comparison that was not run (e.g. a self-pair)."""
        return cls(
            test=test,
            decision=None,
            statistic=math.nan,
            p_value=math.nan,
            kurtosis=math.nan,
        )

    @property
    def is_absent(self) -> bool:
        return self.decision is None

    def rounded(self, digits: int = 3) -> Dict[str, Any]:
        """Display view with numbers rounded to `digits` decimals."""
        return {
            "test": self.test,
            "decision": None if self.decision is None else int(self.decision),
            "statistic": round(self.statistic, digits),
            "p_value": round(self.p_value, digits),
            "kurtosis": round(self.kurtosis, digits),
        }

    def to_payload(self) -> Dict[str, Any]:
        """JSON-safe payload; NaN becomes null."""
        payload = asdict(self)
        payload["decision"] = None if self.decision is None else int(self.decision)
        for key in ("statistic", "p_value", "kurtosis"):
            value = payload[key]
            payload[key] = value if math.isfinite(value) else None
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PairwiseTestResult":
        def _num(value: Any) -> float:
            return math.nan if value is None else float(value)

        decision = payload.get("decision")
        return cls(
            test=payload["test"],
            decision=None if decision is None else Decision(decision),
            statistic=_num(payload.get("statistic")),
            p_value=_num(payload.get("p_value")),
            kurtosis=_num(payload.get("kurtosis")),
        )


def _raw_differences(loglik1: np.ndarray, loglik2: np.ndarray) -> np.ndarray:
    return np.asarray(loglik1, dtype=np.float64) - np.asarray(loglik2, dtype=np.float64)


def vuong_test(
    loglik1: np.ndarray,
    loglik2: np.ndarray,
    alpha: float = 0.05,
    p1: int = 0,
    p2: int = 0,
    correction: CorrectionLike = Correction.NONE,
) -> PairwiseTestResult:
    """
    Vuong test of H0: model 1 and model 2 are equivalent.

    The statistic is
        nu = sqrt(N) * mean(m) / sqrt((N-1)/N * var(m))
    with m the corrected log-likelihood differences and var the (N-1)
    sample variance. With z = Phi^-1(1 - alpha/2):
        - nu >= z: favour model 1
        - nu <= -z: favour model 2
        - otherwise: no decision

    Args:
        loglik1: Per-observation log-likelihoods of model 1
        loglik2: Per-observation log-likelihoods of model 2
        alpha: Significance level
        p1: Number of parameters of model 1
        p2: Number of parameters of model 2
        correction: None, Akaike or Schwarz

    Returns:
        PairwiseTestResult with nu as statistic. When m is constant the
        statistic is undefined: the result has decision NONE and NaN
        statistic and p-value.
    """
    m = corrected_differences(loglik1, loglik2, p1, p2, correction)
    kurt = kurtosis(_raw_differences(loglik1, loglik2))
    n = m.size
    z = normal_critical_value(alpha)

    var = sample_variance(m)
    # Rounding can leave a tiny positive variance on a constant vector.
    if is_constant(m) or not var > 0.0:
        logger.debug("Vuong test: zero variance of differences (n=%d), no decision", n)
        return PairwiseTestResult(
            test="vuong",
            decision=Decision.NONE,
            statistic=math.nan,
            p_value=math.nan,
            kurtosis=kurt,
        )

    nu = math.sqrt(n) * float(m.mean()) / math.sqrt((n - 1) / n * var)

    if nu >= z:
        decision = Decision.FAVOR_FIRST
    elif nu <= -z:
        decision = Decision.FAVOR_SECOND
    else:
        decision = Decision.NONE

    p_value = float(2.0 * norm.sf(abs(nu)))

    return PairwiseTestResult(
        test="vuong",
        decision=decision,
        statistic=nu,
        p_value=p_value,
        kurtosis=kurt,
    )


def clarke_test(
    loglik1: np.ndarray,
    loglik2: np.ndarray,
    alpha: float = 0.05,
    p1: int = 0,
    p2: int = 0,
    correction: CorrectionLike = Correction.NONE,
) -> PairwiseTestResult:
    """
    Clarke (distribution-free) test of H0: model 1 and model 2 are equivalent.

    B counts observations whose corrected difference is strictly positive.
    Under H0, B ~ Binomial(N, 1/2). Two-sided exact p-values:
        - B >= N/2: p = 2 * (1 - F(B - 1)), favour model 1 if p <= alpha
        - B <  N/2: p = 2 * F(B), favour model 2 if p <= alpha
    where F is the Binomial(N, 1/2) CDF.

    Args:
        loglik1: Per-observation log-likelihoods of model 1
        loglik2: Per-observation log-likelihoods of model 2
        alpha: Significance level
        p1: Number of parameters of model 1
        p2: Number of parameters of model 2
        correction: None, Akaike or Schwarz

    Returns:
        PairwiseTestResult with B as statistic

    Note:
        The p-value is not clipped; for B close to N/2 it can exceed 1.
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")

    m = corrected_differences(loglik1, loglik2, p1, p2, correction)
    kurt = kurtosis(_raw_differences(loglik1, loglik2))
    n = m.size
    b = int(np.count_nonzero(m > 0))

    decision = Decision.NONE
    if b >= n / 2:
        p_value = float(2.0 * binom.sf(b - 1, n, 0.5))
        if p_value <= alpha:
            decision = Decision.FAVOR_FIRST
    else:
        p_value = float(2.0 * binom.cdf(b, n, 0.5))
        if p_value <= alpha:
            decision = Decision.FAVOR_SECOND

    return PairwiseTestResult(
        test="clarke",
        decision=decision,
        statistic=float(b),
        p_value=p_value,
        kurtosis=kurt,
    )
