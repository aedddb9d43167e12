"""
copulagof.stats.methods.common.statistical
==========================================

Core statistical operations shared by the non-nested model-comparison tests.

Provides the parameter-count corrections applied to per-observation
log-likelihood differences and the two-sided normal critical value. These
functions are model-agnostic: they only see log-likelihood vectors and
parameter counts.
"""

from __future__ import annotations
import math
from enum import Enum
from typing import Union

import numpy as np
from scipy.stats import norm


class Correction(str, Enum):
    """Penalty for the number of parameters in a log-likelihood comparison.

    - NONE: raw differences
    - AKAIKE: subtract (p1 - p2) / N
    - SCHWARZ: subtract (p1 - p2) * ln(N) / (2N)
    """

    NONE = "none"
    AKAIKE = "Akaike"
    SCHWARZ = "Schwarz"

    def __str__(self) -> str:
        return self.value


CorrectionLike = Union[Correction, str, bool, None]


def parse_correction(correction: CorrectionLike) -> Correction:
    """
    Normalise user input to a `Correction`.

    ``False``, ``None`` and ``"none"`` mean no correction; names are matched
    case-insensitively.

    Examples:
        >>> parse_correction(False)
        <Correction.NONE: 'none'>
        >>> parse_correction("schwarz")
        <Correction.SCHWARZ: 'Schwarz'>
    """
    if isinstance(correction, Correction):
        return correction
    if correction is None or correction is False:
        return Correction.NONE
    if isinstance(correction, str):
        for member in Correction:
            if member.value.lower() == correction.strip().lower():
                return member
    raise ValueError(
        f"correction must be False, 'Akaike' or 'Schwarz', got {correction!r}"
    )


def correction_term(p1: int, p2: int, n: int, correction: Correction) -> float:
    """Per-observation penalty subtracted from the log-likelihood difference."""
    if correction is Correction.NONE:
        return 0.0
    if correction is Correction.AKAIKE:
        return (p1 - p2) / n
    if correction is Correction.SCHWARZ:
        return (p1 - p2) * math.log(n) / (2 * n)
    raise ValueError(f"Unknown correction: {correction}")


def corrected_differences(
    loglik1: np.ndarray,
    loglik2: np.ndarray,
    p1: int,
    p2: int,
    correction: CorrectionLike = Correction.NONE,
) -> np.ndarray:
    """
    Per-observation log-likelihood differences with parameter correction.

    Args:
        loglik1: Log-likelihoods of model 1, one per observation
        loglik2: Log-likelihoods of model 2, index-aligned with `loglik1`
        p1: Number of parameters of model 1
        p2: Number of parameters of model 2
        correction: Penalty applied to every difference

    Returns:
        Vector ``m`` with ``m_i = loglik1_i - loglik2_i - penalty``

    Examples:
        >>> corrected_differences(np.array([1.0, 2.0]), np.array([0.0, 0.0]), 2, 1, "Akaike")
        array([0.5, 1.5])
    """
    l1 = np.asarray(loglik1, dtype=np.float64)
    l2 = np.asarray(loglik2, dtype=np.float64)
    if l1.shape != l2.shape or l1.ndim != 1:
        raise ValueError(
            f"log-likelihood vectors must be 1-d and aligned, got {l1.shape} and {l2.shape}"
        )
    n = l1.size
    if n == 0:
        raise ValueError("log-likelihood vectors must not be empty")
    return l1 - l2 - correction_term(p1, p2, n, parse_correction(correction))


def normal_critical_value(alpha: float, *, two_sided: bool = True) -> float:
    """
    Critical value of the standard normal for significance level `alpha`.

    Examples:
        >>> round(normal_critical_value(0.05), 4)
        1.96
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")
    q = 1.0 - alpha / 2.0 if two_sided else 1.0 - alpha
    return float(norm.ppf(q))
