"""
copulagof.stats.common.descriptive
==================================

Descriptive statistics shared by the model-comparison tests.

Both helpers use the (N-1) sample-variance convention. A vector without
spread has no defined scale: `kurtosis` returns NaN instead of dividing by
zero, so a single degenerate comparison never aborts a whole run.
"""

from __future__ import annotations
import math
from typing import Sequence, Union

import numpy as np

ArrayLike = Union[Sequence[float], np.ndarray]


def sample_variance(x: ArrayLike) -> float:
    """Unbiased sample variance (denominator N-1); NaN for fewer than 2 values."""
    arr = np.asarray(x, dtype=np.float64)
    if arr.size < 2:
        return math.nan
    return float(np.var(arr, ddof=1))


def is_constant(x: ArrayLike) -> bool:
    """
    True when every value equals the first one.

    Decided on the values, not on the variance: ``np.var`` of a constant
    vector is not always exactly zero.

    Examples:
        >>> is_constant([0.3] * 10), is_constant([0.3, 0.30000001])
        (True, False)
    """
    arr = np.asarray(x, dtype=np.float64)
    return arr.size > 0 and bool(np.all(arr == arr.flat[0]))


def kurtosis(x: ArrayLike) -> float:
    """
    Sample kurtosis ratio of a residual-like vector.

    Computes ``sum((x - mean(x))**4 / var(x)**2) / count(x)`` after dropping
    NaN entries, with ``var`` the (N-1) sample variance.

    Args:
        x: Real-valued vector (e.g. log-likelihood differences)

    Returns:
        Kurtosis ratio, or NaN when the variance is zero or undefined

    Examples:
        >>> round(kurtosis([1.0, 2.0, 3.0, 4.0]), 4)
        0.9225
        >>> import math; math.isnan(kurtosis([2.0, 2.0, 2.0]))
        True
    """
    arr = np.asarray(x, dtype=np.float64)
    arr = arr[~np.isnan(arr)]
    var = sample_variance(arr)
    if is_constant(arr) or not var > 0.0:
        return math.nan
    centered = arr - arr.mean()
    return float(np.sum(centered**4 / var**2) / arr.size)
