from __future__ import annotations

from typing import Sequence

import numpy as np
import pytest
from scipy.stats import multivariate_normal, norm, rankdata

from copulagof.backends.polars.ledger import PolarsLedger
from copulagof.stats.methods.independence.core import empirical_tau
from copulagof.stats.schemes.copula_selection.core import CopulaSample, prepare_sample
from copulagof.stats.schemes.copula_selection.evaluator import FamilyRegistry


class GaussianCopula:
    """Gaussian copula, parameter from Kendall's tau inversion."""

    def fit(self, u1: np.ndarray, u2: np.ndarray) -> Sequence[float]:
        return (float(np.sin(np.pi / 2 * empirical_tau(u1, u2))),)

    def loglik(
        self, u1: np.ndarray, u2: np.ndarray, params: Sequence[float]
    ) -> np.ndarray:
        rho = params[0]
        x, y = norm.ppf(u1), norm.ppf(u2)
        return -0.5 * np.log(1 - rho**2) - (
            rho**2 * (x**2 + y**2) - 2 * rho * x * y
        ) / (2 * (1 - rho**2))


class ClaytonCopula:
    """Clayton copula (positive dependence only)."""

    def fit(self, u1: np.ndarray, u2: np.ndarray) -> Sequence[float]:
        tau = max(empirical_tau(u1, u2), 1e-4)
        return (2 * tau / (1 - tau),)

    def loglik(
        self, u1: np.ndarray, u2: np.ndarray, params: Sequence[float]
    ) -> np.ndarray:
        theta = params[0]
        return (
            np.log1p(theta)
            - (1 + theta) * (np.log(u1) + np.log(u2))
            - (2 + 1 / theta) * np.log(u1 ** (-theta) + u2 ** (-theta) - 1)
        )


class FixedLoglikFamily:
    """Returns a predetermined log-likelihood vector regardless of the data."""

    def __init__(self, values: np.ndarray, params: Sequence[float] = (0.5,)) -> None:
        self.values = np.asarray(values, dtype=np.float64)
        self.params = tuple(params)
        self.fit_calls = 0

    def fit(self, u1: np.ndarray, u2: np.ndarray) -> Sequence[float]:
        self.fit_calls += 1
        return self.params

    def loglik(
        self, u1: np.ndarray, u2: np.ndarray, params: Sequence[float]
    ) -> np.ndarray:
        return self.values.copy()


class FailingFamily:
    """Fitting always raises."""

    def fit(self, u1: np.ndarray, u2: np.ndarray) -> Sequence[float]:
        raise ArithmeticError("optimizer diverged")

    def loglik(
        self, u1: np.ndarray, u2: np.ndarray, params: Sequence[float]
    ) -> np.ndarray:
        raise AssertionError("not reached")


N_OBS = 200


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20240517)


@pytest.fixture
def gaussian_data(rng: np.random.Generator):
    """Pseudo-observations of a Gaussian copula with rho = 0.7."""
    z = multivariate_normal(mean=[0, 0], cov=[[1, 0.7], [0.7, 1]]).rvs(
        size=N_OBS, random_state=rng
    )
    u1 = rankdata(z[:, 0]) / (N_OBS + 1)
    u2 = rankdata(z[:, 1]) / (N_OBS + 1)
    return u1, u2


@pytest.fixture
def sample(gaussian_data) -> CopulaSample:
    return prepare_sample(*gaussian_data)


@pytest.fixture
def ranked_logliks(rng: np.random.Generator):
    """Log-likelihood vectors of a clearly good, a middling and a clearly bad family."""
    good = 1.0 + rng.normal(scale=0.5, size=N_OBS)
    middle = rng.normal(scale=0.5, size=N_OBS)
    bad = -1.0 + rng.normal(scale=0.5, size=N_OBS)
    return good, middle, bad


@pytest.fixture
def ranked_registry(ranked_logliks) -> FamilyRegistry:
    """Codes 1 (good), 3 (middle), 5 (bad); all one-parameter families."""
    good, middle, bad = ranked_logliks
    return (
        FamilyRegistry()
        .register(1, FixedLoglikFamily(good))
        .register(3, FixedLoglikFamily(middle))
        .register(5, FixedLoglikFamily(bad))
    )


@pytest.fixture
def copula_registry() -> FamilyRegistry:
    return (
        FamilyRegistry.with_defaults()
        .register(1, GaussianCopula())
        .register(3, ClaytonCopula())
    )


@pytest.fixture
def ledger() -> PolarsLedger:
    return PolarsLedger()


@pytest.fixture
def fixed_family():
    """Factory for families with a predetermined log-likelihood vector."""
    return FixedLoglikFamily


@pytest.fixture
def failing_family() -> FailingFamily:
    return FailingFamily()
