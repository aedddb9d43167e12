"""
copulagof.stats.schemes.copula_selection.evaluator
==================================================

Bridge between family codes and caller-supplied copula implementations.

A `CopulaFamily` offers two operations: `fit` estimates parameters from the
data, `loglik` returns one log-density value per observation. Families are
looked up by code in a `FamilyRegistry`; the `ModelEvaluator` runs fit and
log-likelihood evaluation for one (sample, family) pair and normalises the
output:

- the vector is coerced to float64 of length N;
- any non-finite value is replaced by `LOGLIK_SENTINEL` (1e10) so that the
  downstream variance and kurtosis stay finite;
- any exception raised by the family is re-raised as `FamilyEvaluationError`.

Examples
--------
>>> import numpy as np
>>> from copulagof.stats.schemes.copula_selection.core import prepare_sample
>>> registry = FamilyRegistry.with_defaults()
>>> evaluator = ModelEvaluator(registry)
>>> sample = prepare_sample([0.2, 0.4, 0.6], [0.3, 0.5, 0.7])
>>> evaluator.loglik(sample, 0)
array([0., 0., 0.])
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Protocol, Sequence, Tuple

import numpy as np

from copulagof.stats.schemes.copula_selection.core import CopulaSample
from copulagof.stats.schemes.copula_selection.families import n_params

logger = logging.getLogger(__name__)

LOGLIK_SENTINEL = 1e10


class FamilyEvaluationError(RuntimeError):
    """A family could not be fitted or evaluated on a sample."""

    def __init__(self, family: int, message: str) -> None:
        super().__init__(f"family {family}: {message}")
        self.family = family


class CopulaFamily(Protocol):
    """Capability of one bivariate copula family."""

    def fit(self, u1: np.ndarray, u2: np.ndarray) -> Sequence[float]:
        """Estimate the family's parameters from the data."""
        ...

    def loglik(
        self, u1: np.ndarray, u2: np.ndarray, params: Sequence[float]
    ) -> np.ndarray:
        """Per-observation log-density under the fitted parameters."""
        ...


class IndependenceCopula:
    """The independence copula (code 0): density 1, no parameters."""

    def fit(self, u1: np.ndarray, u2: np.ndarray) -> Sequence[float]:
        return ()

    def loglik(
        self, u1: np.ndarray, u2: np.ndarray, params: Sequence[float]
    ) -> np.ndarray:
        return np.zeros(len(u1), dtype=np.float64)


class FamilyRegistry:
    """Lookup table from family code to `CopulaFamily` implementation."""

    def __init__(self, families: Optional[Dict[int, CopulaFamily]] = None) -> None:
        self._families: Dict[int, CopulaFamily] = dict(families or {})

    @classmethod
    def with_defaults(cls) -> "FamilyRegistry":
        """Registry pre-populated with the families shipped by the package."""
        return cls({0: IndependenceCopula()})

    def register(self, code: int, family: CopulaFamily) -> "FamilyRegistry":
        """Register (or replace) the implementation for a family code."""
        self._families[int(code)] = family
        return self

    def get(self, code: int) -> CopulaFamily:
        try:
            return self._families[int(code)]
        except KeyError:
            raise FamilyEvaluationError(code, "no implementation registered") from None

    def __contains__(self, code: object) -> bool:
        return code in self._families

    def codes(self) -> Tuple[int, ...]:
        return tuple(self._families)

    def missing(self, familyset: Iterable[int]) -> Tuple[int, ...]:
        """Codes of `familyset` without a registered implementation."""
        return tuple(c for c in familyset if c not in self._families)


@dataclass(frozen=True)
class FamilyFit:
    """A fitted family with its per-observation log-likelihoods."""

    family: int
    params: Tuple[float, ...]
    loglik: np.ndarray = field(repr=False)
    n_clamped: int = 0

    @property
    def n_params(self) -> int:
        return n_params(self.family)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "family": self.family,
            "params": list(self.params),
            "n_params": self.n_params,
            "loglik_sum": float(self.loglik.sum()),
            "n_clamped": self.n_clamped,
        }


class ModelEvaluator:
    """Fits families and evaluates their log-likelihoods on a sample."""

    def __init__(self, registry: FamilyRegistry) -> None:
        self.registry = registry

    def evaluate(self, sample: CopulaSample, family: int) -> FamilyFit:
        """
        Fit `family` to `sample` and evaluate per-observation log-likelihoods.

        Raises:
            FamilyEvaluationError: if the family is unknown to the registry,
                fitting or evaluation raises, or the output has the wrong shape
        """
        impl = self.registry.get(family)
        try:
            params = tuple(float(p) for p in impl.fit(sample.u1, sample.u2))
            values = impl.loglik(sample.u1, sample.u2, params)
        except FamilyEvaluationError:
            raise
        except Exception as exc:
            raise FamilyEvaluationError(family, f"{type(exc).__name__}: {exc}") from exc

        ll = np.array(values, dtype=np.float64).reshape(-1)
        if ll.size != sample.n_obs:
            raise FamilyEvaluationError(
                family,
                f"log-likelihood has {ll.size} values for {sample.n_obs} observations",
            )

        bad = ~np.isfinite(ll)
        n_bad = int(bad.sum())
        if n_bad:
            logger.debug(
                "Family %s: %d non-finite log-likelihood values set to %g",
                family,
                n_bad,
                LOGLIK_SENTINEL,
            )
            ll[bad] = LOGLIK_SENTINEL

        return FamilyFit(family=family, params=params, loglik=ll, n_clamped=n_bad)

    def loglik(self, sample: CopulaSample, family: int) -> np.ndarray:
        """Per-observation log-likelihoods of `family` fitted to `sample`."""
        return self.evaluate(sample, family).loglik

    def n_params(self, family: int) -> int:
        return n_params(family)
