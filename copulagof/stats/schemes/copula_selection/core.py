"""
copulagof.stats.schemes.copula_selection.core
=============================================

Core data structures and argument validation for copula family selection.

Raw user input passes through explicit validation steps that return
immutable values consumed by the rest of the package:

- `prepare_sample(u1, u2)` -> `CopulaSample`
- `prepare_familyset(familyset, rotations, tau)` -> tuple of family codes
- `GofDesign` bundles the validated options of a selection run

Examples
--------
>>> import numpy as np
>>> sample = prepare_sample([0.1, 0.5, np.nan, 0.9], [0.2, 0.4, 0.3, 0.8])
>>> sample.n_obs
3
>>> prepare_familyset([3, 1], rotations=False, tau=0.4)
(3, 1)
>>> prepare_familyset([-3], rotations=True, tau=0.4)[:6]
(0, 1, 2, 4, 5, 6)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from copulagof.stats.methods.common.statistical import (
    Correction,
    CorrectionLike,
    parse_correction,
)
from copulagof.stats.methods.independence.core import empirical_tau
from copulagof.stats.schemes.copula_selection.families import (
    ALL_FAMILIES,
    compatible_with_tau,
    is_supported,
    with_rotations,
)

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray]
FamilySetLike = Optional[Union[int, Iterable[int]]]


# --- Data model ---


@dataclass(frozen=True)
class CopulaSample:
    """Validated bivariate sample on the unit square.

    Attributes:
        u1: First margin, float64, values in [0, 1]
        u2: Second margin, same length as `u1`
    """

    u1: np.ndarray
    u2: np.ndarray
    dropped: int = 0

    @property
    def n_obs(self) -> int:
        return int(self.u1.size)

    @property
    def tau(self) -> float:
        """Empirical Kendall's tau of the sample."""
        return empirical_tau(self.u1, self.u2)


@dataclass(frozen=True)
class GofDesign:
    """
    Design of a Vuong/Clarke goodness-of-fit run.

    Attributes:
        familyset: Family codes compared, in output column order
        correction: Parameter-count correction of both tests
        level: Significance level of both tests
        rotations: Whether rotated variants were expanded into `familyset`
        n_obs: Number of complete observations
    """

    familyset: Tuple[int, ...]
    correction: Correction = Correction.NONE
    level: float = 0.05
    rotations: bool = True
    n_obs: int = 0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate the design."""
        if not 0 < self.level < 1:
            raise ValueError(f"level must be in (0, 1), got {self.level}")
        if not isinstance(self.correction, Correction):
            raise ValueError(f"Unknown correction: {self.correction!r}")
        if len(self.familyset) == 0:
            raise ValueError("familyset must contain at least one family")
        if len(set(self.familyset)) != len(self.familyset):
            raise ValueError(f"familyset contains duplicates: {self.familyset}")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "familyset": list(self.familyset),
            "correction": self.correction.value,
            "level": self.level,
            "rotations": self.rotations,
            "n_obs": self.n_obs,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "GofDesign":
        return cls(
            familyset=tuple(int(c) for c in payload["familyset"]),
            correction=parse_correction(payload.get("correction")),
            level=float(payload["level"]),
            rotations=bool(payload.get("rotations", True)),
            n_obs=int(payload.get("n_obs", 0)),
        )


# --- Validation steps ---


def prepare_sample(u1: ArrayLike, u2: ArrayLike, *, min_obs: int = 2) -> CopulaSample:
    """
    Validate and clean a pair of copula data vectors.

    Rows with a missing value in either vector are dropped (with a warning).

    Args:
        u1: First data vector, values in [0, 1]
        u2: Second data vector, same length as `u1`
        min_obs: Minimum number of complete observations required

    Returns:
        CopulaSample with float64 arrays

    Raises:
        ValueError: if a vector is missing, the lengths differ, too few
            complete observations remain, or a value is outside [0, 1]
    """
    if u1 is None or u2 is None:
        raise ValueError("u1 and/or u2 are not set or have length zero.")
    a = np.asarray(u1, dtype=np.float64)
    b = np.asarray(u2, dtype=np.float64)
    if a.ndim != 1 or b.ndim != 1:
        raise ValueError("u1 and u2 must be one-dimensional.")
    if a.size == 0 or b.size == 0:
        raise ValueError("u1 and/or u2 are not set or have length zero.")
    if a.size != b.size:
        raise ValueError(f"Lengths of u1 ({a.size}) and u2 ({b.size}) do not match.")

    complete = ~(np.isnan(a) | np.isnan(b))
    dropped = int(a.size - complete.sum())
    if dropped:
        logger.warning(
            "In u1 or u2, %d of %d observations are missing. "
            "Only complete observations are used.",
            dropped,
            a.size,
        )
        a, b = a[complete], b[complete]

    if a.size < min_obs:
        raise ValueError(f"Number of observations has to be at least {min_obs}.")
    if np.any((a < 0) | (a > 1)) or np.any((b < 0) | (b > 1)):
        raise ValueError("Data has to be in the interval [0,1].")

    return CopulaSample(u1=a, u2=b, dropped=dropped)


def prepare_familyset(
    familyset: FamilySetLike = None,
    *,
    rotations: bool = True,
    tau: float = 0.0,
) -> Tuple[int, ...]:
    """
    Resolve the family codes a selection run compares.

    Args:
        familyset: Codes to compare; None means all supported families.
            Negative codes exclude families from the full set instead.
        rotations: Expand each code to all of its rotated variants
        tau: Empirical Kendall's tau; families unable to model its sign
            are removed

    Returns:
        Tuple of distinct family codes in input order

    Raises:
        ValueError: on unknown codes, mixed signs, or when no family
            compatible with the sign of `tau` remains
    """
    if familyset is None:
        codes: Tuple[int, ...] = ALL_FAMILIES
    elif isinstance(familyset, (int, np.integer)):
        codes = (int(familyset),)
    else:
        codes = tuple(int(c) for c in familyset)
    if not codes:
        raise ValueError("familyset must not be empty.")

    if rotations:
        codes = with_rotations(codes)

    unknown = [c for c in codes if not is_supported(abs(c))]
    if unknown:
        raise ValueError(f"Copula family not implemented: {unknown}")
    if not (all(c >= 0 for c in codes) or all(c <= 0 for c in codes)):
        raise ValueError("'familyset' must not contain positive AND negative numbers.")
    if any(c < 0 for c in codes):
        excluded = {-c for c in codes}
        codes = tuple(c for c in ALL_FAMILIES if c not in excluded)

    codes = tuple(dict.fromkeys(codes))
    compatible = tuple(c for c in codes if compatible_with_tau(c, tau))
    if not compatible:
        raise ValueError(
            "'familyset' has to include at least one bivariate copula family "
            f"that can model the sign of the empirical Kendall's tau ({tau:.3f})."
        )
    if len(compatible) < len(codes):
        logger.debug(
            "Dropped families incompatible with tau=%.3f: %s",
            tau,
            sorted(set(codes) - set(compatible)),
        )
    return compatible


def prepare_design(
    sample: CopulaSample,
    familyset: FamilySetLike = None,
    correction: CorrectionLike = False,
    level: float = 0.05,
    rotations: bool = True,
) -> GofDesign:
    """Validate all selection options against a prepared sample."""
    return GofDesign(
        familyset=prepare_familyset(familyset, rotations=rotations, tau=sample.tau),
        correction=parse_correction(correction),
        level=float(level),
        rotations=rotations,
        n_obs=sample.n_obs,
    )
