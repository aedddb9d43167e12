"""
copulagof.stats.schemes.copula_selection.families
=================================================

Catalog metadata for bivariate copula families.

Families are identified by integer codes. This module only knows names,
parameter counts and rotation blocks; densities and fitting routines are
supplied by the caller (see `copulagof.stats.schemes.copula_selection.evaluator`).

Examples
--------
>>> n_params(2), n_params(3)
(2, 1)
>>> rotations_of(3)
(3, 13, 23, 33)
>>> with_rotations([1, 4])
(1, 4, 14, 24, 34)
"""

from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, Tuple

FAMILY_NAMES: Dict[int, str] = {
    0: "independence",
    1: "Gaussian",
    2: "Student t",
    3: "Clayton",
    4: "Gumbel",
    5: "Frank",
    6: "Joe",
    7: "BB1",
    8: "BB6",
    9: "BB7",
    10: "BB8",
    13: "rotated Clayton 180",
    14: "rotated Gumbel 180",
    16: "rotated Joe 180",
    17: "rotated BB1 180",
    18: "rotated BB6 180",
    19: "rotated BB7 180",
    20: "rotated BB8 180",
    23: "rotated Clayton 90",
    24: "rotated Gumbel 90",
    26: "rotated Joe 90",
    27: "rotated BB1 90",
    28: "rotated BB6 90",
    29: "rotated BB7 90",
    30: "rotated BB8 90",
    33: "rotated Clayton 270",
    34: "rotated Gumbel 270",
    36: "rotated Joe 270",
    37: "rotated BB1 270",
    38: "rotated BB6 270",
    39: "rotated BB7 270",
    40: "rotated BB8 270",
    104: "Tawn type 1",
    114: "rotated Tawn type 1 180",
    124: "rotated Tawn type 1 90",
    134: "rotated Tawn type 1 270",
    204: "Tawn type 2",
    214: "rotated Tawn type 2 180",
    224: "rotated Tawn type 2 90",
    234: "rotated Tawn type 2 270",
}

ALL_FAMILIES: Tuple[int, ...] = tuple(FAMILY_NAMES)

TWO_PARAMETER_FAMILIES: FrozenSet[int] = frozenset(
    [2, 7, 8, 9, 10, 17, 18, 19, 20, 27, 28, 29, 30, 37, 38, 39, 40]
    + [104, 114, 124, 134, 204, 214, 224, 234]
)

# Families able to model positive / negative Kendall's tau.
POSITIVE_TAU_FAMILIES: FrozenSet[int] = frozenset(
    [0, 1, 2, 5, 3, 4, 6, 7, 8, 9, 10, 13, 14, 16, 17, 18, 19, 20, 104, 114, 204, 214]
)
NEGATIVE_TAU_FAMILIES: FrozenSet[int] = frozenset(
    [0, 1, 2, 5, 23, 24, 26, 27, 28, 29, 30, 33, 34, 36, 37, 38, 39, 40]
    + [124, 134, 224, 234]
)

# Rotation blocks: base, 180, 90, 270 degrees.
_ROTATION_BLOCKS: Tuple[Tuple[int, ...], ...] = (
    (3, 13, 23, 33),
    (4, 14, 24, 34),
    (6, 16, 26, 36),
    (7, 17, 27, 37),
    (8, 18, 28, 38),
    (9, 19, 29, 39),
    (10, 20, 30, 40),
    (104, 114, 124, 134),
    (204, 214, 224, 234),
)
_BLOCK_OF: Dict[int, Tuple[int, ...]] = {
    code: block for block in _ROTATION_BLOCKS for code in block
}


def is_supported(code: int) -> bool:
    return code in FAMILY_NAMES


def n_params(code: int) -> int:
    """Number of parameters of a family (1 or 2)."""
    return 2 if code in TWO_PARAMETER_FAMILIES else 1


def family_name(code: int) -> str:
    return FAMILY_NAMES.get(code, f"family {code}")


def rotations_of(code: int) -> Tuple[int, ...]:
    """All rotations of a family, keeping the sign of `code`.

    Families without rotated variants (0, 1, 2, 5) map to themselves.
    """
    sign = -1 if code < 0 else 1
    block = _BLOCK_OF.get(abs(code), (abs(code),))
    return tuple(sign * c for c in block)


def with_rotations(codes: Iterable[int]) -> Tuple[int, ...]:
    """Expand every code to its rotation block, dropping duplicates in order."""
    out: Dict[int, None] = {}
    for code in codes:
        for c in rotations_of(code):
            out.setdefault(c, None)
    return tuple(out)


def compatible_with_tau(code: int, tau: float) -> bool:
    """Whether a family can represent dependence with the sign of `tau`."""
    if tau > 0:
        return code in POSITIVE_TAU_FAMILIES
    if tau < 0:
        return code in NEGATIVE_TAU_FAMILIES
    return True
