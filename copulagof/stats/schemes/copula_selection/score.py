"""
copulagof.stats.schemes.copula_selection.score
==============================================

Reduction of pairwise decisions into goodness-of-fit scores.

A family's score for one test is the number of comparisons it won (decision
FAVOR_FIRST as reference) minus the number it lost (FAVOR_SECOND). NONE and
absent comparisons count for neither side. With K families every score lies
in [-(K-1), K-1].

Examples
--------
>>> from copulagof.stats.methods.nonnested.core import Decision
>>> aggregate_score([Decision.FAVOR_FIRST, None, Decision.NONE, Decision.FAVOR_FIRST])
2
>>> aggregate_score([None, None]) is None
True
>>> m = ScoreMatrix((1, 3))
>>> m.set(3, "vuong", -1); m.set(3, "clarke", 0)
>>> m.score(3, "vuong"), m.score(1, "vuong")
(-1, None)
"""

from __future__ import annotations
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from copulagof.stats.methods.nonnested.core import Decision

ROW_LABELS: Tuple[str, str] = ("Vuong", "Clarke")
_ROW_OF: Dict[str, int] = {"vuong": 0, "clarke": 1}


def aggregate_score(decisions: Iterable[Optional[Decision]]) -> Optional[int]:
    """
    Wins minus losses over a collection of decisions.

    Args:
        decisions: One entry per candidate; None marks an absent comparison

    Returns:
        #FAVOR_FIRST - #FAVOR_SECOND, or None when every entry is absent
    """
    wins = losses = 0
    present = False
    for d in decisions:
        if d is None:
            continue
        present = True
        if d == Decision.FAVOR_FIRST:
            wins += 1
        elif d == Decision.FAVOR_SECOND:
            losses += 1
    return wins - losses if present else None


class ScoreMatrix:
    """
    2 x K matrix of scores, rows Vuong and Clarke, one column per family.

    Storage is allocated once from the family set; cells are written by
    index. Cells never written (or written as None) are undefined.
    """

    def __init__(self, families: Sequence[int]) -> None:
        self.families: Tuple[int, ...] = tuple(int(f) for f in families)
        self._col: Dict[int, int] = {f: i for i, f in enumerate(self.families)}
        if len(self._col) != len(self.families):
            raise ValueError(f"Duplicate family codes: {self.families}")
        self._values = np.zeros((2, len(self.families)), dtype=np.int64)
        self._defined = np.zeros((2, len(self.families)), dtype=bool)

    @property
    def shape(self) -> Tuple[int, int]:
        return (2, len(self.families))

    def _index(self, family: int, test: str) -> Tuple[int, int]:
        try:
            return _ROW_OF[test.lower()], self._col[int(family)]
        except KeyError:
            raise KeyError(f"No cell for family {family!r} and test {test!r}") from None

    def set(self, family: int, test: str, score: Optional[int]) -> None:
        row, col = self._index(family, test)
        if score is None:
            self._defined[row, col] = False
            self._values[row, col] = 0
        else:
            self._values[row, col] = int(score)
            self._defined[row, col] = True

    def score(self, family: int, test: str) -> Optional[int]:
        row, col = self._index(family, test)
        return int(self._values[row, col]) if self._defined[row, col] else None

    def column(self, family: int) -> Tuple[Optional[int], Optional[int]]:
        return self.score(family, "vuong"), self.score(family, "clarke")

    def values(self) -> np.ndarray:
        """Float copy of the matrix with NaN for undefined cells."""
        out = self._values.astype(np.float64)
        out[~self._defined] = np.nan
        return out

    def to_frame(self) -> pd.DataFrame:
        """pandas view: rows Vuong/Clarke, columns the family codes, dtype Int64."""
        data = {
            f: pd.array(
                [self.score(f, "vuong"), self.score(f, "clarke")], dtype="Int64"
            )
            for f in self.families
        }
        return pd.DataFrame(data, index=list(ROW_LABELS))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScoreMatrix):
            return NotImplemented
        return (
            self.families == other.families
            and bool(np.array_equal(self._defined, other._defined))
            and bool(
                np.array_equal(
                    np.where(self._defined, self._values, 0),
                    np.where(other._defined, other._values, 0),
                )
            )
        )

    def __repr__(self) -> str:
        return f"ScoreMatrix(families={self.families}, values={self.values().tolist()})"
