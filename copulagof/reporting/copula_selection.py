"""
copulagof.reporting.copula_selection
====================================

Copula-selection reporter: tidy tables of pairwise tests and scores
extracted from the JSON payload column of a `PolarsLedger`.

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.reporting.copula_selection import PairwiseReporter
>>> rep = PairwiseReporter.from_polars_ledger(PolarsLedger())
>>> rep.pairwise_table().height
0
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import polars as pl

from copulagof.core.names import Namespace
from copulagof.stats.common.tags import PAIRWISE_PAYLOAD, SCORE_TAG

if TYPE_CHECKING:
    from copulagof.backends.polars.ledger import PolarsLedger


def _json_field(name: str, dtype: pl.DataType) -> pl.Expr:
    return (
        pl.col("payload").str.json_path_match(f"$.{name}").cast(dtype).alias(name)
    )


def _score_of(test: str) -> pl.Expr:
    return pl.col("score").filter(pl.col("test") == test).first().alias(test)


@dataclass
class PairwiseReporter:
    """Pairwise-test and score views over a ledger frame."""

    df: pl.DataFrame

    @classmethod
    def from_polars_ledger(cls, ledger: "PolarsLedger") -> "PairwiseReporter":
        return cls(ledger.frame())

    def _run(self, frame: pl.DataFrame, run_id: Optional[str]) -> pl.DataFrame:
        if run_id is None:
            return frame
        return frame.filter(pl.col("entity") == run_id)

    def pairwise_table(
        self, run_id: Optional[str] = None, include_skipped: bool = False
    ) -> pl.DataFrame:
        """
        One row per recorded test with columns:
        run_id, reference, candidate, test, decision, statistic, p_value,
        kurtosis, p1, p2, correction, reason
        """
        kinds = ["pairwise", "skipped"] if include_skipped else ["pairwise"]
        rows = self._run(
            self.df.filter(
                (pl.col("namespace") == Namespace.STATS.value)
                & (pl.col("payload_type") == PAIRWISE_PAYLOAD)
                & pl.col("kind").is_in(kinds)
            ),
            run_id,
        )
        return rows.select(
            pl.col("entity").alias("run_id"),
            _json_field("reference", pl.Int64),
            _json_field("candidate", pl.Int64),
            _json_field("test", pl.Utf8),
            _json_field("decision", pl.Int64),
            _json_field("statistic", pl.Float64),
            _json_field("p_value", pl.Float64),
            _json_field("kurtosis", pl.Float64),
            _json_field("p1", pl.Int64),
            _json_field("p2", pl.Int64),
            _json_field("correction", pl.Utf8),
            _json_field("reason", pl.Utf8),
        )

    def score_table(self, run_id: Optional[str] = None) -> pl.DataFrame:
        """One row per reference family with columns: run_id, reference, vuong, clarke."""
        signals = self._run(
            self.df.filter(
                (pl.col("namespace") == Namespace.SIGNALS.value)
                & (pl.col("tag") == SCORE_TAG)
            ),
            run_id,
        ).select(
            pl.col("entity").alias("run_id"),
            _json_field("body.reference", pl.Int64).alias("reference"),
            _json_field("body.test", pl.Utf8).alias("test"),
            _json_field("body.score", pl.Int64).alias("score"),
        )
        return (
            signals.group_by(["run_id", "reference"], maintain_order=True)
            .agg(
                _score_of("vuong"),
                _score_of("clarke"),
            )
        )

    def decision_counts(self, run_id: Optional[str] = None) -> pl.DataFrame:
        """Counts of decisions per test (0 none, 1 first, 2 second)."""
        return (
            self.pairwise_table(run_id)
            .group_by(["test", "decision"])
            .agg(pl.len().alias("count"))
            .sort(["test", "decision"])
        )
