"""Tests for the Polars ledger, payload decoding and ledger components."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest
from scipy.stats import norm

from copulagof.backends.polars.ledger import PolarsLedger
from copulagof.core.ledger import PayloadRegistry
from copulagof.core.names import Namespace
from copulagof.stats.schemes.copula_selection.allpairs import compare_reference
from copulagof.stats.schemes.copula_selection.evaluator import ModelEvaluator
from copulagof.stats.schemes.copula_selection.statistics import (
    NormalCriticalValue,
    PairwiseRecord,
    PairwiseRecorder,
    ScoreSignaler,
)


def _write(ledger: PolarsLedger, kind: str, step_key: str = "ref-1", **kw) -> None:
    ledger.write_event(
        time_index=kw.pop("time_index", "t1"),
        namespace=kw.pop("namespace", Namespace.STATS),
        kind=kind,
        run_id=kw.pop("run_id", "gof#1"),
        step_key=step_key,
        payload_type=kw.pop("payload_type", "Raw"),
        payload=kw.pop("payload", {"kind": kind}),
        **kw,
    )


class TestPolarsLedger:
    """Tests for PolarsLedger."""

    def test_starts_empty(self, ledger) -> None:
        assert len(ledger) == 0
        assert ledger.latest(namespace=Namespace.STATS) is None

    def test_rows_keep_append_order(self, ledger) -> None:
        for kind in ("a", "b", "c"):
            _write(ledger, kind)
        rows = list(ledger.iter_ns(namespace=Namespace.STATS))
        assert [r.kind for r in rows] == ["a", "b", "c"]
        assert ledger.latest(namespace=Namespace.STATS).kind == "c"

    def test_filters(self, ledger) -> None:
        _write(ledger, "fit", step_key="ref-1", tag="stat:fit")
        _write(ledger, "pairwise", step_key="ref-1", tag="stat:vuong")
        _write(ledger, "pairwise", step_key="ref-3", tag="stat:vuong")
        _write(ledger, "pairwise", step_key="ref-3", run_id="other")
        reader = ledger.reader()
        assert reader.count(namespace="stats") == 4
        assert reader.count(kind="pairwise", entity="gof#1") == 2
        assert reader.count(snapshot_id="ref-3") == 2
        assert reader.count(tag="stat:vuong") == 2
        rows = list(ledger.iter_ns(namespace="stats", run_id="gof#1", step_key="ref-3"))
        assert len(rows) == 1

    def test_naive_timestamps_are_utc(self, ledger) -> None:
        _write(ledger, "fit", ts=datetime(2024, 1, 1, 12, 0))
        row = ledger.latest(namespace=Namespace.STATS)
        assert row.ts.utcoffset() == timedelta(0)
        assert row.ts.hour == 12

    def test_aware_timestamps_are_converted(self, ledger) -> None:
        plus_two = timezone(timedelta(hours=2))
        _write(ledger, "fit", ts=datetime(2024, 1, 1, 12, 0, tzinfo=plus_two))
        assert ledger.latest(namespace=Namespace.STATS).ts.hour == 10

    def test_emit_wraps_topic_and_body(self, ledger) -> None:
        ledger.emit(
            time_index="t1",
            run_id="gof#1",
            step_key="ref-1",
            topic="gof_score",
            body={"score": 2},
            tag="gof:score",
        )
        row = ledger.latest(namespace=Namespace.SIGNALS)
        assert row.kind == "emitted"
        assert row.payload_type == "Signal"
        assert row.payload == {"topic": "gof_score", "body": {"score": 2}}

    def test_frame_is_a_snapshot(self, ledger) -> None:
        _write(ledger, "fit")
        snapshot = ledger.frame()
        _write(ledger, "fit")
        assert snapshot.height == 1
        assert len(ledger) == 2


class TestPayloadRegistry:
    """Tests for PayloadRegistry."""

    def test_unknown_payload_stays_a_dict(self, ledger) -> None:
        _write(ledger, "fit", payload_type="NotRegistered", payload={"x": 1})
        assert ledger.latest(namespace=Namespace.STATS).payload == {"x": 1}

    def test_registered_decoder_is_applied(self, ledger) -> None:
        PayloadRegistry.register("TestPoint", lambda d: (d["x"], d["y"]))
        _write(ledger, "fit", payload_type="TestPoint", payload={"x": 1, "y": 2})
        assert ledger.latest(namespace=Namespace.STATS).payload == (1, 2)


class TestComponents:
    """Tests for the selection ledger components."""

    def test_critical_value_event(self, ledger) -> None:
        NormalCriticalValue(alpha=0.1).step(ledger, "gof#1", "design", "t0")
        row = ledger.latest(namespace=Namespace.CRITERIA)
        assert row.kind == "critical"
        assert row.tag == "crit:normal"
        assert row.payload["alpha"] == 0.1
        assert row.payload["z"] == pytest.approx(norm.ppf(0.95))

    def test_recorder_requires_staged_comparison(self, ledger) -> None:
        with pytest.raises(RuntimeError, match="No comparison staged"):
            PairwiseRecorder().step(ledger, "gof#1", "ref-1", "t1")

    def test_recorder_writes_fit_and_results(self, ledger, sample, ranked_registry) -> None:
        cmp = compare_reference(sample, 3, (1, 3, 5), ModelEvaluator(ranked_registry))
        recorder = PairwiseRecorder()
        recorder.stage("ref-3", cmp)
        recorder.step(ledger, "gof#1", "ref-3", "t2")
        reader = ledger.reader()
        assert reader.count(kind="fit") == 1
        assert reader.count(kind="pairwise") == 4
        assert reader.count(kind="skipped") == 2
        skipped = ledger.latest(namespace=Namespace.STATS, kind="skipped").payload
        assert isinstance(skipped, PairwiseRecord)
        assert skipped.reason == "self"
        assert skipped.result.is_absent

    def test_recorder_marks_failed_reference(
        self, ledger, sample, ranked_registry, failing_family
    ) -> None:
        ranked_registry.register(4, failing_family)
        cmp = compare_reference(sample, 4, (1, 4), ModelEvaluator(ranked_registry))
        recorder = PairwiseRecorder()
        recorder.stage("ref-4", cmp)
        recorder.step(ledger, "gof#1", "ref-4", "t1")
        failed = ledger.latest(namespace=Namespace.STATS, kind="fit_failed")
        assert failed.payload["family"] == 4
        assert "optimizer diverged" in failed.payload["error"]
        reasons = {
            r.payload.reason
            for r in ledger.iter_ns(namespace=Namespace.STATS, kind="skipped")
        }
        assert reasons == {"self", "reference_failed"}

    def test_signaler_emits_both_scores(self, ledger, sample, ranked_registry) -> None:
        cmp = compare_reference(sample, 1, (1, 3, 5), ModelEvaluator(ranked_registry))
        recorder = PairwiseRecorder()
        recorder.stage("ref-1", cmp)
        recorder.step(ledger, "gof#1", "ref-1", "t1")
        ScoreSignaler().step(ledger, "gof#1", "ref-1", "t1")
        bodies = [
            r.payload["body"]
            for r in ledger.iter_ns(namespace=Namespace.SIGNALS, tag="gof:score")
        ]
        assert bodies == [
            {"reference": 1, "test": "vuong", "score": 2},
            {"reference": 1, "test": "clarke", "score": 2},
        ]

    def test_signaler_without_records_warns(self, ledger, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            ScoreSignaler().step(ledger, "gof#1", "ref-1", "t1")
        assert ledger.reader().count(namespace="signals") == 0
        assert "No vuong results" in caplog.text
