"""
copulagof.stats.schemes.copula_selection.statistics
===================================================

Ledger components for copula family selection.

- `PairwiseRecorder` (Statistic): writes the reference fit and every
  pairwise Vuong/Clarke result of one reference family
- `NormalCriticalValue` (Criteria): writes the two-sided normal critical
  value z = Phi^-1(1 - alpha/2) used by the Vuong decision rule
- `ScoreSignaler` (Signaler): reads the pairwise results of one reference
  back from the ledger and emits its Vuong and Clarke scores

Events produced (namespace / kind / tag):
    - stats / fit / stat:fit                 reference parameters
    - stats / fit_failed / stat:fit          reference could not be evaluated
    - stats / pairwise / stat:vuong|clarke   a test that was run
    - stats / skipped / stat:vuong|clarke    self-pair or failed candidate
    - criteria / critical / crit:normal      critical value of the design
    - signals / emitted / gof:score          one score per reference and test

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.core.names import Namespace
>>> L = PolarsLedger()
>>> NormalCriticalValue(alpha=0.05).step(L, "gof#1", "design", "t0")
>>> round(L.latest(namespace=Namespace.CRITERIA).payload["z"], 4)
1.96
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from copulagof.core.components import Criteria, Signaler, Statistic
from copulagof.core.ledger import PayloadRegistry
from copulagof.core.names import Namespace, RunId, StepKey, TimeIndex
from copulagof.core.traits import LedgerOps
from copulagof.stats.common.tags import (
    CLARKE_TAG,
    CRITICAL_PAYLOAD,
    DESIGN_PAYLOAD,
    FIT_PAYLOAD,
    FIT_TAG,
    NORMAL_CRITICAL_TAG,
    PAIRWISE_PAYLOAD,
    SCORE_TAG,
    SCORE_TOPIC,
    TEST_TAGS,
    VUONG_TAG,
)
from copulagof.stats.methods.common.statistical import (
    Correction,
    normal_critical_value,
)
from copulagof.stats.methods.nonnested.core import PairwiseTestResult
from copulagof.stats.schemes.copula_selection.allpairs import ReferenceComparison
from copulagof.stats.schemes.copula_selection.core import GofDesign
from copulagof.stats.schemes.copula_selection.families import n_params
from copulagof.stats.schemes.copula_selection.score import aggregate_score

logger = logging.getLogger(__name__)


# --- Payloads ---


@dataclass(frozen=True)
class PairwiseRecord:
    """One pairwise test as stored in the ledger."""

    reference: int
    candidate: int
    p1: int
    p2: int
    correction: str
    result: PairwiseTestResult
    reason: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "reference": self.reference,
            "candidate": self.candidate,
            "p1": self.p1,
            "p2": self.p2,
            "correction": self.correction,
            "reason": self.reason,
        }
        payload.update(self.result.to_payload())
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PairwiseRecord":
        return cls(
            reference=int(payload["reference"]),
            candidate=int(payload["candidate"]),
            p1=int(payload["p1"]),
            p2=int(payload["p2"]),
            correction=str(payload["correction"]),
            result=PairwiseTestResult.from_payload(payload),
            reason=payload.get("reason"),
        )


PayloadRegistry.register(PAIRWISE_PAYLOAD, PairwiseRecord.from_payload)
PayloadRegistry.register(DESIGN_PAYLOAD, GofDesign.from_payload)


# --- Components ---


@dataclass(kw_only=True)
class PairwiseRecorder(Statistic):
    """
    Write the results of one reference family to the ledger.

    Comparisons are computed outside the ledger (possibly on worker threads)
    and staged with `stage()`; `step()` then writes the staged comparison
    for its step key.

    Attributes:
        correction: Correction the comparisons were run with
        tag_stats: Tag of the fit events
    """

    correction: Correction = Correction.NONE
    tag_stats: str = FIT_TAG
    _pending: Dict[str, ReferenceComparison] = field(
        default_factory=dict, repr=False
    )

    def stage(
        self, step_key: Union[StepKey, str], comparison: ReferenceComparison
    ) -> None:
        self._pending[str(step_key)] = comparison

    def step(
        self,
        ledger: LedgerOps,
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        """Write the staged comparison for `step_key`."""
        comparison = self._pending.pop(str(step_key), None)
        if comparison is None:
            raise RuntimeError(f"No comparison staged for step {step_key!r}")
        self.record(ledger, run_id, step_key, time_index, comparison)

    def record(
        self,
        ledger: LedgerOps,
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
        comparison: ReferenceComparison,
    ) -> None:
        ref = comparison.reference
        if comparison.fit is not None:
            ledger.write_event(
                time_index=time_index,
                namespace=self.ns_stats,
                kind="fit",
                run_id=run_id,
                step_key=step_key,
                payload_type=FIT_PAYLOAD,
                payload=comparison.fit.to_payload(),
                tag=self.tag_stats,
            )
        else:
            ledger.write_event(
                time_index=time_index,
                namespace=self.ns_stats,
                kind="fit_failed",
                run_id=run_id,
                step_key=step_key,
                payload_type=FIT_PAYLOAD,
                payload={"family": ref, "error": comparison.errors.get(ref)},
                tag=self.tag_stats,
            )

        p1 = n_params(ref)
        for i, cand in enumerate(comparison.candidates):
            if cand == ref:
                reason: Optional[str] = "self"
            elif comparison.fit is None:
                reason = "reference_failed"
            elif cand in comparison.errors:
                reason = "candidate_failed"
            else:
                reason = None
            for test in ("vuong", "clarke"):
                record = PairwiseRecord(
                    reference=ref,
                    candidate=cand,
                    p1=p1,
                    p2=comparison.n_params[cand],
                    correction=self.correction.value,
                    result=comparison.results(test)[i],
                    reason=reason,
                )
                ledger.write_event(
                    time_index=time_index,
                    namespace=self.ns_stats,
                    kind="skipped" if reason else "pairwise",
                    run_id=run_id,
                    step_key=step_key,
                    payload_type=PAIRWISE_PAYLOAD,
                    payload=record.to_payload(),
                    tag=TEST_TAGS[test],
                )


@dataclass(kw_only=True)
class NormalCriticalValue(Criteria):
    """
    Two-sided standard normal critical value of the design.

    Attributes:
        alpha: Significance level
        tag_crit: Tag of the criteria event
    """

    alpha: float
    tag_crit: str = NORMAL_CRITICAL_TAG

    def step(
        self,
        ledger: LedgerOps,
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        z = normal_critical_value(self.alpha)
        ledger.write_event(
            time_index=time_index,
            namespace=self.ns_crit,
            kind="critical",
            run_id=run_id,
            step_key=step_key,
            payload_type=CRITICAL_PAYLOAD,
            payload={"alpha": self.alpha, "z": z, "two_sided": True},
            tag=self.tag_crit,
        )


@dataclass(kw_only=True)
class ScoreSignaler(Signaler):
    """
    Emit the Vuong and Clarke scores of one reference family.

    Reads every pairwise record of the step back from the ledger and reduces
    each test's decisions with `aggregate_score`.

    Attributes:
        tag_sig: Tag of the emitted signals
    """

    tag_sig: str = SCORE_TAG

    def step(
        self,
        ledger: LedgerOps,
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        for test, tag in (("vuong", VUONG_TAG), ("clarke", CLARKE_TAG)):
            records: List[PairwiseRecord] = [
                row.payload
                for row in ledger.iter_ns(
                    namespace=Namespace.STATS,
                    run_id=run_id,
                    step_key=step_key,
                    tag=tag,
                )
            ]
            if not records:
                logger.warning(
                    "No %s results recorded for run %s step %s", test, run_id, step_key
                )
                continue

            score = aggregate_score(r.result.decision for r in records)
            ledger.emit(
                time_index=time_index,
                run_id=run_id,
                step_key=step_key,
                topic=SCORE_TOPIC,
                body={
                    "reference": records[0].reference,
                    "test": test,
                    "score": score,
                },
                tag=self.tag_sig,
                namespace=self.ns_sig,
            )
