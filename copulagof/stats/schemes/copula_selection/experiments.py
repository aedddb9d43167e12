"""
copulagof.stats.schemes.copula_selection.experiments
====================================================

Experiment template for Vuong/Clarke copula family selection.

`VuongClarkeExperiment` uses every family of the design as reference in turn:

1. the design and the critical value are recorded once (`setup`); a run id
   that already has events in the ledger is rejected, and a run is analyzed
   at most once, so every score counts each comparison once;
2. each reference is compared against the full family set
   (`compare_reference`); references are independent, so the runner's
   mapper may run them concurrently;
3. back on the calling thread, in family order, each comparison is written
   to the ledger and its scores are emitted;
4. the score matrix is extracted from the score signals.

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.stats.schemes.copula_selection.core import prepare_sample, GofDesign
>>> from copulagof.stats.schemes.copula_selection.evaluator import FamilyRegistry
>>> sample = prepare_sample([0.1, 0.4, 0.7], [0.2, 0.5, 0.6])
>>> exp = VuongClarkeExperiment("gof#1", sample, GofDesign(familyset=(0,)),
...                             FamilyRegistry.with_defaults())
>>> exp.setup(PolarsLedger())
>>> exp.analyze().score(0, "vuong") is None
True
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List

from copulagof.core.names import Namespace
from copulagof.core.traits import LedgerOps
from copulagof.runtime.experiment_template import ExperimentTemplate, Mapper
from copulagof.stats.common.tags import DESIGN_PAYLOAD, SCORE_TAG
from copulagof.stats.schemes.copula_selection.allpairs import (
    ReferenceComparison,
    compare_reference,
)
from copulagof.stats.schemes.copula_selection.core import CopulaSample, GofDesign
from copulagof.stats.schemes.copula_selection.evaluator import (
    FamilyRegistry,
    ModelEvaluator,
)
from copulagof.stats.schemes.copula_selection.score import ScoreMatrix
from copulagof.stats.schemes.copula_selection.statistics import (
    NormalCriticalValue,
    PairwiseRecorder,
    ScoreSignaler,
)

logger = logging.getLogger(__name__)


class VuongClarkeExperiment(ExperimentTemplate):
    """
    Score every family of a design by Vuong and Clarke comparisons.

    Attributes:
        experiment_id: Run identifier (ledger entity)
        sample: Validated data
        design: Validated options
        evaluator: Fits families and evaluates log-likelihoods
    """

    def __init__(
        self,
        experiment_id: str,
        sample: CopulaSample,
        design: GofDesign,
        registry: FamilyRegistry,
    ):
        super().__init__(experiment_id)
        self.sample = sample
        self.design = design
        self.evaluator = ModelEvaluator(registry)

        missing = registry.missing(design.familyset)
        if missing:
            logger.warning(
                "No implementation registered for families %s; "
                "their comparisons will be absent",
                list(missing),
            )

    @staticmethod
    def step_key(reference: int) -> str:
        return f"ref-{reference}"

    def configure_components(self) -> Dict[str, Any]:
        return {
            "criteria": NormalCriticalValue(alpha=self.design.level),
            "recorder": PairwiseRecorder(correction=self.design.correction),
            "signaler": ScoreSignaler(),
        }

    def register_design(self, ledger: LedgerOps) -> None:
        # Scores are read back per (run_id, step_key); a run id owns its events.
        if ledger.reader().count(entity=str(self.experiment_id)) > 0:
            raise ValueError(
                f"Run {self.experiment_id!r} already has events in the ledger; "
                "use a new run id or a new ledger"
            )
        ledger.write_event(
            time_index="t0",
            namespace=Namespace.OBS,
            kind="design",
            run_id=self.experiment_id,
            step_key="design",
            payload_type=DESIGN_PAYLOAD,
            payload=self.design.to_payload(),
        )
        self.components["criteria"].step(ledger, self.experiment_id, "design", "t0")

    def compare(self, reference: int) -> ReferenceComparison:
        """All-pairs comparison of one reference; touches no shared state."""
        return compare_reference(
            self.sample,
            reference,
            self.design.familyset,
            self.evaluator,
            correction=self.design.correction,
            level=self.design.level,
        )

    def analyze(self, mapper: Mapper = map) -> ScoreMatrix:
        """Compare every reference, record the results and return the scores."""
        ledger = self._require_setup()
        if ledger.reader().count(
            namespace=Namespace.STATS.value, entity=str(self.experiment_id)
        ):
            raise RuntimeError(
                f"Run {self.experiment_id!r} was already analyzed; "
                "read it with extract_results() or set up a new run"
            )
        families = self.design.familyset
        logger.info(
            "Comparing %d families on %d observations (correction=%s, level=%g)",
            len(families),
            self.sample.n_obs,
            self.design.correction.value,
            self.design.level,
        )

        comparisons: List[ReferenceComparison] = list(mapper(self.compare, families))

        recorder: PairwiseRecorder = self.components["recorder"]
        signaler: ScoreSignaler = self.components["signaler"]
        for i, comparison in enumerate(comparisons, start=1):
            step_key = self.step_key(comparison.reference)
            time_index = f"t{i}"
            recorder.stage(step_key, comparison)
            recorder.step(ledger, self.experiment_id, step_key, time_index)
            signaler.step(ledger, self.experiment_id, step_key, time_index)

        return self.extract_results(ledger)

    def extract_results(self, ledger: LedgerOps) -> ScoreMatrix:
        """Fill the score matrix from the score signals of this run."""
        matrix = ScoreMatrix(self.design.familyset)
        for row in ledger.iter_ns(
            namespace=Namespace.SIGNALS, run_id=self.experiment_id, tag=SCORE_TAG
        ):
            body = row.payload["body"]
            matrix.set(body["reference"], body["test"], body["score"])
        return matrix

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary.update(
            {
                "experiment_type": "copula_selection",
                "n_obs": self.sample.n_obs,
                "n_families": len(self.design.familyset),
                "correction": self.design.correction.value,
                "level": self.design.level,
            }
        )
        if self._is_setup and self.ledger is not None:
            summary["n_pairwise"] = self.ledger.reader().count(
                namespace=Namespace.STATS.value,
                entity=self.experiment_id,
                kind="pairwise",
            )
            summary["n_skipped"] = self.ledger.reader().count(
                namespace=Namespace.STATS.value,
                entity=self.experiment_id,
                kind="skipped",
            )
        return summary

