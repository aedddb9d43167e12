"""
copulagof.stats.schemes.copula_selection.allpairs
=================================================

One reference family against every candidate.

`compare_reference` evaluates the reference once, then for each candidate (in
order) either emits the absent sentinel (self-pair, or a candidate whose
evaluation failed) or runs both the Vuong and the Clarke test with the
parameter counts of the two families. Vuong and Clarke results are returned
index-aligned to the candidate list.

Examples
--------
>>> from copulagof.stats.schemes.copula_selection.core import prepare_sample
>>> from copulagof.stats.schemes.copula_selection.evaluator import (
...     FamilyRegistry, ModelEvaluator)
>>> sample = prepare_sample([0.1, 0.4, 0.7], [0.2, 0.5, 0.6])
>>> cmp = compare_reference(sample, 0, (0,), ModelEvaluator(FamilyRegistry.with_defaults()))
>>> cmp.vuong[0].is_absent, cmp.scores()
(True, (None, None))
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from copulagof.stats.methods.common.statistical import (
    Correction,
    CorrectionLike,
    parse_correction,
)
from copulagof.stats.methods.nonnested.core import (
    PairwiseTestResult,
    clarke_test,
    vuong_test,
)
from copulagof.stats.schemes.copula_selection.core import CopulaSample
from copulagof.stats.schemes.copula_selection.evaluator import (
    FamilyEvaluationError,
    FamilyFit,
    ModelEvaluator,
)
from copulagof.stats.schemes.copula_selection.score import aggregate_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceComparison:
    """
    Outcome of comparing one reference family against all candidates.

    Attributes:
        reference: Family code of the reference
        candidates: Candidate codes, in the order the tests were run
        vuong: Vuong results, index-aligned to `candidates`
        clarke: Clarke results, index-aligned to `candidates`
        fit: Reference fit, or None when the reference could not be evaluated
        n_params: Parameter count per candidate code
        errors: Failure message per candidate code that could not be evaluated
    """

    reference: int
    candidates: Tuple[int, ...]
    vuong: Tuple[PairwiseTestResult, ...]
    clarke: Tuple[PairwiseTestResult, ...]
    fit: Optional[FamilyFit]
    n_params: Dict[int, int]
    errors: Dict[int, str]

    def results(self, test: str) -> Tuple[PairwiseTestResult, ...]:
        if test == "vuong":
            return self.vuong
        if test == "clarke":
            return self.clarke
        raise ValueError(f"Unknown test: {test!r}")

    def scores(self) -> Tuple[Optional[int], Optional[int]]:
        """(Vuong score, Clarke score) of the reference."""
        return (
            aggregate_score(r.decision for r in self.vuong),
            aggregate_score(r.decision for r in self.clarke),
        )


def compare_reference(
    sample: CopulaSample,
    reference: int,
    candidates: Sequence[int],
    evaluator: ModelEvaluator,
    correction: CorrectionLike = Correction.NONE,
    level: float = 0.05,
) -> ReferenceComparison:
    """
    Run Vuong and Clarke tests of `reference` against each candidate.

    A failure to evaluate a family never propagates: a failed candidate
    yields absent results for its own cell only, a failed reference yields
    absent results for every cell.

    Args:
        sample: Validated data
        reference: Family code used as model 1 in every test
        candidates: Family codes used as model 2; may include `reference`
        evaluator: Fits families and evaluates their log-likelihoods
        correction: None, Akaike or Schwarz
        level: Significance level of both tests

    Returns:
        ReferenceComparison with index-aligned results
    """
    corr = parse_correction(correction)
    reference = int(reference)
    codes = tuple(int(c) for c in candidates)
    p1 = evaluator.n_params(reference)
    n_params = {c: evaluator.n_params(c) for c in codes}
    errors: Dict[int, str] = {}

    try:
        ref_fit: Optional[FamilyFit] = evaluator.evaluate(sample, reference)
    except FamilyEvaluationError as exc:
        logger.warning("Reference family %s skipped: %s", reference, exc)
        ref_fit = None
        errors[reference] = str(exc)

    vuong = []
    clarke = []
    for cand in codes:
        if cand == reference or ref_fit is None:
            vuong.append(PairwiseTestResult.absent("vuong"))
            clarke.append(PairwiseTestResult.absent("clarke"))
            continue

        try:
            cand_ll = evaluator.loglik(sample, cand)
        except FamilyEvaluationError as exc:
            logger.warning(
                "Comparison %s vs %s skipped: %s", reference, cand, exc
            )
            errors[cand] = str(exc)
            vuong.append(PairwiseTestResult.absent("vuong"))
            clarke.append(PairwiseTestResult.absent("clarke"))
            continue

        p2 = n_params[cand]
        vuong.append(
            vuong_test(ref_fit.loglik, cand_ll, level, p1, p2, corr)
        )
        clarke.append(
            clarke_test(ref_fit.loglik, cand_ll, level, p1, p2, corr)
        )

    return ReferenceComparison(
        reference=reference,
        candidates=codes,
        vuong=tuple(vuong),
        clarke=tuple(clarke),
        fit=ref_fit,
        n_params=n_params,
        errors=errors,
    )
