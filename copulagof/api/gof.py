"""
copulagof.api.gof
=================

Goodness-of-fit facade: which copula families describe the data best?

Examples
--------
>>> import numpy as np
>>> from copulagof.api.gof import independence_test, vuong_clarke_scores
>>> u = np.linspace(0.05, 0.95, 30)
>>> round(independence_test(u, u[::-1]).tau, 6)
-1.0
>>> scores = vuong_clarke_scores(u, u, familyset=[0])
>>> scores.to_frame().columns.tolist()
[0]
"""

from __future__ import annotations
from typing import Optional

from copulagof.backends.polars.ledger import PolarsLedger
from copulagof.core.traits import LedgerOps
from copulagof.runtime.runners import SequentialRunner, ThreadPoolRunner
from copulagof.stats.methods.common.statistical import CorrectionLike
from copulagof.stats.methods.independence.core import (
    IndependenceTestResult,
    kendall_independence_test,
)
from copulagof.stats.schemes.copula_selection.core import (
    ArrayLike,
    FamilySetLike,
    prepare_design,
    prepare_sample,
)
from copulagof.stats.schemes.copula_selection.evaluator import FamilyRegistry
from copulagof.stats.schemes.copula_selection.experiments import (
    VuongClarkeExperiment,
)
from copulagof.stats.schemes.copula_selection.score import ScoreMatrix


def model_selection(
    experiment_id: str,
    u1: ArrayLike,
    u2: ArrayLike,
    familyset: FamilySetLike = None,
    correction: CorrectionLike = False,
    level: float = 0.05,
    rotations: bool = True,
    *,
    registry: Optional[FamilyRegistry] = None,
) -> VuongClarkeExperiment:
    """
    Create a Vuong/Clarke family-selection experiment.

    Parameters
    ----------
    experiment_id : str
        Identifier of the run in the ledger
    u1, u2 : array-like
        Copula data of equal length with values in [0, 1]; rows with a
        missing value are dropped
    familyset : int or sequence of int, optional
        Family codes to compare (default: all supported families). Negative
        codes exclude families from the full set instead.
    correction : {False, None, "none", "Akaike", "Schwarz"}, default=False
        Correction for the number of parameters
    level : float, default=0.05
        Significance level of both tests
    rotations : bool, default=True
        Also compare the rotated variants of each family
    registry : FamilyRegistry, optional
        Implementations of the compared families (default: the built-in
        independence copula only)

    Returns
    -------
    VuongClarkeExperiment
        A configured experiment ready to be set up with a ledger

    Raises
    ------
    ValueError
        If the data or any option is invalid
    """
    sample = prepare_sample(u1, u2)
    design = prepare_design(
        sample,
        familyset=familyset,
        correction=correction,
        level=level,
        rotations=rotations,
    )
    return VuongClarkeExperiment(
        experiment_id=experiment_id,
        sample=sample,
        design=design,
        registry=registry if registry is not None else FamilyRegistry.with_defaults(),
    )


def vuong_clarke_scores(
    u1: ArrayLike,
    u2: ArrayLike,
    familyset: FamilySetLike = None,
    correction: CorrectionLike = False,
    level: float = 0.05,
    rotations: bool = True,
    *,
    registry: Optional[FamilyRegistry] = None,
    ledger: Optional[LedgerOps] = None,
    max_workers: Optional[int] = None,
    run_id: str = "gof",
) -> ScoreMatrix:
    """
    Score copula families by Vuong and Clarke comparisons.

    Every family is compared with every other family of the set. A family's
    score is the number of comparisons it wins minus the number it loses;
    higher is better.

    Parameters
    ----------
    u1, u2, familyset, correction, level, rotations, registry
        See `model_selection`
    ledger : LedgerOps, optional
        Ledger receiving every result (default: a fresh `PolarsLedger`)
    max_workers : int, optional
        Compare reference families on a thread pool of this size
        (default: sequentially)
    run_id : str, default="gof"
        Identifier of the run in the ledger; must be new to `ledger`

    Returns
    -------
    ScoreMatrix
        Rows Vuong and Clarke, one column per family in `familyset` order

    Raises
    ------
    ValueError
        If the arguments are invalid or `run_id` already has events in
        `ledger`

    Examples
    --------
    >>> import numpy as np
    >>> rng = np.random.default_rng(0)
    >>> u1, u2 = rng.uniform(size=50), rng.uniform(size=50)
    >>> vuong_clarke_scores(u1, u2, familyset=0).shape
    (2, 1)
    """
    experiment = model_selection(
        run_id,
        u1,
        u2,
        familyset=familyset,
        correction=correction,
        level=level,
        rotations=rotations,
        registry=registry,
    )
    ledger = ledger if ledger is not None else PolarsLedger()
    if max_workers is None:
        runner: SequentialRunner = SequentialRunner(experiment, ledger)
    else:
        runner = ThreadPoolRunner(experiment, ledger, max_workers=max_workers)
    return runner.analyze()


def independence_test(u1: ArrayLike, u2: ArrayLike) -> IndependenceTestResult:
    """
    Asymptotic independence test based on Kendall's tau.

    Parameters
    ----------
    u1, u2 : array-like
        Copula data of equal length with values in [0, 1]; rows with a
        missing value are dropped

    Returns
    -------
    IndependenceTestResult
        Statistic, p-value and empirical Kendall's tau

    Raises
    ------
    ValueError
        If the data is invalid
    """
    sample = prepare_sample(u1, u2, min_obs=1)
    return kendall_independence_test(sample.u1, sample.u2)
