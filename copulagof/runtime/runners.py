"""
copulagof.runtime.runners
=========================

Runners that execute experiment templates with different strategies.

Templates define the experiment logic; runners provide the execution
environment. Every runner exposes `map(fn, items)`, returning results in
input order, which the template uses for its independent units of work.

- `SequentialRunner`: one item after the other on the calling thread
- `ThreadPoolRunner`: items spread over a `ThreadPoolExecutor`

Examples
--------
>>> SequentialRunner.map(abs, [-1, 2, -3])
[1, 2, 3]
>>> ThreadPoolRunner(max_workers=2).map(abs, [-1, 2, -3])
[1, 2, 3]
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from copulagof.core.traits import LedgerOps
from copulagof.runtime.experiment_template import ExperimentTemplate

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class SequentialRunner:
    """
    Basic sequential experiment runner.

    Provides setup, execution and result history for a template.
    """

    runner_type = "sequential"

    def __init__(
        self,
        template: Optional[ExperimentTemplate] = None,
        ledger: Optional[LedgerOps] = None,
    ):
        self.template = template
        self._ledger = ledger
        self._results_history: List[Any] = []

        if template is not None and ledger is not None:
            self.setup(ledger)

    @staticmethod
    def map(fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
        return [fn(item) for item in items]

    def setup(self, ledger: LedgerOps) -> None:
        """Setup the runner with a specific ledger backend."""
        if self.template is None:
            raise RuntimeError("Runner has no template to set up.")
        self._ledger = ledger
        self.template.setup(ledger)

    def analyze(self) -> Any:
        """Run the template's analysis and store the result."""
        if self._ledger is None or self.template is None:
            raise RuntimeError(
                "Runner not setup. Call setup(ledger) first or provide ledger in constructor."
            )
        logger.debug(
            "Running %s with %s runner", self.template.experiment_id, self.runner_type
        )
        result = self.template.analyze(mapper=self.map)
        self._results_history.append(result)
        return result

    def get_summary(self) -> Dict[str, Any]:
        """Get summary including template and runner state."""
        summary = self.template.get_summary() if self.template is not None else {}
        summary.update(
            {
                "runner_type": self.runner_type,
                "total_runs": len(self._results_history),
            }
        )
        return summary

    def get_results_history(self) -> List[Any]:
        """Get history of all analysis results."""
        return self._results_history.copy()


class ThreadPoolRunner(SequentialRunner):
    """
    Runner mapping independent units of work onto a thread pool.

    Results are collected in input order, so the outcome equals the
    sequential run. The pool lives only for the duration of one `map` call.
    """

    runner_type = "thread_pool"

    def __init__(
        self,
        template: Optional[ExperimentTemplate] = None,
        ledger: Optional[LedgerOps] = None,
        max_workers: Optional[int] = None,
    ):
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers
        super().__init__(template, ledger)

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> List[R]:  # type: ignore[override]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(fn, items))

    def get_summary(self) -> Dict[str, Any]:
        summary = super().get_summary()
        summary["max_workers"] = self.max_workers
        return summary
