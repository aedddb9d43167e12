"""
copulagof.core.components
=========================

Base classes for components that write to and read from the ledger.

Component Types:
- `Statistic`: Compute and register statistical values
- `Criteria`: Compute and register thresholds or critical values
- `Signaler`: Emit derived signals (scores) from registered statistics

Every component exposes `step(ledger, run_id, step_key, time_index)`. A
`step_key` names one unit of work inside a run; in model selection that is
one reference family.

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.core.names import Namespace
>>>
>>> class CountingSignaler(Signaler):
...     def step(self, ledger, run_id, step_key, time_index):
...         n = ledger.reader().count(namespace=Namespace.STATS.value)
...         ledger.emit(time_index=time_index, run_id=run_id, step_key=step_key,
...                     topic="count", body={"n": n}, tag=self.tag_sig)
...
>>> L = PolarsLedger()
>>> CountingSignaler().step(L, "gof#1", "ref-1", "t1")
>>> L.latest(namespace=Namespace.SIGNALS).payload["body"]["n"]
0
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union, TYPE_CHECKING

from copulagof.core.names import Namespace, RunId, StepKey, TimeIndex

NamespaceLike = Union[Namespace, str]

if TYPE_CHECKING:
    from copulagof.core.traits import LedgerOps


class ComponentBase(ABC):
    """
    Base class for all ledger components.

    Provides namespace conventions and requires subclasses to implement step().
    """

    @abstractmethod
    def step(
        self,
        ledger: "LedgerOps",
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        """Execute this component's logic for one step of a run."""


@dataclass(kw_only=True)
class Statistic(ComponentBase):
    """
    Base class for statistics updaters.

    Statistics compute values and write them to the ledger for use by other
    components.
    """

    ns_stats: NamespaceLike = Namespace.STATS
    tag_stats: str = "stat:generic"

    def step(
        self,
        ledger: "LedgerOps",
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        """Override this method to implement statistic computation."""
        raise NotImplementedError("Subclasses must implement step()")


@dataclass(kw_only=True)
class Criteria(ComponentBase):
    """
    Base class for criteria updaters.

    Criteria components compute thresholds or critical values from the
    procedure's design.
    """

    ns_crit: NamespaceLike = Namespace.CRITERIA
    tag_crit: str = "crit:generic"

    def step(
        self,
        ledger: "LedgerOps",
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        """Override this method to implement criteria computation."""
        raise NotImplementedError("Subclasses must implement step()")


@dataclass(kw_only=True)
class Signaler(ComponentBase):
    """
    Base class for signal emitters.

    Signalers read statistics back from the ledger and emit derived signals.
    """

    ns_sig: NamespaceLike = Namespace.SIGNALS
    tag_sig: str = "signal:generic"

    def step(
        self,
        ledger: "LedgerOps",
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        time_index: Union[TimeIndex, str],
    ) -> None:
        """Override this method to implement signaling logic."""
        raise NotImplementedError("Subclasses must implement step()")
