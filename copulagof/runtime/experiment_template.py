"""
copulagof.runtime.experiment_template
=====================================

Base class for experiment templates.

A template owns the design of one procedure, configures its ledger
components, and turns what the components recorded back into a result.
Runners (see `copulagof.runtime.runners`) decide how the work of a template
is executed.

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> class MyTemplate(ExperimentTemplate):
...     def configure_components(self): return {}
...     def register_design(self, ledger): pass
...     def analyze(self, mapper=map): return None
...     def extract_results(self, ledger): return None
>>> template = MyTemplate("my_experiment")
>>> template.setup(PolarsLedger())
>>> template.is_setup
True
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional

from copulagof.core.traits import LedgerOps

Mapper = Callable[[Callable[[Any], Any], Iterable[Any]], Iterable[Any]]


class ExperimentTemplate(ABC):
    """
    Base class for experiment templates.

    Encapsulates:
    - Design parameters and validation
    - Component configuration (statistics, criteria, signalers)
    - Analysis pipeline coordination
    - Results interpretation
    """

    def __init__(self, experiment_id: str):
        self.experiment_id = experiment_id
        self.ledger: Optional[LedgerOps] = None
        self.components: Dict[str, Any] = {}
        self._is_setup = False

    @property
    def is_setup(self) -> bool:
        return self._is_setup

    @abstractmethod
    def configure_components(self) -> Dict[str, Any]:
        """Configure the components (statistics, criteria, signalers)."""

    @abstractmethod
    def register_design(self, ledger: LedgerOps) -> None:
        """Record the design of the experiment in the ledger."""

    @abstractmethod
    def analyze(self, mapper: Mapper = map) -> Any:
        """
        Run the analysis.

        Args:
            mapper: `map`-like callable used for independent units of work;
                results must come back in input order
        """

    @abstractmethod
    def extract_results(self, ledger: LedgerOps) -> Any:
        """Build the result object from the ledger."""

    def setup(self, ledger: LedgerOps) -> None:
        """Attach a ledger, configure components and register the design."""
        self.ledger = ledger
        self.components = self.configure_components()
        self.register_design(ledger)
        self._is_setup = True

    def _require_setup(self) -> LedgerOps:
        if not self._is_setup or self.ledger is None:
            raise RuntimeError("Template not setup. Call setup(ledger) first.")
        return self.ledger

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the experiment state."""
        if not self._is_setup:
            return {"experiment_id": str(self.experiment_id), "status": "not_setup"}
        return {
            "experiment_id": str(self.experiment_id),
            "status": "ready",
            "components": list(self.components.keys()),
        }
