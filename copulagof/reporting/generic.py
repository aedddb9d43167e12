"""
copulagof.reporting.generic
===========================

A scheme-agnostic reporter that shows raw ledger events and
namespace x kind counts. Queries run through ibis on an in-memory table.

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.core.names import Namespace
>>> from copulagof.reporting.generic import LedgerReporter
>>> L = PolarsLedger()
>>> L.write_event(time_index="t1", namespace=Namespace.STATS, kind="fit",
...               run_id="gof#1", step_key="ref-0",
...               payload_type="FamilyFit", payload={"family": 0})
>>> rep = LedgerReporter(L)
>>> rep.unique_namespaces()
['stats']
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List
from dataclasses import dataclass

import ibis

if TYPE_CHECKING:
    from copulagof.backends.polars.ledger import PolarsLedger


@dataclass
class LedgerReporter:
    """
    A generic, scheme-agnostic reporter for any run ledger.
    """

    ledger: "PolarsLedger"

    def ledger_table(self) -> Any:
        """Return the ledger as an ibis table expression."""
        return ibis.memtable(self.ledger.frame().to_arrow())

    def _distinct(self, column: str) -> List[str]:
        table = self.ledger_table()
        values = table.select(column).distinct().to_pyarrow().column(column)
        return sorted(v for v in values.to_pylist() if v is not None)

    def unique_entities(self) -> List[str]:
        """List all run identifiers."""
        return self._distinct("entity")

    def unique_namespaces(self) -> List[str]:
        """List all event namespaces."""
        return self._distinct("namespace")

    def unique_kinds(self) -> List[str]:
        """List all event kinds."""
        return self._distinct("kind")

    def namespace_kind_counts(self) -> Any:
        """
        Return counts of events grouped by namespace and kind.

        Returns
        -------
        ibis.Table
            Table with namespace, kind, and count columns
        """
        table = self.ledger_table()
        return (
            table.group_by([table.namespace, table.kind])
            .aggregate(count=table.count())
            .order_by([ibis.asc("namespace"), ibis.asc("kind")])
        )
