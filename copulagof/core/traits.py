"""
copulagof.core.traits
=====================

Trait (mixin) that attaches a small, typed DSL to any ledger backend.

This mixin assumes the host implements `LedgerBase.append`,
`LedgerBase.emit_signal`, and `LedgerBase.reader`. By inheriting `LedgerOps`,
concrete ledgers gain:

- `write_event()` : append a record with typed parameters
- `emit()`        : append a signal record
- `latest()` / `iter_ns()` : typed convenience readers

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.core.names import Namespace
>>> L = PolarsLedger()
>>> L.write_event(time_index="t1", namespace=Namespace.STATS, kind="fit",
...               run_id="gof#1", step_key="ref-1",
...               payload_type="FamilyFit", payload={"family": 1, "params": [0.5]})
>>> L.latest(namespace=Namespace.STATS).payload["family"]
1
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Union

from copulagof.core.ledger import LedgerBase, NamespaceLike, Row
from copulagof.core.names import Namespace, RunId, StepKey, TimeIndex


def _ns(namespace: NamespaceLike) -> str:
    return namespace.value if isinstance(namespace, Namespace) else str(namespace)


class LedgerOps(LedgerBase):
    """A trait that attaches a small, typed DSL onto a ledger backend."""

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # ---- writers ----

    def write_event(
        self,
        *,
        time_index: Union[TimeIndex, str],
        namespace: NamespaceLike,
        kind: str,
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        payload_type: str,
        payload: Dict[str, Any],
        tag: Optional[str] = None,
        ts: Optional[datetime] = None,
    ) -> None:
        """Append a typed event to the ledger."""
        self.append(
            time_index=str(time_index),
            ts=ts or self._now(),
            namespace=_ns(namespace),
            kind=kind,
            entity=str(run_id),
            snapshot_id=str(step_key),
            payload_type=payload_type,
            payload=payload,
            tag=tag,
        )

    def emit(
        self,
        *,
        time_index: Union[TimeIndex, str],
        run_id: Union[RunId, str],
        step_key: Union[StepKey, str],
        topic: str,
        body: Dict[str, Any],
        tag: str = "signal",
        namespace: NamespaceLike = Namespace.SIGNALS,
        ts: Optional[datetime] = None,
    ) -> None:
        """Append a typed *signal* to the ledger."""
        self.emit_signal(
            time_index=str(time_index),
            ts=ts or self._now(),
            entity=str(run_id),
            snapshot_id=str(step_key),
            topic=topic,
            body=body,
            tag=tag,
            namespace=_ns(namespace),
        )

    # ---- readers ----

    def latest(
        self,
        *,
        namespace: Optional[NamespaceLike] = None,
        kind: Optional[str] = None,
        run_id: Optional[Union[RunId, str]] = None,
        tag: Optional[str] = None,
    ) -> Optional[Row]:
        """Return latest row for given filters (or None)."""
        return self.reader().latest(
            namespace=_ns(namespace) if namespace is not None else None,
            kind=kind,
            entity=str(run_id) if run_id else None,
            tag=tag,
        )

    def iter_ns(
        self,
        *,
        namespace: NamespaceLike,
        run_id: Optional[Union[RunId, str]] = None,
        step_key: Optional[Union[StepKey, str]] = None,
        kind: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Iterable[Row]:
        """Iterate rows in a namespace, optionally narrowed to one run/step."""
        return self.reader().iter_rows(
            namespace=_ns(namespace),
            entity=str(run_id) if run_id else None,
            snapshot_id=str(step_key) if step_key else None,
            kind=kind,
            tag=tag,
        )
