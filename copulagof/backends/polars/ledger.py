"""
copulagof.backends.polars.ledger
================================

A concrete **Polars-backed** ledger with JSON-UTF8 payload.
Records live in memory; `frame()` hands out a copy for reporting or export.

- Inherits `LedgerOps` to expose the typed DSL as native methods.
- Implements `append()`, `emit_signal()`, and a `LedgerReader`.

Examples
--------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.core.names import Namespace
>>> L = PolarsLedger()
>>> L.write_event(time_index="t1", namespace=Namespace.STATS, kind="pairwise",
...               run_id="gof#1", step_key="ref-1",
...               payload_type="PairwiseTest", payload={"decision": 1}, tag="stat:vuong")
>>> L.reader().count(namespace=Namespace.STATS.value)
1
"""

from __future__ import annotations
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, cast

import polars as pl

from copulagof.core.ledger import LedgerReader, NamespaceLike, PayloadRegistry, Row
from copulagof.core.names import Namespace
from copulagof.core.traits import LedgerOps


class PolarsLedger(LedgerOps):
    """Polars-backed append-only ledger with JSON-UTF8 payload column."""

    _SCHEMA = {
        "uuid": pl.Utf8,
        "time_index": pl.Utf8,
        "ts": pl.Datetime(time_unit="us", time_zone="UTC"),
        "namespace": pl.Utf8,
        "kind": pl.Utf8,
        "entity": pl.Utf8,  # run_id
        "snapshot_id": pl.Utf8,  # step_key
        "tag": pl.Utf8,
        "payload_type": pl.Utf8,
        "payload": pl.Utf8,  # JSON string
    }

    def __init__(self, df: Optional[pl.DataFrame] = None) -> None:
        self._df = (
            df if df is not None else pl.DataFrame(schema=cast(Any, self._SCHEMA))
        )

    def __len__(self) -> int:
        return self._df.height

    # ---- LedgerBase interface ----

    def append(
        self,
        *,
        time_index: str,
        ts: datetime,
        namespace: NamespaceLike,
        kind: str,
        entity: str,
        snapshot_id: str,
        payload_type: str,
        payload: Dict[str, Any],
        tag: Optional[str] = None,
    ) -> "PolarsLedger":
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        else:
            ts = ts.astimezone(timezone.utc)
        row = pl.DataFrame(
            {
                "uuid": [str(uuid.uuid4())],
                "time_index": [time_index],
                "ts": [ts],
                "namespace": [
                    namespace.value if isinstance(namespace, Namespace) else namespace
                ],
                "kind": [kind],
                "entity": [entity],
                "snapshot_id": [snapshot_id],
                "tag": [tag],
                "payload_type": [payload_type],
                "payload": [json.dumps(payload, separators=(",", ":"))],
            },
            schema=cast(Any, self._SCHEMA),
        )
        self._df = pl.concat([self._df, row], how="vertical_relaxed")
        return self

    def emit_signal(
        self,
        *,
        time_index: str,
        ts: datetime,
        entity: str,
        snapshot_id: str,
        topic: str,
        body: Dict[str, Any],
        tag: str = "signal",
        namespace: NamespaceLike = Namespace.SIGNALS,
        kind: str = "emitted",
    ) -> "PolarsLedger":
        return self.append(
            time_index=time_index,
            ts=ts,
            namespace=namespace,
            kind=kind,
            entity=entity,
            snapshot_id=snapshot_id,
            payload_type="Signal",
            payload={"topic": topic, "body": body},
            tag=tag,
        )

    class _Reader(LedgerReader):
        def __init__(self, df: pl.DataFrame) -> None:
            self.df = df

        def _filter(
            self,
            *,
            namespace: Optional[Any] = None,
            kind: Optional[str] = None,
            entity: Optional[str] = None,
            snapshot_id: Optional[str] = None,
            tag: Optional[str] = None,
        ) -> pl.DataFrame:
            q = self.df
            if namespace is not None:
                ns = namespace.value if isinstance(namespace, Namespace) else namespace
                q = q.filter(pl.col("namespace") == str(ns))
            if kind is not None:
                q = q.filter(pl.col("kind") == kind)
            if entity is not None:
                q = q.filter(pl.col("entity") == entity)
            if snapshot_id is not None:
                q = q.filter(pl.col("snapshot_id") == snapshot_id)
            if tag is not None:
                q = q.filter(pl.col("tag") == tag)
            return q

        @staticmethod
        def _to_row(rec: Dict[str, Any]) -> Row:
            payload = json.loads(rec["payload"]) if rec["payload"] else {}
            return Row(
                uuid=rec["uuid"],
                time_index=rec["time_index"],
                ts=rec["ts"],
                namespace=rec["namespace"],
                kind=rec["kind"],
                entity=rec["entity"],
                snapshot_id=rec["snapshot_id"],
                tag=rec["tag"],
                payload_type=rec["payload_type"],
                payload=PayloadRegistry.decode(rec["payload_type"], payload),
            )

        def iter_rows(self, **filters: Any) -> Iterator[Row]:
            q = self._filter(**filters)
            for rec in q.iter_rows(named=True):
                yield self._to_row(rec)

        def latest(self, **filters: Any) -> Optional[Row]:
            q = self._filter(**filters)
            if q.height == 0:
                return None
            return self._to_row(q.tail(1).to_dicts()[0])

        def count(self, **filters: Any) -> int:
            return int(self._filter(**filters).height)

    def reader(self) -> LedgerReader:
        return PolarsLedger._Reader(self._df)

    # ---- frame helpers (no I/O) ----

    def frame(self) -> pl.DataFrame:
        """Return a copy of the underlying Polars DataFrame."""
        return self._df.clone()
