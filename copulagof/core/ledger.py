"""
copulagof.core.ledger
=====================

Backend-agnostic ledger contracts.

A ledger is an append-only record of everything a selection run produced:
the design, critical values, fits, every pairwise test result, and every
score. Concrete storage lives under `copulagof.backends`.

- `Row`: one immutable ledger record
- `LedgerReader`: read-only, filterable view over records
- `PayloadRegistry`: decoders turning JSON payloads back into typed objects
- `LedgerBase`: the minimal write/read surface a backend implements

Examples
--------
>>> from copulagof.core.ledger import PayloadRegistry
>>> PayloadRegistry.register("Pair", lambda d: (d["a"], d["b"]))
>>> PayloadRegistry.decode("Pair", {"a": 1, "b": 2})
(1, 2)
>>> PayloadRegistry.decode("Unknown", {"a": 1})
{'a': 1}
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Optional, Union

from copulagof.core.names import Namespace

# Type aliases
NamespaceLike = Union[Namespace, str]
PayloadDecoder = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class Row:
    """A single ledger record with its payload already decoded."""

    uuid: str
    time_index: str
    ts: datetime
    namespace: str
    kind: str
    entity: str
    snapshot_id: str
    tag: Optional[str]
    payload_type: str
    payload: Any


class LedgerReader(ABC):
    """Read-only query interface handed to components."""

    @abstractmethod
    def iter_rows(self, **filters: Any) -> Iterator[Row]:
        """Iterate rows matching the filters, in append order."""

    @abstractmethod
    def latest(self, **filters: Any) -> Optional[Row]:
        """Return the most recently appended matching row (or None)."""

    @abstractmethod
    def count(self, **filters: Any) -> int:
        """Count rows matching the filters."""


class PayloadRegistry:
    """Registry of payload decoders keyed by payload type.

    Unregistered payload types decode to the raw dict.
    """

    _decoders: Dict[str, PayloadDecoder] = {}

    @classmethod
    def register(cls, payload_type: str, decoder: PayloadDecoder) -> None:
        """Register a decoder for a payload type."""
        cls._decoders[payload_type] = decoder

    @classmethod
    def decode(cls, payload_type: str, payload: Dict[str, Any]) -> Any:
        """Decode a payload dict, falling back to the dict itself."""
        decoder = cls._decoders.get(payload_type)
        if decoder is None:
            return payload
        return decoder(payload)


class LedgerBase(ABC):
    """Minimal surface every ledger backend implements."""

    @abstractmethod
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
    ) -> "LedgerBase":
        """Append one record."""

    @abstractmethod
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
    ) -> "LedgerBase":
        """Append one signal record."""

    @abstractmethod
    def reader(self) -> LedgerReader:
        """Return a read-only view over the current records."""
