"""
copulagof.core.names
====================

Typed names shared across the package.

- `Namespace`: an Enum for well-known ledger namespaces.
- `RunId`, `StepKey`, `TimeIndex`: NewType wrappers for clarity.

Examples
--------
>>> from copulagof.core.names import Namespace, RunId, StepKey, TimeIndex
>>> Namespace.STATS.value
'stats'
>>> rid = RunId("gof#1"); isinstance(rid, str)
True
"""

from __future__ import annotations
from enum import Enum
from typing import NewType


class Namespace(str, Enum):
    """Well-known ledger namespaces.

    - OBS: design and input descriptions
    - STATS: statistics (fits, pairwise test results)
    - CRITERIA: critical values / thresholds
    - SIGNALS: emitted scores
    """

    OBS = "obs"
    STATS = "stats"
    CRITERIA = "criteria"
    SIGNALS = "signals"

    def __str__(self) -> str:
        return self.value


# Typed aliases for logical identifiers (thin wrappers over str).
RunId = NewType("RunId", str)
StepKey = NewType("StepKey", str)
TimeIndex = NewType("TimeIndex", str)

