"""
copulagof.reporting
===================

Read-only views over a run ledger.

- `LedgerReporter`: namespaces, kinds and event counts (ibis)
- `PairwiseReporter`: pairwise-test and score tables (polars)
"""
