"""
copulagof.backends.polars
=========================

In-memory ledger backed by a Polars DataFrame.
"""
