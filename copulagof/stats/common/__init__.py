"""
copulagof.stats.common
======================

Descriptive statistics and ledger tags shared across methods.
"""
