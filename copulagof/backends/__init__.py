"""
copulagof.backends
==================

Concrete ledger storage backends.
"""
