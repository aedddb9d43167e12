"""
copulagof.core
==============

Ledger contracts, names and component base classes shared by every
procedure in the package.
"""
