"""
copulagof.stats.methods.common
==============================

Statistical utilities shared by the non-nested tests.
"""
