"""
copulagof.api - User-Friendly Facade
====================================

Off-the-shelf entry points organised by what users want to find out.

- `vuong_clarke_scores()`: score copula families against each other
- `model_selection()`: the configured experiment, for custom runners/ledgers
- `independence_test()`: are u1 and u2 independent?

Examples
--------
>>> from copulagof.api import vuong_clarke_scores, independence_test
"""

from copulagof.api.gof import independence_test, model_selection, vuong_clarke_scores

__all__ = ["independence_test", "model_selection", "vuong_clarke_scores"]
