"""
copulagof — goodness-of-fit scoring of bivariate copula families.

Given copula data (u1, u2) and a set of candidate families, every family is
compared with every other one by two non-nested model-selection tests: the
asymptotic Vuong test and the distribution-free Clarke test. Each family
scores one point per comparison won and loses one per comparison lost;
callers read the scores and decide.

Fitting families and evaluating their densities is left to the caller: a
`CopulaFamily` implementation is registered per family code in a
`FamilyRegistry`. Everything a run produces (design, critical value, fits,
every pairwise result and every score) is appended to a ledger, and the
score matrix is read back from it.

Example
-------
>>> import copulagof
>>> assert hasattr(copulagof, "core")
>>> assert hasattr(copulagof, "stats")
"""

from copulagof import core, stats
from copulagof.__version__ import __version__

__all__ = ["core", "stats", "__version__"]
