"""
Statistical methods for copula model selection.

1. **Common** (copulagof.stats.common):
   Descriptive helpers and ledger tags shared by all methods.

2. **Methods** (copulagof.stats.methods):
   Generic tests that only see vectors of numbers: non-nested model
   comparison (Vuong, Clarke) and the Kendall's tau independence test.

3. **Schemes** (copulagof.stats.schemes):
   Problem-specific applications of the methods; `copula_selection` scores
   copula families against each other.

Example:
--------
>>> import numpy as np
>>> from copulagof.stats.methods.nonnested.core import vuong_test
>>> vuong_test(np.array([0.1, 0.2, 0.3]), np.array([0.0, 0.0, 0.0])).test
'vuong'
"""
