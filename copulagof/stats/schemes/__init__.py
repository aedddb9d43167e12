"""
Problem-specific applications of the statistical methods.

Available schemes:
- `copula_selection`: Vuong/Clarke goodness-of-fit scores for copula families
"""
