"""
Statistical tests independent of any particular model family.

Available methods:
- `nonnested`: Vuong and Clarke tests for non-nested model comparison
- `independence`: Kendall's tau based independence test
- `common`: Parameter-count corrections and critical values
"""
