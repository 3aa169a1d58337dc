"""
Integer-only pool kernels.

`isqrt`, `cpmm_swap` and `lp_math` take keyword arguments, return frozen
result dataclasses and raise plain ValueError/TypeError. `pairpool.core`
maps those failures onto the pool's error types.
"""
