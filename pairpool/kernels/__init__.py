"""
Kernel layer.

`pairpool/kernels/python/` holds the integer-only kernels the pool ledger is
built on. They are pure functions with typed results and explicit rounding
rules, so each can be audited and property-tested in isolation.
"""
