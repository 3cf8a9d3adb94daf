"""Services — the imperative shell around the pure core.

Invariants:
    - Services fetch snapshots, call core/ decisions, write the result, commit
    - No business rule lives here that core/ could decide from data

Design Decisions:
    - One service class per resource, constructed per request with an AsyncSession
"""
