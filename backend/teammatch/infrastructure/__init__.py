"""Infrastructure Layer — database access, repositories and cross-cutting concerns.

Invariants:
    - Infrastructure never makes domain decisions; it fetches, converts and writes
    - Storage exceptions are mapped to core/errors.py types before leaving this layer

Design Decisions:
    - Repositories convert ORM rows to core snapshots at the boundary
"""
