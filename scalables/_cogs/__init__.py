"""
Cogs: the low-level building blocks with no knowledge of the workloads' semantics.

Cogs can import each other, but never anything from :mod:`scalables._core`.
"""
