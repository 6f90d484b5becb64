"""
Core: the workload-specific logic built on top of the cogs.
"""
