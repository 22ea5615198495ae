"""
Repository layer for data access operations.

Each module encapsulates the queries for one domain entity. Functions take
the async session as their first argument; callers own its lifecycle.
"""
