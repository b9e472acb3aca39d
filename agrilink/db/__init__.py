"""Database — declarative base, session factory and seed data.

Invariants:
    - All sessions are async (AsyncSession)
"""
