"""Infrastructure — database pool, logging, security, file storage and mail.

Invariants:
    - Infrastructure adapters raise domain errors from core/errors.py, never raw driver errors
"""
