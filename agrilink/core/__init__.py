"""Core — pure marketplace rules (no IO, no database, no FastAPI).

Invariants:
    - Modules here never import from services, api, models or infrastructure

Design Decisions:
    - Rules are plain functions over primitives so they are testable without fixtures
"""
