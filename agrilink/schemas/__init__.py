"""Schemas — Pydantic request models validated at the API boundary."""
