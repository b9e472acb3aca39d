"""Services — marketplace operations over an AsyncSession.

Invariants:
    - Services raise AgriLinkError subclasses; routes never translate errors themselves
    - Services commit their own unit of work
"""
