"""Core Layer — domain types, error taxonomy and boundary protocols.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO, no logging
"""
