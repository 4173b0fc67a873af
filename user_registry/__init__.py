"""User Registry Package — user creation service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
