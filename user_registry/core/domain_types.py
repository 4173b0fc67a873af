"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the integer primary key handed out by the store
    - UserName is the caller-supplied name, passed through unmodified
"""

from typing import NewType


UserId = NewType("UserId", int)
UserName = NewType("UserName", str)
