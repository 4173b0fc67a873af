"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no base class
    - Store methods signal failure by raising; a return value is always a result
"""

from typing import Protocol

from user_registry.core.domain_types import UserId


class UserLike(Protocol):
    """Structural contract for a stored user as seen by the core."""
    id: int
    name: str


class UserStore(Protocol):
    """Contract for user persistence — implemented by shell."""

    async def lookup_by_name(self, name: str) -> UserLike | None:
        """Return the user called `name`, or None when there is none."""
        ...

    async def create(self, name: str) -> UserId:
        """Persist a new user and return its identifier."""
        ...

    async def lookup_by_id(self, user_id: UserId) -> UserLike:
        """Return the user with `user_id`; raises if it cannot be loaded."""
        ...
