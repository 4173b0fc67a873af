"""User Schemas — Pydantic models for the user creation boundary.

Invariants:
    - UserCreate.name is optional at the schema level; presence is checked by
      UserCreateHandler so the failure carries the "name missing" message
    - UserResponse surfaces only the name
"""

from pydantic import BaseModel


class UserCreate(BaseModel):
    """User creation request body."""
    name: str | None = None


class UserResponse(BaseModel):
    """Public-facing representation of a created user."""
    name: str
