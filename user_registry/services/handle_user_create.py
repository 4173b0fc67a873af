"""User Create Handler — existence check, creation and reload for one requested name.

Invariants:
    - Store calls run strictly in order: lookup_by_name, create, lookup_by_id
    - Each call is reached only if every previous step succeeded
    - Every failure is exactly one OperationError; no retries
    - handle() calls exactly one of respond / report_error, exactly once
    - No logging here; the route and error handlers observe outcomes

Design Decisions:
    - create_user() raises, handle() adapts it to continuations: callers that
      want exceptions use the former, transport adapters the latter
    - Check-then-create is not atomic; uniqueness under concurrency belongs to
      the store (UNIQUE constraint on users.name)
"""

from typing import Callable

from user_registry.core.domain_types import UserName
from user_registry.core.errors import OperationError
from user_registry.core.repository_protocols import UserLike, UserStore
from user_registry.schemas.user import UserCreate

CREATED_STATUS = 201

Respond = Callable[[int, dict], None]
ReportError = Callable[[OperationError], None]


def _require_name(name: str | None) -> UserName:
    if not name or not name.strip():
        raise OperationError.missing_input()
    return UserName(name)


class UserCreateHandler:
    """Creates one user per request through a UserStore."""

    def __init__(self, store: UserStore):
        self.store = store

    async def create_user(self, name: str | None) -> UserLike:
        """Create `name` and return the user as reloaded from the store.

        Raises OperationError on every failure path.
        """
        name = _require_name(name)

        try:
            existing = await self.store.lookup_by_name(name)
        except Exception as e:
            raise OperationError.check_failure(name, e) from e
        if existing is not None:
            raise OperationError.conflict(name)

        try:
            user_id = await self.store.create(name)
        except Exception as e:
            raise OperationError.create_failure(name, e) from e

        try:
            return await self.store.lookup_by_id(user_id)
        except Exception as e:
            raise OperationError.reload_failure(name, user_id) from e

    async def handle(
        self,
        request: UserCreate,
        respond: Respond,
        report_error: ReportError,
    ) -> None:
        """Run the creation and report the outcome through a continuation."""
        try:
            user = await self.create_user(request.name)
        except OperationError as e:
            report_error(e)
            return
        respond(CREATED_STATUS, {"name": user.name})
