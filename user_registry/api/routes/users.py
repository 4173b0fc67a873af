"""Users — user creation endpoint.

Invariants:
    - POST /api/v1/users answers 201 {"name": ...} or raises the OperationError
      reported by UserCreateHandler (rendered by api/error_handlers.py)
    - One UserCreateHandler per request, bound to the request's DB session
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.core.errors import OperationError
from user_registry.infrastructure.database import get_db
from user_registry.infrastructure.sqlalchemy_user_store import SQLAlchemyUserStore
from user_registry.schemas.user import UserCreate, UserResponse
from user_registry.services.handle_user_create import UserCreateHandler

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_user_store(db: AsyncSession = Depends(get_db)) -> SQLAlchemyUserStore:
    return SQLAlchemyUserStore(db)


class _Outcome:
    """Collects whichever continuation the handler invokes."""

    def __init__(self):
        self.response: JSONResponse | None = None
        self.error: OperationError | None = None

    def respond(self, status_code: int, body: dict) -> None:
        self.response = JSONResponse(status_code=status_code, content=body)

    def report_error(self, error: OperationError) -> None:
        self.error = error

    def resolve(self) -> JSONResponse:
        if self.error is not None:
            raise self.error
        if self.response is None:
            raise RuntimeError("user create handler finished without an outcome")
        return self.response


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "name missing"},
        409: {"description": "user already exists"},
        500: {"description": "store failure"},
    },
)
async def create_user(
    body: UserCreate | None = None,
    store: SQLAlchemyUserStore = Depends(get_user_store),
):
    """Create a user by name. A missing or null body counts as a missing name."""
    body = body or UserCreate()
    outcome = _Outcome()
    await UserCreateHandler(store).handle(
        body, outcome.respond, outcome.report_error,
    )
    response = outcome.resolve()
    logger.info("User created", extra={"user_name": body.name})
    return response
