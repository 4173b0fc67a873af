"""Users Route — POST /api/v1/users end to end over the SQLite store.

Tests cover:
    - 201 with exactly {"name": ...} on success, and the row is persisted
    - 409 on a second request for the same name
    - 400 "name missing" for absent, empty and whitespace names, and for no or null body
    - A creation that loses a same-name race answers 500 "unexpected: ..."
    - 400 VALIDATION_ERROR for a non-string name
    - Store failures rendered as 500 with the handler's message
"""

import asyncio

import pytest
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.api.routes.users import _Outcome, get_user_store
from user_registry.infrastructure.database import get_db
from user_registry.infrastructure.sqlalchemy_user_store import SQLAlchemyUserStore
from user_registry.main import app
from user_registry.models.user import User as UserModel

URL = "/api/v1/users"


async def test_create_user_returns_201_with_name(client):
    res = await client.post(URL, json={"name": "bert"})

    assert res.status_code == 201
    assert res.text == '{"name":"bert"}'


async def test_create_user_persists_row(client, test_db):
    await client.post(URL, json={"name": "bert"})

    result = await test_db.execute(
        select(UserModel).where(UserModel.name == "bert"),
    )
    user = result.scalar_one()
    assert isinstance(user.id, int)


async def test_duplicate_name_returns_409(client):
    await client.post(URL, json={"name": "bert"})
    res = await client.post(URL, json={"name": "bert"})

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["message"] == "user bert already exists"
    assert error["context"]["user_name"] == "bert"


@pytest.mark.parametrize("body", [{}, {"name": None}, {"name": ""}, {"name": "  "}])
async def test_missing_name_returns_400(client, body):
    res = await client.post(URL, json=body)

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "MISSING_INPUT"
    assert error["message"] == "name missing"


async def test_request_without_body_returns_name_missing(client):
    res = await client.post(URL)

    assert res.status_code == 400
    assert res.json()["error"]["message"] == "name missing"


async def test_null_body_returns_name_missing(client):
    res = await client.post(
        URL, content=b"null", headers={"Content-Type": "application/json"},
    )

    assert res.status_code == 400
    assert res.json()["error"]["message"] == "name missing"


async def test_non_string_name_is_a_validation_error(client):
    res = await client.post(URL, json={"name": 42})

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "body.name"


async def test_lookup_failure_returns_500(client, make_store):
    store = make_store(lookup_by_name=RuntimeError("caboom"))
    app.dependency_overrides[get_user_store] = lambda: store

    res = await client.post(URL, json={"name": "bert"})

    assert res.status_code == 500
    assert res.json()["error"]["message"] == "error checking user: caboom"


async def test_reload_failure_returns_500_without_cause(client, make_store):
    store = make_store(
        lookup_by_name=None, create=1337,
        lookup_by_id=RuntimeError("caboomsel"),
    )
    app.dependency_overrides[get_user_store] = lambda: store

    res = await client.post(URL, json={"name": "bert"})

    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "RELOAD_FAILURE"
    assert error["message"] == "error retrieving user: bert"
    assert error["context"]["user_id"] == 1337


class _CheckMissesConcurrentInsert(SQLAlchemyUserStore):
    """Existence check that ran before a concurrent request committed the same name."""

    async def lookup_by_name(self, name):
        return None


async def test_lost_creation_race_returns_500_unexpected(client, test_db):
    test_db.add(UserModel(name="bert"))
    await test_db.commit()

    def _store(db: AsyncSession = Depends(get_db)):
        return _CheckMissesConcurrentInsert(db)

    app.dependency_overrides[get_user_store] = _store

    res = await client.post(URL, json={"name": "bert"})

    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "CREATE_FAILURE"
    assert error["message"].startswith("unexpected: ")
    assert "UNIQUE" in error["message"]


async def test_concurrent_creations_of_one_name_succeed_once(client):
    first, second = await asyncio.gather(
        client.post(URL, json={"name": "bert"}),
        client.post(URL, json={"name": "bert"}),
    )

    statuses = sorted([first.status_code, second.status_code])
    assert statuses[0] == 201
    assert statuses[1] in (409, 500)
    loser = first if first.status_code != 201 else second
    if loser.status_code == 500:
        assert loser.json()["error"]["code"] == "CREATE_FAILURE"
        assert loser.json()["error"]["message"].startswith("unexpected: ")


def test_outcome_without_continuation_raises():
    with pytest.raises(RuntimeError):
        _Outcome().resolve()


async def test_openapi_declares_201_and_failures(client):
    res = await client.get("/openapi.json")
    responses = res.json()["paths"][URL]["post"]["responses"]

    assert {"201", "400", "409", "500"} <= set(responses)
