"""Tests for academy/core/exception_handlers.py."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError, OperationalError

from academy.core.exception_handlers import register_exception_handlers
from academy.user.exceptions import UserNotFoundError


class Payload(BaseModel):
    name: str = Field(min_length=2)
    age: int


@pytest.fixture(name="client")
def client_fixture() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise UserNotFoundError()

    @app.get("/duplicate")
    async def duplicate():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    @app.get("/db-down")
    async def db_down():
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    @app.post("/payload")
    async def payload(body: Payload):
        return body

    return TestClient(app, raise_server_exceptions=False)


def test_app_exception(client: TestClient):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"type": "user_not_found", "message": "User not found"}


def test_integrity_error_is_conflict(client: TestClient):
    response = client.get("/duplicate")

    assert response.status_code == 409
    assert response.json()["type"] == "conflict"
    assert "UNIQUE" not in response.json()["message"]


def test_other_database_error_is_store_error(client: TestClient):
    response = client.get("/db-down")

    assert response.status_code == 500
    assert response.json()["type"] == "store_error"


def test_unhandled_exception(client: TestClient):
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "type": "internal_error",
        "message": "An unexpected error occurred",
    }


def test_validation_errors_are_joined(client: TestClient):
    response = client.post("/payload", json={"name": "A", "age": "old"})

    assert response.status_code == 422
    message = response.json()["message"]
    assert message.startswith("name: ")
    assert "; age: " in message
