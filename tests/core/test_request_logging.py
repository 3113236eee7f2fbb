"""Tests for academy/core/request_logging.py."""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from academy.core.request_logging import (
    RequestLoggingMiddleware,
    add_request_logging_middleware,
)


@pytest.fixture(name="client")
def client_fixture() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/users/")
    async def users():
        return []

    return TestClient(app)


def test_logs_request_with_extras(client: TestClient, caplog):
    with caplog.at_level(logging.DEBUG, logger="academy.request"):
        client.get("/users/?q=ada")

    record = next(r for r in caplog.records if r.name == "academy.request")
    assert record.levelno == logging.INFO
    assert record.method == "GET"
    assert record.path == "/users/"
    assert record.query == "q=ada"
    assert record.status_code == 200


def test_health_checks_are_quiet(client: TestClient, caplog):
    with caplog.at_level(logging.DEBUG, logger="academy.request"):
        client.get("/health")

    record = next(r for r in caplog.records if r.name == "academy.request")
    assert record.levelno == logging.DEBUG


def test_middleware_disabled_by_env(monkeypatch):
    monkeypatch.setenv("LOG_REQUESTS", "false")
    app = FastAPI()

    add_request_logging_middleware(app)

    assert app.user_middleware == []
