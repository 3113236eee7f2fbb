"""Tests for program domain router."""

from fastapi.testclient import TestClient
from sqlmodel import Session

from academy.program.models import Program


def test_create_program(admin_client: TestClient, session: Session):
    response = admin_client.post(
        "/programs/", json={"title": "Tactics", "description": "Forks and pins"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Tactics"
    assert data["description"] == "Forks and pins"
    assert session.get(Program, data["id"]) is not None


def test_create_program_empty_title(admin_client: TestClient):
    response = admin_client.post("/programs/", json={"title": ""})

    assert response.status_code == 422


def test_create_program_as_coach_forbidden(coach_client: TestClient):
    response = coach_client.post("/programs/", json={"title": "Tactics"})

    assert response.status_code == 403
    assert response.json()["type"] == "admin_required"


def test_list_programs_sorted_by_title(coach_client: TestClient, session: Session):
    session.add(Program(title="Endgames"))
    session.add(Program(title="Benko Gambit"))
    session.commit()

    response = coach_client.get("/programs/")

    assert response.status_code == 200
    assert [p["title"] for p in response.json()] == ["Benko Gambit", "Endgames"]


def test_list_programs_as_member_forbidden(member_client: TestClient):
    response = member_client.get("/programs/")

    assert response.status_code == 403
