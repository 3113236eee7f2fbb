import inspect
import os

# Settings are read at import time (engine creation), so these must come first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin-password")
os.environ.setdefault("LOG_REQUESTS", "false")

from collections.abc import Callable  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import academy.models  # noqa: E402, F401
from academy.auth.dependencies import get_principal  # noqa: E402
from academy.auth.service import (  # noqa: E402
    FirebaseAuthService,
    TokenClaims,
    get_firebase_auth_service,
)
from academy.core.settings import Settings, get_settings  # noqa: E402
from academy.db.engine import build_engine, get_session  # noqa: E402
from academy.main import app  # noqa: E402
from academy.user.models import User, UserRole  # noqa: E402
from academy.user.repository import UserRepository  # noqa: E402

ADMIN_UID = "admin-uid-0000000000000000000"
COACH_UID = "coach-uid-0000000000000000000"
MEMBER_UID = "member-uid-000000000000000000"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="session")
def session_fixture():
    """Create an in-memory SQLite database (foreign keys enforced)."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="repository")
def repository_fixture(session: Session) -> UserRepository:
    return UserRepository(session)


def _add_user(session: Session, **fields) -> User:
    user = User(**fields)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="admin_user")
def admin_user_fixture(session: Session) -> User:
    return _add_user(
        session,
        id=ADMIN_UID,
        email="admin@example.com",
        name="Ada Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture(name="coach_user")
def coach_user_fixture(session: Session) -> User:
    return _add_user(
        session,
        id=COACH_UID,
        email="coach@example.com",
        name="Carl Coach",
        role=UserRole.COACH,
    )


@pytest.fixture(name="member_user")
def member_user_fixture(session: Session) -> User:
    return _add_user(
        session,
        id=MEMBER_UID,
        email="member@example.com",
        name="Mia Member",
        student_name="Mia",
        role=UserRole.MEMBER,
    )


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session) -> Callable[..., User]:
    """Insert arbitrary users: make_user(id=..., email=..., role=...)."""

    def _make(**fields) -> User:
        return _add_user(session, **fields)

    return _make


@pytest.fixture(name="mock_firebase_auth")
def mock_firebase_auth_fixture():
    """Create a mock FirebaseAuthService with an empty identity directory."""
    mock_service = MagicMock(spec=FirebaseAuthService)
    mock_service.verify_session_cookie.return_value = TokenClaims(uid="test-uid")
    mock_service.verify_id_token.return_value = TokenClaims(uid="test-uid")
    mock_service.get_identity.return_value = None
    mock_service.find_identity_by_email.return_value = None
    mock_service.list_identities.return_value = iter([])
    return mock_service


@pytest.fixture(name="mock_settings")
def mock_settings_fixture():
    """Create test settings (aliases, since fields are declared with them)."""
    return Settings(
        _env_file=None,
        ENV_NAME="test",
        DATABASE_URL="sqlite://",
        SESSION_SECRET_KEY="test-secret-key",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin-password",
        SESSION_EXPIRES_DAYS=5,
    )


@pytest.fixture(name="client_for")
def client_for_fixture(
    session: Session,
    mock_firebase_auth: MagicMock,
    mock_settings: Settings,
):
    """Build a TestClient acting as the given principal (None = anonymous)."""

    def _client(principal: TokenClaims | None) -> TestClient:
        app.dependency_overrides[get_session] = lambda: session
        app.dependency_overrides[get_firebase_auth_service] = (
            lambda: mock_firebase_auth
        )
        app.dependency_overrides[get_settings] = lambda: mock_settings
        if principal is None:
            app.dependency_overrides.pop(get_principal, None)
        else:
            app.dependency_overrides[get_principal] = lambda: principal
        return TestClient(app)

    yield _client

    app.dependency_overrides.clear()


@pytest.fixture(name="admin_client")
def admin_client_fixture(client_for, admin_user: User) -> TestClient:
    return client_for(TokenClaims(uid=admin_user.id, email=admin_user.email))


@pytest.fixture(name="coach_client")
def coach_client_fixture(client_for, coach_user: User) -> TestClient:
    return client_for(TokenClaims(uid=coach_user.id, email=coach_user.email))


@pytest.fixture(name="member_client")
def member_client_fixture(client_for, member_user: User) -> TestClient:
    return client_for(TokenClaims(uid=member_user.id, email=member_user.email))


@pytest.fixture(name="unauthenticated_client")
def unauthenticated_client_fixture(client_for) -> TestClient:
    return client_for(None)
