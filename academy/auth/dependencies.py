"""Auth domain dependencies.

get_principal verifies the caller with Firebase; get_current_user resolves
that principal to a local user. Role gates build on get_current_user, so a
caller without a local row is refused (403), never silently provisioned.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from academy.auth.exceptions import (
    AdminRequiredError,
    InvalidCredentialsError,
    InvalidTokenError,
    SessionCookieError,
    StaffRequiredError,
)
from academy.auth.service import (
    FirebaseAuthService,
    TokenClaims,
    get_firebase_auth_service,
)
from academy.user.exceptions import UserNotProvisionedError
from academy.user.models import User
from academy.user.repository import UserRepositoryDep

SESSION_COOKIE_NAME = "session"

security = HTTPBearer(auto_error=False)

FirebaseAuthDep = Annotated[FirebaseAuthService, Depends(get_firebase_auth_service)]


def get_principal(
    request: Request,
    firebase_auth: FirebaseAuthDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(security)
    ] = None,
) -> TokenClaims:
    """Verify Firebase authentication and return the caller's claims.

    Supports two authentication methods (in priority order):
    1. Session cookie (web app)
    2. Bearer ID token (API clients)

    Raises:
        InvalidTokenError: If the presented cookie or token is invalid
        InvalidCredentialsError: If nothing was presented
    """
    session_cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if session_cookie:
        try:
            return firebase_auth.verify_session_cookie(
                session_cookie, check_revoked=True
            )
        except SessionCookieError as e:
            raise InvalidTokenError() from e

    if credentials is not None:
        return firebase_auth.verify_id_token(credentials.credentials)

    raise InvalidCredentialsError()


PrincipalDep = Annotated[TokenClaims, Depends(get_principal)]


def get_current_user(principal: PrincipalDep, users: UserRepositoryDep) -> User:
    """Return the local user whose id is the principal's uid.

    Raises:
        UserNotProvisionedError: If the principal has no local user yet
    """
    user = users.find_by_id(principal.uid)
    if user is None:
        raise UserNotProvisionedError()
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_auth(_principal: PrincipalDep) -> None:
    """Require a verified caller without injecting anything.

    Use as a router-level dependency:
        router = APIRouter(dependencies=[Depends(require_auth)])
    """


def get_admin_user(user: CurrentUserDep) -> User:
    """Raises AdminRequiredError unless the current user is an ADMIN."""
    if not user.is_admin:
        raise AdminRequiredError()
    return user


def get_staff_user(user: CurrentUserDep) -> User:
    """Raises StaffRequiredError unless the current user is an ADMIN or COACH."""
    if not user.is_staff:
        raise StaffRequiredError()
    return user


AdminUserDep = Annotated[User, Depends(get_admin_user)]
StaffUserDep = Annotated[User, Depends(get_staff_user)]


def require_admin(_user: AdminUserDep) -> None:
    """Endpoint-level admin gate: dependencies=[Depends(require_admin)]."""


def require_staff(_user: StaffUserDep) -> None:
    """Endpoint-level admin-or-coach gate."""
