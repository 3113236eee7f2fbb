"""Auth domain router.

Session cookie login/logout and the session-user endpoint the web client
polls to learn who is signed in and with which role.
"""

import logging

from fastapi import APIRouter, Request, Response
from sqlalchemy.exc import SQLAlchemyError

from academy.auth.dependencies import (
    SESSION_COOKIE_NAME,
    FirebaseAuthDep,
    PrincipalDep,
)
from academy.auth.exceptions import InvalidCredentialsError, SessionCookieError
from academy.auth.schemas import AuthMessage, SessionLoginRequest, SessionUser
from academy.auth.service import TokenClaims
from academy.core.constants import CommonResponses, Routes
from academy.core.deps import SettingsDep
from academy.core.exceptions import AppException
from academy.user.models import UserRole
from academy.user.reconciliation import (
    IdentityReconciliationService,
    ReconciliationDep,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=Routes.AUTH.prefix,
    tags=[Routes.AUTH.tag],
    responses={**CommonResponses.UNAUTHORIZED},
)


def _claims_role(principal: TokenClaims) -> UserRole:
    try:
        return UserRole(principal.role) if principal.role else UserRole.MEMBER
    except ValueError:
        return UserRole.MEMBER


def build_session_user(
    principal: TokenClaims, reconciliation: IdentityReconciliationService
) -> SessionUser:
    """Resolve the caller's record, falling back to token claims on failure.

    The fallback role may be stale (claims lag role changes) but keeps the
    client usable while the database or reconciliation is failing.
    """
    try:
        user = reconciliation.resolve_self(principal.uid, principal)
    except (AppException, SQLAlchemyError):
        logger.warning(
            "Falling back to token claims for %s",
            principal.uid,
            exc_info=True,
            extra={"provider_id": principal.uid},
        )
        return SessionUser(
            id=principal.uid,
            email=principal.email,
            name=principal.name,
            role=_claims_role(principal),
            source="claims",
        )

    return SessionUser(
        id=principal.uid,
        email=principal.email or user.email,
        name=user.name or principal.name,
        role=user.role,
        source="database",
    )


@router.post("/session", response_model=SessionUser)
async def create_session(
    payload: SessionLoginRequest,
    response: Response,
    firebase_auth: FirebaseAuthDep,
    reconciliation: ReconciliationDep,
    settings: SettingsDep,
):
    """Exchange a Firebase ID token for a session cookie.

    Also reconciles the caller's user record, so a student created by staff
    is linked to their sign-in on first login.
    """
    principal = firebase_auth.verify_id_token(payload.id_token)
    session_cookie = firebase_auth.create_session_cookie(
        payload.id_token, expires_in=settings.session_expires_in
    )

    session_user = build_session_user(principal, reconciliation)

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_cookie,
        max_age=int(settings.session_expires_in.total_seconds()),
        httponly=True,
        secure=settings.is_secure_cookie,
        samesite="lax",
    )
    return session_user


@router.post("/logout", response_model=AuthMessage)
async def logout(
    request: Request,
    response: Response,
    firebase_auth: FirebaseAuthDep,
):
    """Clear the session cookie and revoke refresh tokens."""
    session_cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_cookie:
        raise InvalidCredentialsError()

    response.delete_cookie(key=SESSION_COOKIE_NAME)

    try:
        claims = firebase_auth.verify_session_cookie(
            session_cookie, check_revoked=False
        )
    except SessionCookieError:
        # Already invalid; clearing the cookie is all that is left to do.
        return AuthMessage(message="Logout successful")

    firebase_auth.revoke_refresh_tokens(claims.uid)
    return AuthMessage(message="Logout successful")


@router.get("/me", response_model=SessionUser)
async def get_session_user(
    principal: PrincipalDep, reconciliation: ReconciliationDep
):
    """Who is signed in, and with which role."""
    return build_session_user(principal, reconciliation)
