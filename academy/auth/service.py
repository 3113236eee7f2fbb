"""Firebase Authentication Service.

Thin adapter over the Firebase Admin SDK. It covers two concerns:

- verifying the caller (ID tokens, session cookies) and minting session cookies
- the identity directory used for role mirroring: lookups by uid or email,
  listing, and writing custom claims (our per-identity metadata)

Firebase errors never leak past this module: token problems become
authentication errors, a missing identity becomes None, anything else
becomes ProviderError.
"""

import contextlib
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from typing import Any, Protocol

from firebase_admin import auth as firebase_admin_auth
from firebase_admin.auth import UserNotFoundError as IdentityNotFoundError
from firebase_admin.exceptions import FirebaseError

from academy.auth.exceptions import InvalidTokenError, SessionCookieError
from academy.core.exceptions import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Decoded token claims from Firebase.

    role and name are custom claims written by the role sync; they are only
    a hint and may lag behind the database.
    """

    uid: str
    email: str | None = None
    name: str | None = None
    role: str | None = None


@dataclass(frozen=True)
class ExternalIdentity:
    """An identity as the provider stores it."""

    provider_id: str
    email: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


class IdentityProvider(Protocol):
    """Identity directory operations the reconciliation service depends on."""

    def get_identity(self, provider_id: str) -> ExternalIdentity | None:
        """Get an identity by uid, or None if the provider has no such uid."""
        ...

    def find_identity_by_email(self, email: str) -> ExternalIdentity | None:
        """Indexed lookup by email, or None."""
        ...

    def list_identities(self) -> Iterator[ExternalIdentity]:
        """Every identity in the directory."""
        ...

    def update_metadata(
        self, provider_id: str, metadata: Mapping[str, Any]
    ) -> ExternalIdentity:
        """Replace an identity's metadata with the given mapping."""
        ...


def _to_identity(record: Any) -> ExternalIdentity:
    return ExternalIdentity(
        provider_id=record.uid,
        email=record.email,
        metadata=dict(record.custom_claims or {}),
    )


class FirebaseAuthService:
    """Firebase Admin SDK implementation of token handling and IdentityProvider."""

    @staticmethod
    def _extract_token_claims(
        decoded: dict[str, Any], allow_sub: bool = False
    ) -> TokenClaims:
        uid = decoded.get("uid")
        if allow_sub and not uid:
            uid = decoded.get("sub")

        if not uid:
            raise InvalidTokenError("Invalid token: missing uid")

        return TokenClaims(
            uid=uid,
            email=decoded.get("email"),
            name=decoded.get("name"),
            role=decoded.get("role"),
        )

    def verify_id_token(self, id_token: str) -> TokenClaims:
        """Verify an ID token and return its claims.

        Raises:
            InvalidTokenError: If verification fails
        """
        try:
            decoded = firebase_admin_auth.verify_id_token(id_token)
        except (ValueError, FirebaseError) as e:
            raise InvalidTokenError("Invalid ID token") from e
        return self._extract_token_claims(decoded)

    def verify_session_cookie(
        self, session_cookie: str, check_revoked: bool = True
    ) -> TokenClaims:
        """Verify a session cookie and return its claims.

        Raises:
            SessionCookieError: If verification fails
        """
        try:
            decoded = firebase_admin_auth.verify_session_cookie(
                session_cookie, check_revoked=check_revoked
            )
            return self._extract_token_claims(decoded, allow_sub=True)
        except (ValueError, FirebaseError) as e:
            raise SessionCookieError("Invalid session cookie") from e
        except InvalidTokenError as e:
            raise SessionCookieError(e.message) from e

    def create_session_cookie(self, id_token: str, expires_in: timedelta) -> str:
        """Create a session cookie from an ID token (1 day to 2 weeks).

        Raises:
            SessionCookieError: If cookie creation fails
        """
        try:
            return firebase_admin_auth.create_session_cookie(
                id_token, expires_in=expires_in
            )
        except (ValueError, FirebaseError) as e:
            raise SessionCookieError("Failed to create session cookie") from e

    def revoke_refresh_tokens(self, uid: str) -> None:
        """Revoke all refresh tokens for a user (best-effort)."""
        with contextlib.suppress(FirebaseError):
            firebase_admin_auth.revoke_refresh_tokens(uid)

    def get_identity(self, provider_id: str) -> ExternalIdentity | None:
        try:
            record = firebase_admin_auth.get_user(provider_id)
        except IdentityNotFoundError:
            return None
        except (ValueError, FirebaseError) as e:
            raise ProviderError(f"Failed to get identity {provider_id}") from e
        return _to_identity(record)

    def find_identity_by_email(self, email: str) -> ExternalIdentity | None:
        try:
            record = firebase_admin_auth.get_user_by_email(email)
        except IdentityNotFoundError:
            return None
        except (ValueError, FirebaseError) as e:
            raise ProviderError("Failed to look up identity by email") from e
        return _to_identity(record)

    def list_identities(self) -> Iterator[ExternalIdentity]:
        """Iterate over every identity in the project, page by page."""
        try:
            for record in firebase_admin_auth.list_users().iterate_all():
                yield _to_identity(record)
        except (ValueError, FirebaseError) as e:
            raise ProviderError("Failed to list identities") from e

    def update_metadata(
        self, provider_id: str, metadata: Mapping[str, Any]
    ) -> ExternalIdentity:
        """Overwrite custom claims and return the identity as stored afterwards.

        Raises:
            ProviderError: If the write fails (including an unknown uid)
        """
        try:
            firebase_admin_auth.set_custom_user_claims(provider_id, dict(metadata))
            record = firebase_admin_auth.get_user(provider_id)
        except (ValueError, FirebaseError) as e:
            raise ProviderError(f"Failed to update metadata of {provider_id}") from e
        logger.debug("Custom claims written", extra={"provider_id": provider_id})
        return _to_identity(record)


@lru_cache
def get_firebase_auth_service() -> FirebaseAuthService:
    """Get cached Firebase Auth Service instance.

    The Admin SDK app is initialized once in the application lifespan, so
    the service itself carries no state.
    """
    return FirebaseAuthService()
