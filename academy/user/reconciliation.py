"""Identity reconciliation between local user records and Firebase identities.

A user row created by staff gets a generated id. When that person later signs
in through Firebase, their uid differs from the row's id; resolve_self moves
the row onto the uid (matched by email) so every later lookup hits by id.

Role changes go the other way: the database role is authoritative, and
set_role_and_sync mirrors it into the identity's custom claims so newly
issued tokens carry it. The mirror is best-effort and never undoes or fails
the database write.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from fastapi import Depends

from academy.auth.exceptions import AuthorizationError
from academy.auth.service import (
    ExternalIdentity,
    FirebaseAuthService,
    IdentityProvider,
    TokenClaims,
    get_firebase_auth_service,
)
from academy.user.exceptions import UserConflictError
from academy.user.models import User, UserRole
from academy.user.repository import UserRepository, UserRepositoryDep
from academy.user.schemas import SyncStatus

logger = logging.getLogger(__name__)


def merge_metadata(
    existing: Mapping[str, Any], *, role: UserRole, name: str | None
) -> dict[str, Any]:
    """Return a copy of existing with role (and name, when known) overlaid.

    Unrelated keys are preserved; existing is never mutated.
    """
    merged = dict(existing)
    merged["role"] = role.value
    if name:
        merged["name"] = name
    return merged


@dataclass(frozen=True)
class RoleSyncResult:
    user: User
    sync_status: SyncStatus
    warning: str | None = None
    # uid the claims were written to; differs from user.id on ID_MISMATCH_SYNCED
    identity_id: str | None = None


class LinkStatus(str, Enum):
    LINKED = "linked"
    ID_MISMATCH = "id-mismatch"
    UNLINKED = "unlinked"


@dataclass(frozen=True)
class IdentityLink:
    provider_id: str
    email: str | None
    user_id: str | None
    status: LinkStatus


class IdentityReconciliationService:
    def __init__(self, users: UserRepository, identities: IdentityProvider):
        self._users = users
        self._identities = identities

    def resolve_self(self, requested_id: str, principal: TokenClaims) -> User:
        """Return the caller's own record, migrating or creating it if needed.

        Lookup order: by id, then by the principal's email (migrating the
        row's id to requested_id), then create a MEMBER record.

        Raises:
            AuthorizationError: If requested_id is not the principal's uid
            UserConflictError: If creation lost a race and the winner's row
                cannot be read back
            StoreError: If a write fails for any other reason
        """
        if requested_id != principal.uid:
            raise AuthorizationError("Users can only resolve their own record")

        user = self._users.find_by_id(requested_id)
        if user is not None:
            return user

        if principal.email:
            user = self._users.find_by_email(principal.email)
            if user is not None:
                if user.id == requested_id:
                    return user
                return self._migrate_id(user, requested_id)

        return self._create(requested_id, principal)

    def _migrate_id(self, user: User, new_id: str) -> User:
        old_id = user.id
        try:
            migrated = self._users.update_id(old_id, new_id)
        except UserConflictError:
            # Someone else owns new_id; hand back the record as it was.
            logger.warning(
                "Could not move user %s to %s; returning unmigrated record",
                old_id,
                new_id,
                extra={"user_id": old_id, "provider_id": new_id},
            )
            return self._users.find_by_id(old_id) or user

        logger.info(
            "Moved user %s to provider id %s",
            old_id,
            new_id,
            extra={"user_id": new_id},
        )
        return migrated

    def _create(self, user_id: str, principal: TokenClaims) -> User:
        try:
            user = self._users.create(
                id=user_id,
                email=principal.email,
                name=principal.name,
                role=UserRole.MEMBER,
            )
        except UserConflictError:
            # A concurrent request created the row first.
            existing = self._users.find_by_id(user_id)
            if existing is None and principal.email:
                existing = self._users.find_by_email(principal.email)
            if existing is None:
                raise
            return existing

        logger.info(
            "Created user %s on first sign-in", user_id, extra={"user_id": user_id}
        )
        return user

    def set_role_and_sync(
        self, target_id: str, new_role: UserRole, **profile: Any
    ) -> RoleSyncResult:
        """Set a user's role and mirror it into the identity provider.

        Profile fields passed alongside (name, student_name) are saved in the
        same write as the role.

        The caller must already have checked that the actor is an admin.

        Raises:
            UserNotFoundError: If target_id does not exist
            StoreError: If the role write fails
        """
        user = self._users.update_role(target_id, new_role, **profile)

        try:
            result = self._mirror_role(user)
        except Exception:
            logger.warning(
                "Role of user %s saved but identity sync failed",
                user.id,
                exc_info=True,
                extra={"user_id": user.id, "sync_status": SyncStatus.SYNC_ERROR.value},
            )
            return RoleSyncResult(
                user=user,
                sync_status=SyncStatus.SYNC_ERROR,
                warning="Role saved, but the identity provider could not be updated",
            )

        if result.sync_status is not SyncStatus.SYNCED:
            logger.warning(
                "Role sync for user %s finished with %s",
                user.id,
                result.sync_status.value,
                extra={
                    "user_id": user.id,
                    "provider_id": result.identity_id,
                    "sync_status": result.sync_status.value,
                },
            )
        return result

    def _mirror_role(self, user: User) -> RoleSyncResult:
        identity = self._identities.get_identity(user.id)
        status = SyncStatus.SYNCED
        warning = None

        if identity is None:
            identity = self._find_by_email(user.email)
            if identity is None:
                return RoleSyncResult(
                    user=user,
                    sync_status=SyncStatus.IDENTITY_NOT_FOUND,
                    warning=(
                        "Role saved, but the user has no sign-in identity yet; "
                        "it will apply once they sign in"
                    ),
                )
            # TODO: decide whether to move the row onto identity.provider_id here
            # instead of waiting for the user's next resolve_self.
            status = SyncStatus.ID_MISMATCH_SYNCED
            warning = (
                f"Identity {identity.provider_id} matched by email does not match "
                f"user id {user.id}"
            )

        merged = merge_metadata(identity.metadata, role=user.role, name=user.name)
        self._identities.update_metadata(identity.provider_id, merged)
        return RoleSyncResult(
            user=user,
            sync_status=status,
            warning=warning,
            identity_id=identity.provider_id,
        )

    def _find_by_email(self, email: str | None) -> ExternalIdentity | None:
        if not email:
            return None
        return self._identities.find_identity_by_email(email)

    def audit_identity_links(self) -> list[IdentityLink]:
        """Classify every provider identity against the users table.

        id-mismatch rows are the ones set_role_and_sync can only reach by
        email; they heal on the person's next resolve_self.
        """
        users = self._users.list_all()
        by_id = {u.id: u for u in users}
        by_email = {u.email.lower(): u for u in users if u.email}

        links = []
        for identity in self._identities.list_identities():
            if identity.provider_id in by_id:
                links.append(
                    IdentityLink(
                        identity.provider_id,
                        identity.email,
                        identity.provider_id,
                        LinkStatus.LINKED,
                    )
                )
            elif identity.email and identity.email.lower() in by_email:
                links.append(
                    IdentityLink(
                        identity.provider_id,
                        identity.email,
                        by_email[identity.email.lower()].id,
                        LinkStatus.ID_MISMATCH,
                    )
                )
            else:
                links.append(
                    IdentityLink(
                        identity.provider_id, identity.email, None, LinkStatus.UNLINKED
                    )
                )
        return links


def get_reconciliation_service(
    users: UserRepositoryDep,
    firebase_auth: Annotated[FirebaseAuthService, Depends(get_firebase_auth_service)],
) -> IdentityReconciliationService:
    return IdentityReconciliationService(users, firebase_auth)


ReconciliationDep = Annotated[
    IdentityReconciliationService, Depends(get_reconciliation_service)
]
