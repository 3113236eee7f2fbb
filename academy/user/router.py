"""User domain router.

User management routes. Reading your own record by id is also where a
first sign-in gets reconciled with an existing or new user row.
"""

from fastapi import APIRouter, Depends, status

from academy.auth.dependencies import (
    PrincipalDep,
    require_admin,
    require_auth,
    require_staff,
)
from academy.auth.exceptions import AuthorizationError
from academy.core.constants import CommonResponses, Routes
from academy.core.exceptions import BadRequestError
from academy.user.exceptions import (
    EmailExistsError,
    UserConflictError,
    UserNotFoundError,
)
from academy.user.reconciliation import ReconciliationDep
from academy.user.repository import UserRepositoryDep
from academy.user.schemas import (
    IdentityLinkRead,
    UserCreate,
    UserCreated,
    UserRead,
    UserUpdate,
    UserUpdated,
)

router = APIRouter(
    prefix=Routes.USER.prefix,
    tags=[Routes.USER.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
    },
)


@router.get("/", response_model=list[UserRead], dependencies=[Depends(require_staff)])
async def list_users(users: UserRepositoryDep):
    """List all users, newest first. Admin or coach."""
    return users.list_all()


@router.post(
    "/",
    response_model=UserCreated,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
    responses={**CommonResponses.CONFLICT},
)
async def create_user(user_create: UserCreate, users: UserRepositoryDep):
    """Create a student who has not signed in yet. Admin or coach.

    The record gets a generated id; it is moved onto the person's Firebase
    uid the first time they sign in with the same email.
    """
    if user_create.email and users.find_by_email(user_create.email):
        raise EmailExistsError()

    try:
        user = users.create(**user_create.model_dump())
    except UserConflictError as e:
        raise EmailExistsError() from e

    return UserCreated(message="User created", user=UserRead.model_validate(user))


@router.get(
    "/students", response_model=list[str], dependencies=[Depends(require_staff)]
)
async def list_student_names(users: UserRepositoryDep):
    """Sorted unique names to pick students from. Admin or coach."""
    return users.list_student_names()


@router.get(
    "/identity-links",
    response_model=list[IdentityLinkRead],
    dependencies=[Depends(require_admin)],
)
async def list_identity_links(reconciliation: ReconciliationDep):
    """Firebase identities and the user rows they map to. Admin only."""
    return [
        IdentityLinkRead(
            provider_id=link.provider_id,
            email=link.email,
            user_id=link.user_id,
            status=link.status.value,
        )
        for link in reconciliation.audit_identity_links()
    ]


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user(
    user_id: str,
    principal: PrincipalDep,
    users: UserRepositoryDep,
    reconciliation: ReconciliationDep,
):
    """Get a user by ID.

    Callers may read their own record (reconciling it on first sign-in);
    admins may read anyone's.
    """
    if user_id == principal.uid:
        return reconciliation.resolve_self(user_id, principal)

    user = users.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError()

    caller = users.find_by_id(principal.uid)
    if caller is None or not caller.is_admin:
        raise AuthorizationError()
    return user


@router.put(
    "/{user_id}",
    response_model=UserUpdated,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    users: UserRepositoryDep,
    reconciliation: ReconciliationDep,
):
    """Update a user's names and role. Admin only.

    Names and role are saved in one write; a role change is then mirrored to
    the user's Firebase custom claims. A failed mirror is reported in
    `warning`, not as an error.
    """
    user = users.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError()

    update_data = user_update.model_dump(exclude_unset=True)
    if "name" in update_data and update_data["name"] is None:
        raise BadRequestError("User name cannot be empty")

    role = update_data.pop("role", None)
    if role is None:
        if update_data:
            user = users.update_profile(user, **update_data)
        return UserUpdated(message="User updated", user=UserRead.model_validate(user))

    result = reconciliation.set_role_and_sync(user_id, role, **update_data)
    return UserUpdated(
        message="User updated",
        user=UserRead.model_validate(result.user),
        sync_status=result.sync_status,
        warning=result.warning,
    )
