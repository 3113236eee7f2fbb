"""Group domain router.

Group CRUD with program assignment and member lists. Coaches may list
groups (they pick one when planning a lesson); everything else is admin only.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session, col, select

from academy.auth.dependencies import require_admin, require_auth, require_staff
from academy.core.constants import NO_STORE_HEADERS, CommonResponses, Routes
from academy.core.deps import SessionDep
from academy.core.exceptions import BadRequestError
from academy.group.exceptions import GroupNotFoundError, UnknownMemberError
from academy.group.models import Group, GroupMember
from academy.group.schemas import GroupCreate, GroupRead, GroupUpdate
from academy.program.exceptions import ProgramNotFoundError
from academy.program.models import Program
from academy.user.repository import UserRepository

router = APIRouter(
    prefix=Routes.GROUP.prefix,
    tags=[Routes.GROUP.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
    },
)


def _get_group(session: Session, group_id: str) -> Group:
    group = session.get(Group, group_id)
    if group is None:
        raise GroupNotFoundError()
    return group


def _ensure_program(session: Session, program_id: str) -> None:
    if session.get(Program, program_id) is None:
        raise ProgramNotFoundError()


def _build_members(session: Session, member_ids: list[str]) -> list[GroupMember]:
    unique_ids = list(dict.fromkeys(member_ids))
    found = {u.id for u in UserRepository(session).find_many(unique_ids)}
    missing = [user_id for user_id in unique_ids if user_id not in found]
    if missing:
        raise UnknownMemberError(missing)
    return [GroupMember(user_id=user_id) for user_id in unique_ids]


@router.get("/", response_model=list[GroupRead], dependencies=[Depends(require_staff)])
async def list_groups(session: SessionDep, response: Response):
    """List groups with their program and members, newest first. Admin or coach."""
    response.headers.update(NO_STORE_HEADERS)
    groups = session.exec(
        select(Group).order_by(col(Group.created_at).desc(), col(Group.id))
    ).all()
    return [GroupRead.model_validate(group) for group in groups]


@router.post(
    "/",
    response_model=GroupRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def create_group(group_create: GroupCreate, session: SessionDep):
    """Create a group. Admin only."""
    if group_create.program_id:
        _ensure_program(session, group_create.program_id)

    group = Group(
        name=group_create.name,
        description=group_create.description,
        program_id=group_create.program_id,
    )
    group.members = _build_members(session, group_create.member_ids)
    session.add(group)
    session.commit()
    session.refresh(group)
    return GroupRead.model_validate(group)


@router.get(
    "/{group_id}",
    response_model=GroupRead,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def get_group(group_id: str, session: SessionDep, response: Response):
    """Get a group by ID. Admin only."""
    response.headers.update(NO_STORE_HEADERS)
    return GroupRead.model_validate(_get_group(session, group_id))


@router.put(
    "/{group_id}",
    response_model=GroupRead,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def update_group(group_id: str, group_update: GroupUpdate, session: SessionDep):
    """Update a group. Admin only."""
    group = _get_group(session, group_id)
    update_data = group_update.model_dump(exclude_unset=True)
    if "name" in update_data and update_data["name"] is None:
        raise BadRequestError("Group name cannot be empty")

    program_id = update_data.get("program_id")
    if program_id is not None:
        _ensure_program(session, program_id)

    member_ids = update_data.pop("member_ids", None)
    for key, value in update_data.items():
        setattr(group, key, value)

    if member_ids is not None:
        new_members = _build_members(session, member_ids)
        # Flush the removals first so re-added users do not collide on the PK.
        group.members.clear()
        session.flush()
        group.members.extend(new_members)

    session.add(group)
    session.commit()
    session.refresh(group)
    return GroupRead.model_validate(group)


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
    responses={**CommonResponses.NOT_FOUND},
)
async def delete_group(group_id: str, session: SessionDep):
    """Delete a group and its memberships. Admin only."""
    group = _get_group(session, group_id)
    session.delete(group)
    session.commit()
