"""Program domain router."""

from fastapi import APIRouter, Depends, status
from sqlmodel import col, select

from academy.auth.dependencies import require_admin, require_auth, require_staff
from academy.core.constants import CommonResponses, Routes
from academy.core.deps import SessionDep
from academy.program.models import Program
from academy.program.schemas import ProgramCreate, ProgramRead

router = APIRouter(
    prefix=Routes.PROGRAM.prefix,
    tags=[Routes.PROGRAM.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
    },
)


@router.get(
    "/", response_model=list[ProgramRead], dependencies=[Depends(require_staff)]
)
async def list_programs(session: SessionDep):
    """List programs alphabetically. Admin or coach."""
    return session.exec(select(Program).order_by(col(Program.title))).all()


@router.post(
    "/",
    response_model=ProgramRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_program(program_create: ProgramCreate, session: SessionDep):
    """Create a program. Admin only."""
    program = Program.model_validate(program_create)
    session.add(program)
    session.commit()
    session.refresh(program)
    return program
