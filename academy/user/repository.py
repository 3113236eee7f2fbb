"""User persistence.

All reads and writes of the users table go through UserRepository so the
reconciliation service can be exercised against any Session, and so unique
key violations surface as UserConflictError instead of driver exceptions.
"""

import logging
from collections.abc import Sequence
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from academy.core.exceptions import StoreError
from academy.db.engine import get_session
from academy.user.exceptions import UserConflictError, UserNotFoundError
from academy.user.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, session: Session):
        self._session = session

    def find_by_id(self, user_id: str) -> User | None:
        return self._session.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive; Firebase reports emails lowercased."""
        statement = select(User).where(func.lower(User.email) == email.lower())
        return self._session.exec(statement).first()

    def find_many(self, user_ids: Sequence[str]) -> list[User]:
        if not user_ids:
            return []
        return list(
            self._session.exec(select(User).where(col(User.id).in_(user_ids))).all()
        )

    def list_all(self) -> list[User]:
        """All users, newest first."""
        statement = select(User).order_by(
            col(User.created_at).desc(), col(User.id).asc()
        )
        return list(self._session.exec(statement).all())

    def list_student_names(self) -> list[str]:
        """Every non-empty student name and display name, de-duplicated and sorted."""
        names: set[str] = set()
        for name, student_name in self._session.exec(
            select(User.name, User.student_name)
        ).all():
            if student_name:
                names.add(student_name)
            if name:
                names.add(name)
        return sorted(names)

    def create(self, **fields: Any) -> User:
        """Insert a new user.

        Raises:
            UserConflictError: If the id or email is already taken
            StoreError: For any other database failure
        """
        if fields.get("email"):
            fields["email"] = fields["email"].lower()
        user = User(**fields)
        self._session.add(user)
        self._commit(f"create user {user.id}")
        self._session.refresh(user)
        return user

    def update_id(self, old_id: str, new_id: str) -> User:
        """Change a user's primary key, keeping every other column.

        Raises:
            UserNotFoundError: If no user has old_id
            UserConflictError: If new_id (or the email) already belongs to another row
            StoreError: For any other database failure
        """
        user = self.find_by_id(old_id)
        if user is None:
            raise UserNotFoundError()

        user.id = new_id
        self._session.add(user)
        self._commit(f"move user {old_id} to {new_id}")
        self._session.refresh(user)
        return user

    def update_role(self, user_id: str, role: UserRole, **profile: Any) -> User:
        """Set a user's role, and any profile fields given, in one commit.

        Raises:
            UserNotFoundError: If the user does not exist
            StoreError: If the write fails
        """
        user = self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        user.role = role
        for key, value in profile.items():
            setattr(user, key, value)
        self._session.add(user)
        self._commit(f"update role of user {user_id}")
        self._session.refresh(user)
        return user

    def update_profile(self, user: User, **fields: Any) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self._session.add(user)
        self._commit(f"update profile of user {user.id}")
        self._session.refresh(user)
        return user

    def _commit(self, action: str) -> None:
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            logger.info("Unique key conflict on %s", action)
            raise UserConflictError() from e
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error("Database write failed on %s", action, exc_info=True)
            raise StoreError(f"Failed to {action}") from e


def get_user_repository(
    session: Annotated[Session, Depends(get_session)],
) -> UserRepository:
    return UserRepository(session)


UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
