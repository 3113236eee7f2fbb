"""Shared dependency type aliases for FastAPI routes.

Domain-specific aliases live next to their domain
(e.g. academy.auth.dependencies.CurrentUserDep).
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from academy.core.settings import Settings, get_settings
from academy.db.engine import get_session

# Database session
SessionDep = Annotated[Session, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]
