"""Authentication dependencies.

Every roadmap route depends on ``get_current_user``, which reads the
``Authorization: Bearer <token>`` header and resolves it through
``TokenVerifier``. A missing or bad token fails with 401.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.database import get_session
from app.models.user import User
from app.services.credentials import TokenVerifier

# auto_error=False so a missing header takes the same 401 path as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> User:
    """Get the user the request's bearer token belongs to."""
    token = credentials.credentials if credentials else None
    return await TokenVerifier(settings).verify(db, token)


# Type alias for FastAPI dependency
CurrentUser = Annotated[User, Depends(get_current_user)]
