"""API dependencies."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.agent.llm import TextGenerator
from app.core.auth import CurrentUser, get_app_settings
from app.core.config import Settings
from app.core.database import get_session

# Same callable as the auth dependency, so one request shares one session
get_db = get_session


def get_text_generator(request: Request) -> TextGenerator:
    """Text-generation client created at startup."""
    return request.app.state.text_generator


# Annotated dependencies
DBSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Generator = Annotated[TextGenerator, Depends(get_text_generator)]

__all__ = [
    "AppSettings",
    "CurrentUser",
    "DBSession",
    "Generator",
    "get_db",
    "get_text_generator",
]
