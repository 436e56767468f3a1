"""Database models."""

from app.models.roadmap import Roadmap
from app.models.user import User

__all__ = [
    "User",
    "Roadmap",
]
