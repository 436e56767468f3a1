"""Service layer modules."""

from app.services import (
    auth_service,
    credentials,
    oauth,
    roadmap_prompts,
    roadmap_service,
)

__all__ = [
    "auth_service",
    "credentials",
    "oauth",
    "roadmap_prompts",
    "roadmap_service",
]
