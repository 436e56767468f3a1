"""API routes."""

from app.api.routes import auth, roadmaps

__all__ = ["auth", "roadmaps"]
