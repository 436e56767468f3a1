"""Pydantic schemas."""

from app.schemas.roadmap import (
    GeneratedRoadmap,
    MessageResponse,
    RoadmapGenerateRequest,
    RoadmapResponse,
    RoadmapStats,
    SkillLevel,
    StageDocument,
    TechStack,
    TopicCategory,
    TopicCompletionUpdate,
    TopicDocument,
)
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    OAuthProfile,
    RegisterRequest,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "MeResponse",
    "OAuthProfile",
    "RegisterRequest",
    "UserResponse",
    "GeneratedRoadmap",
    "MessageResponse",
    "RoadmapGenerateRequest",
    "RoadmapResponse",
    "RoadmapStats",
    "SkillLevel",
    "StageDocument",
    "TechStack",
    "TopicCategory",
    "TopicCompletionUpdate",
    "TopicDocument",
]
