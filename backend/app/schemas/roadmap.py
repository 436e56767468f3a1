"""Roadmap schemas for API requests, responses and the stored stage tree.

Field names are snake_case in Python and in the ``stages`` JSON column; the
wire format is camelCase through ``to_camel`` aliases, which is also the shape
the text-generation model is asked to return.
"""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class TopicCategory(str, Enum):
    LANGUAGE = "language"
    FRAMEWORK = "framework"
    LIBRARY = "library"
    DATABASE = "database"
    DEVOPS = "devops"
    OTHER = "other"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TechStack(CamelModel):
    """Technology selections, one independent list per group."""

    languages: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    libraries: list[str] = Field(default_factory=list)
    databases: list[str] = Field(default_factory=list)
    devops: list[str] = Field(default_factory=list)
    other_tech: list[str] = Field(default_factory=list)


class RoadmapGenerateRequest(CamelModel):
    """Generate a new roadmap."""

    roadmap_name: str = Field(min_length=1)
    skill_level: SkillLevel
    include_projects: bool = False
    tech_stack: TechStack = Field(default_factory=TechStack)


# ============================================================================
# Stage / Topic documents
# ============================================================================


class GeneratedTopic(CamelModel):
    """A topic as returned by the text-generation model."""

    topic_title: str
    category: TopicCategory
    resources: list[str] = Field(default_factory=list)
    project: str | None = None


class GeneratedStage(CamelModel):
    stage_title: str
    duration: str | None = None
    topics: list[GeneratedTopic] = Field(default_factory=list)


class GeneratedRoadmap(CamelModel):
    """The JSON object the text-generation model is asked to produce."""

    title: str
    description: str | None = None
    total_duration: str | None = None
    stages: list[GeneratedStage] = Field(default_factory=list)


def new_topic_id() -> str:
    return uuid.uuid4().hex


class TopicDocument(GeneratedTopic):
    """A stored topic with its completion state."""

    id: str = Field(default_factory=new_topic_id)
    completed: bool = False
    completed_at: datetime | None = None


class StageDocument(CamelModel):
    stage_title: str
    duration: str | None = None
    topics: list[TopicDocument] = Field(default_factory=list)

    @classmethod
    def from_generated(cls, stage: GeneratedStage) -> "StageDocument":
        """Build a fresh stage: new topic ids, nothing completed."""
        return cls(
            stage_title=stage.stage_title,
            duration=stage.duration,
            topics=[TopicDocument(**topic.model_dump()) for topic in stage.topics],
        )


# ============================================================================
# API payloads
# ============================================================================


class TopicCompletionUpdate(BaseModel):
    """Mark a topic complete or incomplete."""

    completed: bool


class RoadmapResponse(CamelModel):
    """Roadmap response."""

    id: int
    title: str
    description: str | None
    total_duration: str | None
    skill_level: SkillLevel
    include_projects: bool
    tech_stack: TechStack
    stages: list[StageDocument]
    total_topics: int
    completed_topics: int
    progress: int
    created_by: int
    created_at: datetime
    updated_at: datetime


class RoadmapStats(CamelModel):
    """Dashboard totals across a user's roadmaps."""

    total_roadmaps: int
    average_progress: int
    total_topics: int
    completed_topics: int


class MessageResponse(BaseModel):
    message: str
