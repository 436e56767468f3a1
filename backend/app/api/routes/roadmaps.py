"""Roadmap API routes."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.deps import CurrentUser, DBSession, Generator
from app.core.exceptions import GenerationError, SchemaValidationError
from app.core.logging import get_logger
from app.models.roadmap import Roadmap
from app.schemas.roadmap import (
    MessageResponse,
    RoadmapGenerateRequest,
    RoadmapResponse,
    RoadmapStats,
    TopicCompletionUpdate,
)
from app.services import roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


@router.post(
    "/generate",
    response_model=RoadmapResponse,
    status_code=status.HTTP_201_CREATED,
    responses={500: {"description": "Generation failed"}},
)
async def generate_roadmap(
    data: RoadmapGenerateRequest,
    db: DBSession,
    user: CurrentUser,
    generator: Generator,
) -> Roadmap | JSONResponse:
    """Generate a roadmap with the AI model and save it for the current user."""
    try:
        return await roadmap_service.generate_roadmap(db, generator, user.id, data)
    except (GenerationError, SchemaValidationError) as e:
        logger.error("Roadmap generation failed", user_id=user.id, error=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to generate roadmap", "error": e.message},
        )


@router.get("", response_model=list[RoadmapResponse])
async def list_roadmaps(db: DBSession, user: CurrentUser) -> list[Roadmap]:
    """List the current user's roadmaps, newest first."""
    return await roadmap_service.list_roadmaps(db, user.id)


@router.get("/stats", response_model=RoadmapStats)
async def get_roadmap_stats(db: DBSession, user: CurrentUser) -> RoadmapStats:
    """Dashboard totals for the current user."""
    return await roadmap_service.get_roadmap_stats(db, user.id)


@router.get("/{roadmap_id}", response_model=RoadmapResponse)
async def get_roadmap(roadmap_id: int, db: DBSession, user: CurrentUser) -> Roadmap:
    """Get a roadmap by ID."""
    return await roadmap_service.get_roadmap(db, user.id, roadmap_id)


@router.patch("/{roadmap_id}/topics/{topic_id}/complete", response_model=RoadmapResponse)
async def update_topic_completion(
    roadmap_id: int,
    topic_id: str,
    data: TopicCompletionUpdate,
    db: DBSession,
    user: CurrentUser,
) -> Roadmap:
    """Mark a topic complete or incomplete."""
    return await roadmap_service.set_topic_completion(
        db, user.id, roadmap_id, topic_id, data.completed
    )


@router.delete("/{roadmap_id}", response_model=MessageResponse)
async def delete_roadmap(roadmap_id: int, db: DBSession, user: CurrentUser) -> MessageResponse:
    """Delete a roadmap."""
    await roadmap_service.delete_roadmap(db, user.id, roadmap_id)
    return MessageResponse(message="Roadmap deleted successfully")
