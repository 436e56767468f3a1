"""Roadmap service: generation, ownership-scoped queries and topic progress."""

from datetime import datetime

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from app.agent.llm import TextGenerator
from app.agent.llm_utils import Unparseable, extract_json_object
from app.core.exceptions import GenerationParseError, NotFoundError, SchemaValidationError
from app.core.logging import get_logger
from app.models.roadmap import Roadmap, calc_progress
from app.schemas.roadmap import (
    GeneratedRoadmap,
    RoadmapGenerateRequest,
    RoadmapStats,
    StageDocument,
)
from app.services.roadmap_prompts import build_generation_prompt

logger = get_logger(__name__)


# ============================================================================
# Generation
# ============================================================================


def parse_generated_roadmap(raw_text: str) -> GeneratedRoadmap:
    """Turn the model's raw reply into a validated roadmap outline.

    Raises:
        GenerationParseError: If no JSON object can be extracted.
        SchemaValidationError: If the object lacks a required field or uses
            an unknown topic category.
    """
    result = extract_json_object(raw_text)
    if isinstance(result, Unparseable):
        logger.warning("Unusable generation reply", reason=result.reason)
        raise GenerationParseError("Invalid response from AI")

    try:
        return GeneratedRoadmap.model_validate(result.value)
    except ValidationError as e:
        raise SchemaValidationError(f"Roadmap validation failed: {e}") from e


async def generate_roadmap(
    db: AsyncSession,
    generator: TextGenerator,
    user_id: int,
    request: RoadmapGenerateRequest,
) -> Roadmap:
    """Generate a roadmap with the text-generation model and persist it.

    Skill level, project flag and tech stack come from the request; title,
    description, duration and stages come from the model. The roadmap is
    inserted with ``created_by=user_id``, which is what adds it to the
    user's roadmaps. Nothing is written if any step fails.

    Note: This function commits the transaction.
    """
    prompt = build_generation_prompt(request)
    logger.info(
        "Generating roadmap",
        user_id=user_id,
        roadmap_name=request.roadmap_name,
        skill_level=request.skill_level.value,
    )

    raw_text = await generator.generate(prompt)
    outline = parse_generated_roadmap(raw_text)

    roadmap = Roadmap(
        created_by=user_id,
        title=outline.title,
        description=outline.description,
        total_duration=outline.total_duration,
        skill_level=request.skill_level.value,
        include_projects=request.include_projects,
        tech_stack=request.tech_stack.model_dump(mode="json"),
        stages=[
            StageDocument.from_generated(stage).model_dump(mode="json")
            for stage in outline.stages
        ],
    )
    db.add(roadmap)
    await db.commit()
    await db.refresh(roadmap)

    logger.info(
        "Roadmap created",
        roadmap_id=roadmap.id,
        user_id=user_id,
        total_topics=roadmap.total_topics,
    )
    return roadmap


# ============================================================================
# Queries
# ============================================================================


async def list_roadmaps(db: AsyncSession, user_id: int) -> list[Roadmap]:
    """List a user's roadmaps, newest first."""
    result = await db.execute(
        select(Roadmap)
        .where(Roadmap.created_by == user_id)
        .order_by(Roadmap.created_at.desc(), Roadmap.id.desc())
    )
    return list(result.scalars().all())


async def get_roadmap(db: AsyncSession, user_id: int, roadmap_id: int) -> Roadmap:
    """Get one of the user's roadmaps.

    Raises:
        NotFoundError: If the roadmap does not exist or belongs to someone else.
    """
    result = await db.execute(
        select(Roadmap).where(Roadmap.id == roadmap_id, Roadmap.created_by == user_id)
    )
    roadmap = result.scalar_one_or_none()
    if roadmap is None:
        raise NotFoundError("Roadmap not found")
    return roadmap


async def get_roadmap_stats(db: AsyncSession, user_id: int) -> RoadmapStats:
    """Totals shown on the dashboard."""
    result = await db.execute(
        select(
            func.count(Roadmap.id),
            func.coalesce(func.sum(Roadmap.progress), 0),
            func.coalesce(func.sum(Roadmap.total_topics), 0),
            func.coalesce(func.sum(Roadmap.completed_topics), 0),
        ).where(Roadmap.created_by == user_id)
    )
    count, progress_sum, total_topics, completed_topics = result.one()
    return RoadmapStats(
        total_roadmaps=count,
        # Mean of the per-roadmap percentages, rounded like a single roadmap's
        average_progress=calc_progress(int(progress_sum), count * 100) if count else 0,
        total_topics=int(total_topics),
        completed_topics=int(completed_topics),
    )


# ============================================================================
# Updates
# ============================================================================


async def set_topic_completion(
    db: AsyncSession,
    user_id: int,
    roadmap_id: int,
    topic_id: str,
    completed: bool,
) -> Roadmap:
    """Mark a topic complete or incomplete and persist the roadmap.

    Only the first topic with ``topic_id`` (in stage, then topic order) is
    changed. The write re-runs the progress recalculation on the model.

    Raises:
        NotFoundError: If the roadmap is not the user's, or has no such topic.

    Note: This function commits the transaction.
    """
    roadmap = await get_roadmap(db, user_id, roadmap_id)

    topic = next(
        (
            t
            for stage in roadmap.stages
            for t in stage.get("topics") or []
            if t.get("id") == topic_id
        ),
        None,
    )
    if topic is None:
        raise NotFoundError("Topic not found")

    topic["completed"] = completed
    topic["completed_at"] = datetime.utcnow().isoformat() if completed else None
    # In-place JSON edits are invisible to change tracking
    flag_modified(roadmap, "stages")

    await db.commit()
    await db.refresh(roadmap)

    logger.info(
        "Topic completion updated",
        roadmap_id=roadmap_id,
        topic_id=topic_id,
        completed=completed,
        progress=roadmap.progress,
    )
    return roadmap


async def delete_roadmap(db: AsyncSession, user_id: int, roadmap_id: int) -> None:
    """Delete one of the user's roadmaps.

    Raises:
        NotFoundError: If the roadmap does not exist or belongs to someone else.

    Note: This function commits the transaction.
    """
    roadmap = await get_roadmap(db, user_id, roadmap_id)
    await db.delete(roadmap)
    await db.commit()
    logger.info("Roadmap deleted", roadmap_id=roadmap_id, user_id=user_id)
