"""Roadmap model and its derived progress fields."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.user import User


class Roadmap(Base):
    """A generated learning roadmap.

    The stage/topic tree lives in the ``stages`` JSON column, so the whole
    roadmap is written by a single INSERT or UPDATE. ``total_topics``,
    ``completed_topics`` and ``progress`` are derived from that tree on every
    flush (see ``apply_progress``).
    """

    __tablename__ = "roadmaps"

    id: Mapped[int] = mapped_column(primary_key=True)
    created_by: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    title: Mapped[str] = mapped_column(String)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    total_duration: Mapped[str | None] = mapped_column(String, default=None)

    # Taken from the request, not the AI output
    skill_level: Mapped[str] = mapped_column(String)  # beginner | intermediate | advanced
    include_projects: Mapped[bool] = mapped_column(Boolean, default=False)
    tech_stack: Mapped[dict[str, list[str]]] = mapped_column(JSON, default=dict)

    stages: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    # Derived
    total_topics: Mapped[int] = mapped_column(Integer, default=0)
    completed_topics: Mapped[int] = mapped_column(Integer, default=0)
    progress: Mapped[int] = mapped_column(Integer, default=0)

    creator: Mapped["User"] = relationship(back_populates="roadmaps", lazy="raise")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


# ============================================================================
# Progress Calculation
# ============================================================================


def count_topics(stages: list[dict[str, Any]]) -> tuple[int, int]:
    """Return ``(total, completed)`` topic counts across all stages."""
    total = 0
    completed = 0
    for stage in stages:
        topics = stage.get("topics") or []
        total += len(topics)
        completed += sum(1 for topic in topics if topic.get("completed"))
    return total, completed


def calc_progress(completed: int, total: int) -> int:
    """Percentage of completed topics, rounded half up; 0 for an empty roadmap."""
    if total <= 0:
        return 0
    # floor(100 * completed / total + 0.5) in integer arithmetic
    return (200 * completed + total) // (2 * total)


def apply_progress(roadmap: Roadmap) -> None:
    """Recompute the derived fields from the current stage tree."""
    total, completed = count_topics(roadmap.stages or [])
    roadmap.total_topics = total
    roadmap.completed_topics = completed
    roadmap.progress = calc_progress(completed, total)
    roadmap.updated_at = datetime.utcnow()


@event.listens_for(Roadmap, "before_insert")
@event.listens_for(Roadmap, "before_update")
def _recalculate_before_write(mapper, connection, target: Roadmap) -> None:
    apply_progress(target)
