"""Cached LeetCode problem metadata."""
import enum
from datetime import datetime
from sqlalchemy import String, Integer, Float, Boolean, Enum, JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, TimestampMixin, utcnow


class Difficulty(str, enum.Enum):
    """Problem difficulty as reported by LeetCode."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> "Difficulty":
        for member in cls:
            if member.value == value:
                return member
        return cls.UNKNOWN


class ProblemMetadata(Base, TimestampMixin):
    """Problem metadata keyed by title slug, refreshed from LeetCode when stale."""
    __tablename__ = "problem_metadata"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title_slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    question_id: Mapped[int] = mapped_column(Integer, nullable=False)
    question_frontend_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(Enum(Difficulty), default=Difficulty.UNKNOWN)
    ac_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dislikes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_paid_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    topic_tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    last_fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
