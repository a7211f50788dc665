# backend/app/models/session.py
from uuid import UUID, uuid4
from datetime import datetime
from sqlalchemy import Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, utcnow


class LeetCodeSession(Base):
    """Encrypted LeetCode session for a user. At most one row per user is active."""
    __tablename__ = "leetcode_sessions"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    # Ciphertext only; see SecretCipher
    session_data: Mapped[str] = mapped_column(Text, nullable=False)
    csrf_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_used_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_leetcode_sessions_user_active", "user_id", "is_active"),
    )
