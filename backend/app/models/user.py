# backend/app/models/user.py
from uuid import UUID, uuid4
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # LeetCode account tracked for this user
    leetcode_username: Mapped[str | None] = mapped_column(String(255), index=True)

    # API key for programmatic access (HMAC-SHA256, see core.security)
    api_key_hash: Mapped[str | None] = mapped_column(String(64), unique=True)
