from app.models.base import Base, TimestampMixin
from app.models.user import User
from app.models.session import LeetCodeSession
from app.models.problem import ProblemMetadata, Difficulty

__all__ = [
    "Base", "TimestampMixin",
    "User",
    "LeetCodeSession",
    "ProblemMetadata", "Difficulty",
]
