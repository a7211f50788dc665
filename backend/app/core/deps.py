# backend/app/core/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_session
from app.core.security import get_cipher, hash_api_key
from app.models.user import User
from app.services.leetcode.client import LeetCodeClient
from app.services.leetcode.metadata_cache import ProblemMetadataCache
from app.services.leetcode.sessions import LeetCodeSessionManager
from app.services.leetcode.submissions import SubmissionService

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def get_api_key_header(
    api_key: str | None = Depends(api_key_header),
) -> str | None:
    return api_key


async def get_current_user(
    db: AsyncSession = Depends(get_session),
    api_key: str | None = Depends(get_api_key_header),
) -> User | None:
    """Resolve the caller from the X-API-Key header."""
    if not api_key:
        return None

    result = await db.execute(
        select(User).where(
            User.api_key_hash == hash_api_key(api_key),
            User.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def require_user(
    user: User | None = Depends(get_current_user),
) -> User:
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing authentication",
        )
    return user


def get_leetcode_client() -> LeetCodeClient:
    """Dependency for the LeetCode GraphQL client."""
    return LeetCodeClient()


def get_metadata_cache(
    db: AsyncSession = Depends(get_session),
    client: LeetCodeClient = Depends(get_leetcode_client),
) -> ProblemMetadataCache:
    return ProblemMetadataCache(db, client)


def get_session_manager(
    db: AsyncSession = Depends(get_session),
    client: LeetCodeClient = Depends(get_leetcode_client),
) -> LeetCodeSessionManager:
    return LeetCodeSessionManager(db, client, get_cipher())


def get_submission_service(
    client: LeetCodeClient = Depends(get_leetcode_client),
    cache: ProblemMetadataCache = Depends(get_metadata_cache),
) -> SubmissionService:
    return SubmissionService(client, cache)
