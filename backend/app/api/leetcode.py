import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.deps import (
    get_metadata_cache,
    get_session_manager,
    get_submission_service,
    require_user,
)
from app.models.user import User
from app.schemas.leetcode import (
    EnrichedSubmission,
    ProblemMetadataResponse,
    SessionCreate,
    SessionResponse,
    SessionValidationResponse,
    SubmissionRecord,
    UserProfile,
)
from app.services.leetcode.client import LeetCodeAuth
from app.services.leetcode.metadata_cache import ProblemMetadataCache
from app.services.leetcode.sessions import LeetCodeSessionManager
from app.services.leetcode.submissions import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leetcode", tags=["leetcode"])


async def _user_auth(user: User, manager: LeetCodeSessionManager) -> LeetCodeAuth | None:
    """Auth for the caller's active LeetCode session, if one is usable."""
    credential = await manager.get_active_session(user.id)
    if credential is None:
        return None
    try:
        return credential.auth(manager.cipher)
    except ValueError as e:
        logger.warning(f"Stored LeetCode session for user {user.id} is unusable: {e}")
        return None


@router.get("/users/{username}/submissions", response_model=list[EnrichedSubmission])
async def list_enriched_submissions(
    username: str,
    limit: int = Query(default=10, ge=1, le=20),
    user: User = Depends(require_user),
    manager: LeetCodeSessionManager = Depends(get_session_manager),
    service: SubmissionService = Depends(get_submission_service),
) -> list[EnrichedSubmission]:
    """Recent accepted submissions with difficulty and topic tags."""
    auth = await _user_auth(user, manager)
    return await service.fetch_enriched_submissions(username, limit, auth)


@router.get("/users/{username}/history", response_model=list[SubmissionRecord])
async def list_submission_history(
    username: str,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    user: User = Depends(require_user),
    manager: LeetCodeSessionManager = Depends(get_session_manager),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionRecord]:
    auth = await _user_auth(user, manager)
    return await service.fetch_submission_history(username, offset, limit, auth)


@router.get("/users/{username}/profile", response_model=UserProfile)
async def get_user_profile(
    username: str,
    user: User = Depends(require_user),
    service: SubmissionService = Depends(get_submission_service),
) -> UserProfile:
    return await service.fetch_user_profile(username)


@router.get("/problems/{title_slug}", response_model=ProblemMetadataResponse)
async def get_problem(
    title_slug: str,
    user: User = Depends(require_user),
    manager: LeetCodeSessionManager = Depends(get_session_manager),
    cache: ProblemMetadataCache = Depends(get_metadata_cache),
) -> ProblemMetadataResponse:
    """Cached problem metadata, refreshed from LeetCode when stale."""
    auth = await _user_auth(user, manager)
    lookup = await cache.get_or_refresh(title_slug, auth)
    if not lookup.found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Problem not found: {title_slug}",
        )
    return ProblemMetadataResponse.model_validate(lookup.metadata)


@router.post("/session", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def store_session(
    body: SessionCreate,
    user: User = Depends(require_user),
    manager: LeetCodeSessionManager = Depends(get_session_manager),
) -> SessionResponse:
    """Store a LeetCode session for the caller, replacing any active one."""
    if not body.session_data.get("LEETCODE_SESSION") and not body.session_data.get("sessionCookie"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_data must include LEETCODE_SESSION",
        )
    session = await manager.store_session(user.id, body.session_data, body.expires_at)
    return SessionResponse.model_validate(session)


@router.post("/session/validate", response_model=SessionValidationResponse)
async def validate_session(
    user: User = Depends(require_user),
    manager: LeetCodeSessionManager = Depends(get_session_manager),
) -> SessionValidationResponse:
    if not user.leetcode_username:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No LeetCode username configured for this user",
        )
    credential = await manager.get_active_session(user.id)
    if credential is None:
        return SessionValidationResponse(valid=False)
    valid = await manager.validate_session(credential, user.leetcode_username)
    return SessionValidationResponse(valid=valid)


@router.delete("/session")
async def invalidate_session(
    user: User = Depends(require_user),
    manager: LeetCodeSessionManager = Depends(get_session_manager),
) -> dict[str, str]:
    await manager.invalidate_session(user.id)
    return {"message": "LeetCode session invalidated"}
