"""Submission retrieval and enrichment with cached problem metadata."""
import json
import logging
from datetime import datetime, timezone

from app.core.config import settings
from app.schemas.leetcode import (
    EnrichedSubmission,
    RecentSubmission,
    SubmissionRecord,
    UserProfile,
)
from app.services.leetcode.client import LeetCodeAuth, LeetCodeClient
from app.services.leetcode.errors import NotFoundError, UnknownLeetCodeError
from app.services.leetcode.metadata_cache import ProblemMetadataCache

logger = logging.getLogger(__name__)


class SubmissionService:
    """Fetches a user's LeetCode activity and joins it with problem metadata."""

    def __init__(self, client: LeetCodeClient, metadata_cache: ProblemMetadataCache):
        self.client = client
        self.metadata_cache = metadata_cache

    async def fetch_recent_submissions(
        self,
        username: str,
        limit: int | None = None,
        auth: LeetCodeAuth | None = None,
    ) -> list[RecentSubmission]:
        """Most recent accepted submissions, newest first. Errors propagate."""
        if limit is None:
            limit = settings.recent_submissions_limit
        submissions = await self.client.recent_ac_submissions(username, limit, auth)
        if not submissions:
            logger.warning(f"No submissions returned for user: {username}")
        logger.debug(f"Fetched {len(submissions)} submissions for {username}")
        return submissions

    async def fetch_enriched_submissions(
        self,
        username: str,
        limit: int | None = None,
        auth: LeetCodeAuth | None = None,
    ) -> list[EnrichedSubmission]:
        """
        Recent accepted submissions joined with problem metadata.

        A failed metadata lookup degrades only its own row (difficulty
        "Unknown", enrichment fields at defaults); the batch always has one
        row per submission, in upstream order.

        Args:
            username: LeetCode username
            limit: Maximum submissions to fetch (defaults to settings)
            auth: Optional session material for paid-only problems
        """
        submissions = await self.fetch_recent_submissions(username, limit, auth)

        enriched = []
        for submission in submissions:
            try:
                lookup = await self.metadata_cache.get_or_refresh(submission.title_slug, auth)
            except Exception as e:
                logger.warning(f"Failed to enrich submission {submission.title_slug}: {e}")
                enriched.append(self._to_enriched(submission))
                continue

            if not lookup.found:
                logger.warning(
                    f"No metadata for submission {submission.title_slug}: {lookup.error}"
                )
            enriched.append(self._to_enriched(submission, lookup.metadata))

        return enriched

    @staticmethod
    def _to_enriched(submission: RecentSubmission, metadata=None) -> EnrichedSubmission:
        row = EnrichedSubmission(
            id=submission.id,
            title=submission.title,
            title_slug=submission.title_slug,
            timestamp=submission.submitted_at,
            status=submission.status_display,
            language=submission.lang,
        )
        if metadata is not None:
            row.difficulty = metadata.difficulty.value
            row.question_id = metadata.question_id
            row.is_paid_only = metadata.is_paid_only
            row.topic_tags = list(metadata.topic_tags or [])
        return row

    async def fetch_submission_history(
        self,
        username: str,
        offset: int = 0,
        limit: int = 20,
        auth: LeetCodeAuth | None = None,
    ) -> list[SubmissionRecord]:
        """Recent submissions of any status, with runtime and memory."""
        return await self.client.user_submissions(username, offset, limit, auth)

    async def fetch_user_profile(
        self,
        username: str,
        auth: LeetCodeAuth | None = None,
    ) -> UserProfile:
        """
        Profile statistics from the current year's submission calendar.

        Raises:
            NotFoundError: the user does not exist or LeetCode returned no data
        """
        year = datetime.now(timezone.utc).year
        calendar = await self.client.user_calendar(username, year, auth)
        if calendar is None:
            logger.error(f"Failed to fetch profile for {username}: user not found")
            raise NotFoundError(f"User not found: {username}")

        submission_calendar = {}
        if calendar.submission_calendar:
            try:
                submission_calendar = json.loads(calendar.submission_calendar)
            except ValueError as e:
                raise UnknownLeetCodeError(f"Invalid submission calendar: {e}") from e

        return UserProfile(
            username=username,
            streak=calendar.streak or 0,
            total_active_days=calendar.total_active_days or 0,
            active_years=calendar.active_years or [],
            submission_calendar=submission_calendar,
        )
