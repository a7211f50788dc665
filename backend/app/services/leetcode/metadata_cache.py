"""Problem metadata cache backed by the database with TTL-based refresh."""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.problem import Difficulty, ProblemMetadata
from app.schemas.leetcode import ProblemDetails
from app.services.leetcode.client import LeetCodeAuth, LeetCodeClient
from app.services.leetcode.errors import LeetCodeError

logger = logging.getLogger(__name__)


class LookupSource(str, enum.Enum):
    """Where a metadata lookup was answered from."""
    CACHE = "cache"  # fresh cached row, no network call
    REMOTE = "remote"  # fetched and written back
    STALE = "stale"  # refresh failed, stale row served
    NOT_FOUND = "not_found"  # nothing cached and remote fetch failed


@dataclass
class MetadataLookup:
    metadata: ProblemMetadata | None
    source: LookupSource
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.metadata is not None


def as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes from the store as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class ProblemMetadataCache:
    """Serves problem metadata, refreshing from LeetCode when absent or stale."""

    def __init__(
        self,
        db: AsyncSession,
        client: LeetCodeClient,
        ttl: timedelta | None = None,
    ):
        self.db = db
        self.client = client
        self.ttl = ttl if ttl is not None else timedelta(days=settings.metadata_cache_ttl_days)

    def is_fresh(self, record: ProblemMetadata, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now - as_utc(record.last_fetched_at) < self.ttl

    async def get_cached(self, title_slug: str) -> ProblemMetadata | None:
        result = await self.db.execute(
            select(ProblemMetadata).where(ProblemMetadata.title_slug == title_slug)
        )
        return result.scalar_one_or_none()

    async def get_or_refresh(
        self,
        title_slug: str,
        auth: LeetCodeAuth | None = None,
    ) -> MetadataLookup:
        """
        Return metadata for a problem slug.

        Fresh rows are returned without a network call. Stale rows trigger a
        refresh; if that fails the stale row is returned untouched. Missing
        rows are fetched and inserted, or reported as NOT_FOUND.

        Args:
            title_slug: Problem slug, e.g. "two-sum"
            auth: Optional session material (needed for paid-only problems)
        """
        if not title_slug:
            raise ValueError("title_slug must not be empty")

        now = datetime.now(timezone.utc)
        cached = await self.get_cached(title_slug)

        if cached is not None and self.is_fresh(cached, now):
            logger.debug(f"Using cached metadata for problem: {title_slug}")
            return MetadataLookup(cached, LookupSource.CACHE)

        logger.debug(f"Fetching fresh metadata for problem: {title_slug}")
        try:
            details = await self.client.problem_details(title_slug, auth)
        except LeetCodeError as e:
            logger.error(f"Failed to fetch metadata for {title_slug}: {e.message}")
            return self._fallback(title_slug, cached, e.message)

        if details is None:
            logger.warning(f"No problem data found for: {title_slug}")
            return self._fallback(title_slug, cached, "No problem data returned")

        record = await self._upsert(title_slug, cached, details, now)
        logger.info(f"Cached metadata for problem: {title_slug} ({record.difficulty.value})")
        return MetadataLookup(record, LookupSource.REMOTE)

    @staticmethod
    def _fallback(
        title_slug: str,
        cached: ProblemMetadata | None,
        error: str,
    ) -> MetadataLookup:
        if cached is not None:
            logger.warning(f"Serving stale metadata for problem: {title_slug}")
            return MetadataLookup(cached, LookupSource.STALE, error)
        return MetadataLookup(None, LookupSource.NOT_FOUND, error)

    async def _upsert(
        self,
        title_slug: str,
        cached: ProblemMetadata | None,
        details: ProblemDetails,
        now: datetime,
    ) -> ProblemMetadata:
        if cached is None:
            record = ProblemMetadata(title_slug=title_slug)
            self._apply(record, details, now)
            self.db.add(record)
            try:
                await self.db.commit()
                return record
            except IntegrityError:
                # Another request inserted the slug first; update that row instead
                await self.db.rollback()
                cached = await self.get_cached(title_slug)
                if cached is None:
                    raise
            except SQLAlchemyError:
                # Drop the pending row so later queries on this session can autoflush
                await self.db.rollback()
                raise

        self._apply(cached, details, now)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return cached

    @staticmethod
    def _apply(record: ProblemMetadata, details: ProblemDetails, now: datetime) -> None:
        record.question_id = details.question_id
        record.question_frontend_id = details.question_frontend_id
        record.title = details.title
        record.difficulty = Difficulty.parse(details.difficulty)
        record.ac_rate = details.ac_rate
        record.likes = max(details.likes or 0, 0)
        record.dislikes = max(details.dislikes or 0, 0)
        record.is_paid_only = bool(details.is_paid_only)
        record.topic_tags = details.tag_names
        record.last_fetched_at = now
