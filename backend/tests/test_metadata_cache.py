"""Tests for ProblemMetadataCache freshness, refresh and fallback behaviour."""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy import func, select

from app.models.problem import Difficulty, ProblemMetadata
from app.schemas.leetcode import ProblemDetails
from app.services.leetcode.client import LeetCodeAuth, LeetCodeClient
from app.services.leetcode.errors import LeetCodeTimeoutError, RateLimitedError
from app.services.leetcode.metadata_cache import (
    LookupSource,
    ProblemMetadataCache,
    as_utc,
)


def make_details(**overrides) -> ProblemDetails:
    payload = {
        "questionId": "1",
        "questionFrontendId": "1",
        "title": "Two Sum",
        "titleSlug": "two-sum",
        "difficulty": "Easy",
        "likes": 100,
        "dislikes": 5,
        "isPaidOnly": False,
        "acRate": 52.3,
        "topicTags": [{"name": "Array", "slug": "array"}, {"name": "Hash Table", "slug": "hash-table"}],
    }
    payload.update(overrides)
    return ProblemDetails.model_validate(payload)


def make_client(details=None, side_effect=None) -> MagicMock:
    client = MagicMock(spec=LeetCodeClient)
    client.problem_details = AsyncMock(return_value=details, side_effect=side_effect)
    return client


async def add_cached(db, age: timedelta, **overrides) -> ProblemMetadata:
    values = dict(
        title_slug="two-sum",
        question_id=1,
        title="Two Sum",
        difficulty=Difficulty.EASY,
        ac_rate=50.0,
        likes=10,
        dislikes=1,
        is_paid_only=False,
        topic_tags=["Array"],
        last_fetched_at=datetime.now(timezone.utc) - age,
    )
    values.update(overrides)
    record = ProblemMetadata(**values)
    db.add(record)
    await db.commit()
    return record


async def count_rows(db) -> int:
    return await db.scalar(select(func.count()).select_from(ProblemMetadata))


@pytest.mark.asyncio
async def test_miss_fetches_once_and_inserts(db):
    client = make_client(details=make_details())
    cache = ProblemMetadataCache(db, client)
    before = datetime.now(timezone.utc)

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.REMOTE
    assert lookup.found
    client.problem_details.assert_awaited_once_with("two-sum", None)

    stored = await cache.get_cached("two-sum")
    assert stored is not None
    assert stored.difficulty == Difficulty.EASY
    assert stored.question_id == 1
    assert stored.topic_tags == ["Array", "Hash Table"]
    assert before - timedelta(seconds=1) <= as_utc(stored.last_fetched_at) <= datetime.now(timezone.utc)
    assert await count_rows(db) == 1


@pytest.mark.asyncio
async def test_fresh_hit_makes_no_remote_call(db):
    record = await add_cached(db, age=timedelta(days=6, hours=23))
    client = make_client(details=make_details(difficulty="Hard"))
    cache = ProblemMetadataCache(db, client)

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.CACHE
    assert lookup.metadata is record
    assert lookup.metadata.difficulty == Difficulty.EASY
    client.problem_details.assert_not_awaited()


@pytest.mark.asyncio
async def test_stale_hit_refreshes_in_place(db):
    record = await add_cached(db, age=timedelta(days=8))
    record_id = record.id
    client = make_client(details=make_details(difficulty="Medium", likes=250, topicTags=[{"name": "Math"}]))
    cache = ProblemMetadataCache(db, client)

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.REMOTE
    assert lookup.metadata.id == record_id
    assert lookup.metadata.difficulty == Difficulty.MEDIUM
    assert lookup.metadata.likes == 250
    assert lookup.metadata.topic_tags == ["Math"]
    assert cache.is_fresh(lookup.metadata)
    assert await count_rows(db) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "side_effect",
    [RateLimitedError("Rate limit exceeded"), LeetCodeTimeoutError("Request timeout")],
)
async def test_stale_hit_with_remote_failure_returns_stale_record(db, side_effect):
    stale_time = datetime.now(timezone.utc) - timedelta(days=30)
    await add_cached(db, age=timedelta(days=30), last_fetched_at=stale_time)
    client = make_client(side_effect=side_effect)
    cache = ProblemMetadataCache(db, client)

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.STALE
    assert lookup.error == side_effect.message
    assert lookup.metadata.difficulty == Difficulty.EASY
    assert lookup.metadata.likes == 10

    db.expire_all()
    stored = await cache.get_cached("two-sum")
    assert as_utc(stored.last_fetched_at) == stale_time
    assert stored.likes == 10


@pytest.mark.asyncio
async def test_stale_hit_with_empty_response_returns_stale_record(db):
    await add_cached(db, age=timedelta(days=8))
    cache = ProblemMetadataCache(db, make_client(details=None))

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.STALE
    assert lookup.found


@pytest.mark.asyncio
async def test_miss_with_remote_failure_is_not_found(db):
    cache = ProblemMetadataCache(db, make_client(side_effect=RateLimitedError("Rate limit exceeded")))

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.NOT_FOUND
    assert not lookup.found
    assert await count_rows(db) == 0


@pytest.mark.asyncio
async def test_miss_with_empty_response_is_not_found(db):
    cache = ProblemMetadataCache(db, make_client(details=None))

    lookup = await cache.get_or_refresh("missing-problem")

    assert lookup.source == LookupSource.NOT_FOUND
    assert await count_rows(db) == 0


@pytest.mark.asyncio
async def test_auth_is_forwarded_for_paid_problems(db):
    client = make_client(details=make_details(titleSlug="paid-problem", isPaidOnly=True))
    cache = ProblemMetadataCache(db, client)
    auth = LeetCodeAuth(session_cookie="sess")

    lookup = await cache.get_or_refresh("paid-problem", auth)

    client.problem_details.assert_awaited_once_with("paid-problem", auth)
    assert lookup.metadata.is_paid_only is True
    assert lookup.metadata.title_slug == "paid-problem"


@pytest.mark.asyncio
async def test_unknown_difficulty_and_missing_counts_get_defaults(db):
    details = make_details(difficulty="Legendary", likes=None, dislikes=None, acRate=None, topicTags=None)
    cache = ProblemMetadataCache(db, make_client(details=details))

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.metadata.difficulty == Difficulty.UNKNOWN
    assert lookup.metadata.likes == 0
    assert lookup.metadata.dislikes == 0
    assert lookup.metadata.ac_rate is None
    assert lookup.metadata.topic_tags == []


@pytest.mark.asyncio
async def test_empty_slug_rejected(db):
    cache = ProblemMetadataCache(db, make_client())

    with pytest.raises(ValueError, match="title_slug"):
        await cache.get_or_refresh("")


@pytest.mark.asyncio
async def test_custom_ttl(db):
    await add_cached(db, age=timedelta(hours=2))
    client = make_client(details=make_details())
    cache = ProblemMetadataCache(db, client, ttl=timedelta(hours=1))

    lookup = await cache.get_or_refresh("two-sum")

    assert lookup.source == LookupSource.REMOTE
    client.problem_details.assert_awaited_once()


def test_as_utc_treats_naive_as_utc():
    naive = datetime(2024, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
