"""LeetCode GraphQL client with classified errors."""
import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.schemas.leetcode import (
    ProblemDetails,
    RecentSubmission,
    SubmissionRecord,
    UserCalendar,
)
from app.services.leetcode.errors import (
    AuthExpiredError,
    GraphQLError,
    LeetCodeError,
    LeetCodeTimeoutError,
    NotFoundError,
    RateLimitedError,
    UnknownLeetCodeError,
)
from app.services.leetcode.queries import LeetCodeOperation

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class LeetCodeAuth:
    """Session material attached to a single request."""
    session_cookie: str
    csrf_token: str | None = None

    def headers(self) -> dict[str, str]:
        cookie = f"LEETCODE_SESSION={self.session_cookie}"
        headers = {}
        if self.csrf_token:
            cookie += f"; csrftoken={self.csrf_token}"
            headers["x-csrftoken"] = self.csrf_token
        headers["Cookie"] = cookie
        return headers


class LeetCodeClient:
    """Executes named GraphQL operations against LeetCode."""

    REFERER = "https://leetcode.com"

    def __init__(self, graphql_url: str | None = None, timeout: float | None = None):
        self.graphql_url = graphql_url or settings.leetcode_graphql_url
        self.timeout = timeout if timeout is not None else settings.leetcode_timeout_seconds

    async def execute(
        self,
        operation: LeetCodeOperation,
        variables: dict[str, Any],
        auth: LeetCodeAuth | None = None,
    ) -> dict[str, Any] | None:
        """
        Run a GraphQL operation.

        Args:
            operation: Operation to run
            variables: GraphQL variables for the operation
            auth: Optional session material, attached to this request only

        Returns:
            The ``data`` object, or None when the response carried no data

        Raises:
            LeetCodeError: classified by subclass (rate limit, auth, timeout, ...)
        """
        headers = {"Content-Type": "application/json", "Referer": self.REFERER}
        if auth:
            headers.update(auth.headers())

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.graphql_url,
                    json={
                        "operationName": operation.value,
                        "query": operation.query,
                        "variables": variables,
                    },
                    headers=headers,
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            raise self._classify_status(e) from e
        except httpx.TimeoutException as e:
            raise LeetCodeTimeoutError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Error fetching LeetCode data: {e}")
            raise UnknownLeetCodeError(f"Request error: {e}") from e
        except ValueError as e:
            raise UnknownLeetCodeError(f"Invalid JSON response: {e}") from e

        if not isinstance(body, dict):
            raise UnknownLeetCodeError("Unexpected response shape")

        errors = body.get("errors")
        if errors:
            logger.error(f"GraphQL errors for {operation.value}: {errors}")
            first = errors[0] if isinstance(errors, list) else errors
            if not isinstance(first, dict):
                first = {}
            raise GraphQLError(f"GraphQL Error: {first.get('message', 'unknown error')}")

        data = body.get("data")
        if not data:
            logger.warning(f"No data returned from LeetCode for {operation.value}")
            return None
        return data

    @staticmethod
    def _classify_status(error: httpx.HTTPStatusError) -> LeetCodeError:
        status = error.response.status_code
        if status == 429:
            logger.error("LeetCode API rate limit exceeded")
            return RateLimitedError("Rate limit exceeded. Please try again later.", status)
        if status in (401, 403):
            return AuthExpiredError("Authentication failed. Session may be expired.", status)
        if status == 404:
            return NotFoundError("Resource not found.", status)
        logger.error(f"Error fetching LeetCode data: HTTP {status}")
        return UnknownLeetCodeError(f"HTTP error: {status}", status)

    @staticmethod
    def _parse(model: type[ModelT], payload: Any) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise UnknownLeetCodeError(f"Invalid {model.__name__} payload: {e}") from e

    async def recent_ac_submissions(
        self,
        username: str,
        limit: int,
        auth: LeetCodeAuth | None = None,
    ) -> list[RecentSubmission]:
        """Most recent accepted submissions; empty when LeetCode returns no data."""
        data = await self.execute(
            LeetCodeOperation.RECENT_AC_SUBMISSIONS,
            {"username": username, "limit": limit},
            auth,
        )
        items = (data or {}).get("recentAcSubmissionList") or []
        return [self._parse(RecentSubmission, item) for item in items]

    async def problem_details(
        self,
        title_slug: str,
        auth: LeetCodeAuth | None = None,
    ) -> ProblemDetails | None:
        data = await self.execute(
            LeetCodeOperation.PROBLEM_DETAILS,
            {"titleSlug": title_slug},
            auth,
        )
        question = (data or {}).get("question")
        if not question:
            return None
        return self._parse(ProblemDetails, question)

    async def user_calendar(
        self,
        username: str,
        year: int,
        auth: LeetCodeAuth | None = None,
    ) -> UserCalendar | None:
        """Calendar for ``year``; None if the user does not exist."""
        data = await self.execute(
            LeetCodeOperation.USER_CALENDAR,
            {"username": username, "year": year},
            auth,
        )
        matched_user = (data or {}).get("matchedUser")
        if not matched_user:
            return None
        return self._parse(UserCalendar, matched_user.get("userCalendar") or {})

    async def user_submissions(
        self,
        username: str,
        offset: int,
        limit: int,
        auth: LeetCodeAuth | None = None,
    ) -> list[SubmissionRecord]:
        data = await self.execute(
            LeetCodeOperation.USER_SUBMISSIONS,
            {"username": username, "offset": offset, "limit": limit},
            auth,
        )
        items = (data or {}).get("recentSubmissionList") or []
        return [self._parse(SubmissionRecord, item) for item in items]
