from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from uuid import UUID
from datetime import datetime, timezone

from app.models.problem import Difficulty


def serialize_datetime(dt: datetime | None) -> str | None:
    """Serialize datetime to ISO format with UTC timezone."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def epoch_to_datetime(value: str | int) -> datetime:
    """Convert LeetCode's epoch-seconds timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def validate_epoch(value: str | int) -> str:
    """Reject timestamps that cannot be converted to a datetime."""
    try:
        epoch_to_datetime(value)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise ValueError(f"Invalid epoch timestamp: {value!r}") from e
    return str(value)


class _GraphQLModel(BaseModel):
    """Base for models parsed from camelCase GraphQL payloads."""
    model_config = ConfigDict(populate_by_name=True)


# --- Remote operation results ---

class RecentSubmission(_GraphQLModel):
    """Item of ``recentAcSubmissionList``."""
    id: str
    title: str
    title_slug: str = Field(alias="titleSlug")
    timestamp: str
    status_display: str = Field(alias="statusDisplay")
    lang: str

    @field_validator('timestamp', mode='before')
    @classmethod
    def check_timestamp(cls, value: str | int) -> str:
        return validate_epoch(value)

    @property
    def submitted_at(self) -> datetime:
        return epoch_to_datetime(self.timestamp)


class TopicTag(_GraphQLModel):
    name: str
    slug: str | None = None


class ProblemDetails(_GraphQLModel):
    """Payload of the ``question`` field."""
    question_id: int = Field(alias="questionId")
    question_frontend_id: str | None = Field(default=None, alias="questionFrontendId")
    title: str
    title_slug: str = Field(alias="titleSlug")
    difficulty: str | None = None
    likes: int | None = None
    dislikes: int | None = None
    is_paid_only: bool | None = Field(default=None, alias="isPaidOnly")
    ac_rate: float | None = Field(default=None, alias="acRate")
    topic_tags: list[TopicTag] | None = Field(default=None, alias="topicTags")

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.topic_tags or []]


class UserCalendar(_GraphQLModel):
    """Payload of ``matchedUser.userCalendar``."""
    active_years: list[int] | None = Field(default=None, alias="activeYears")
    streak: int | None = None
    total_active_days: int | None = Field(default=None, alias="totalActiveDays")
    submission_calendar: str | None = Field(default=None, alias="submissionCalendar")


class SubmissionRecord(_GraphQLModel):
    """Item of ``recentSubmissionList`` (all statuses, with runtime stats)."""
    title: str
    title_slug: str = Field(alias="titleSlug")
    timestamp: str
    status_display: str = Field(alias="statusDisplay")
    lang: str
    runtime: str | None = None
    memory: str | None = None

    @field_validator('timestamp', mode='before')
    @classmethod
    def check_timestamp(cls, value: str | int) -> str:
        return validate_epoch(value)

    @property
    def submitted_at(self) -> datetime:
        return epoch_to_datetime(self.timestamp)


# --- Service results ---

class EnrichedSubmission(BaseModel):
    """Accepted submission joined with cached problem metadata."""
    id: str
    title: str
    title_slug: str
    timestamp: datetime
    status: str
    language: str
    difficulty: str = Difficulty.UNKNOWN.value
    question_id: int | None = None
    is_paid_only: bool = False
    topic_tags: list[str] = Field(default_factory=list)

    @field_serializer('timestamp')
    def serialize_timestamp(self, dt: datetime) -> str:
        return serialize_datetime(dt) or ""


class UserProfile(BaseModel):
    username: str
    streak: int = 0
    total_active_days: int = 0
    active_years: list[int] = Field(default_factory=list)
    submission_calendar: dict[str, int] = Field(default_factory=dict)


# --- API schemas ---

class ProblemMetadataResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title_slug: str
    question_id: int
    question_frontend_id: str | None
    title: str
    difficulty: Difficulty
    ac_rate: float | None
    likes: int
    dislikes: int
    is_paid_only: bool
    topic_tags: list[str]
    last_fetched_at: datetime

    @field_serializer('last_fetched_at')
    def serialize_last_fetched_at(self, dt: datetime) -> str:
        return serialize_datetime(dt) or ""


class SessionCreate(BaseModel):
    """Raw LeetCode session hand-off (cookie values as captured by the client)."""
    session_data: dict
    expires_at: datetime | None = None


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    is_active: bool
    expires_at: datetime | None
    last_used_at: datetime
    created_at: datetime

    @field_serializer('expires_at', 'last_used_at', 'created_at')
    def serialize_datetimes(self, dt: datetime | None) -> str | None:
        return serialize_datetime(dt)


class SessionValidationResponse(BaseModel):
    valid: bool
