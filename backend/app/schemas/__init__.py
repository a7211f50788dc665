from app.schemas.leetcode import (
    EnrichedSubmission,
    ProblemDetails,
    ProblemMetadataResponse,
    RecentSubmission,
    SessionCreate,
    SessionResponse,
    SessionValidationResponse,
    SubmissionRecord,
    TopicTag,
    UserCalendar,
    UserProfile,
)

__all__ = [
    "EnrichedSubmission",
    "ProblemDetails",
    "ProblemMetadataResponse",
    "RecentSubmission",
    "SessionCreate",
    "SessionResponse",
    "SessionValidationResponse",
    "SubmissionRecord",
    "TopicTag",
    "UserCalendar",
    "UserProfile",
]
