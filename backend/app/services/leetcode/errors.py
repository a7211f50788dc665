"""Classified errors raised by the LeetCode GraphQL client."""
import enum


class ErrorKind(str, enum.Enum):
    RATE_LIMITED = "rate_limited"
    AUTH_EXPIRED = "auth_expired"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    GRAPHQL = "graphql"
    UNKNOWN = "unknown"


class LeetCodeError(Exception):
    """Base LeetCode error."""
    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RateLimitedError(LeetCodeError):
    """LeetCode responded with 429."""
    kind = ErrorKind.RATE_LIMITED


class AuthExpiredError(LeetCodeError):
    """LeetCode rejected the session (401/403)."""
    kind = ErrorKind.AUTH_EXPIRED


class NotFoundError(LeetCodeError):
    """Resource missing (404) or the response carried no data."""
    kind = ErrorKind.NOT_FOUND


class LeetCodeTimeoutError(LeetCodeError):
    """Request exceeded the configured deadline."""
    kind = ErrorKind.TIMEOUT


class GraphQLError(LeetCodeError):
    """LeetCode returned a GraphQL ``errors`` payload."""
    kind = ErrorKind.GRAPHQL


class UnknownLeetCodeError(LeetCodeError):
    """Any other transport or parse failure."""
    kind = ErrorKind.UNKNOWN
