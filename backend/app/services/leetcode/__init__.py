"""LeetCode integration: GraphQL client, metadata cache, sessions, submissions."""
from app.services.leetcode.client import LeetCodeClient, LeetCodeAuth
from app.services.leetcode.errors import (
    ErrorKind,
    LeetCodeError,
    RateLimitedError,
    AuthExpiredError,
    NotFoundError,
    LeetCodeTimeoutError,
    GraphQLError,
    UnknownLeetCodeError,
)
from app.services.leetcode.metadata_cache import ProblemMetadataCache, MetadataLookup, LookupSource
from app.services.leetcode.sessions import LeetCodeSessionManager, SessionCredential, SessionStoreError
from app.services.leetcode.submissions import SubmissionService

__all__ = [
    "LeetCodeClient", "LeetCodeAuth",
    "ErrorKind", "LeetCodeError", "RateLimitedError", "AuthExpiredError", "NotFoundError",
    "LeetCodeTimeoutError", "GraphQLError", "UnknownLeetCodeError",
    "ProblemMetadataCache", "MetadataLookup", "LookupSource",
    "LeetCodeSessionManager", "SessionCredential", "SessionStoreError",
    "SubmissionService",
]
