"""GraphQL documents for the LeetCode operations we use."""
import enum


RECENT_AC_SUBMISSIONS_QUERY = """
  query recentAcSubmissions($username: String!, $limit: Int!) {
    recentAcSubmissionList(username: $username, limit: $limit) {
      id
      title
      titleSlug
      timestamp
      statusDisplay
      lang
    }
  }
"""

PROBLEM_DETAILS_QUERY = """
  query questionData($titleSlug: String!) {
    question(titleSlug: $titleSlug) {
      questionId
      questionFrontendId
      title
      titleSlug
      difficulty
      likes
      dislikes
      isPaidOnly
      acRate
      topicTags {
        name
        slug
      }
    }
  }
"""

USER_CALENDAR_QUERY = """
  query userProfileCalendar($username: String!, $year: Int!) {
    matchedUser(username: $username) {
      userCalendar(year: $year) {
        activeYears
        streak
        totalActiveDays
        submissionCalendar
      }
    }
  }
"""

USER_SUBMISSIONS_QUERY = """
  query userSubmissions($username: String!, $offset: Int!, $limit: Int!) {
    recentSubmissionList(username: $username, offset: $offset, limit: $limit) {
      title
      titleSlug
      timestamp
      statusDisplay
      lang
      runtime
      memory
    }
  }
"""


class LeetCodeOperation(str, enum.Enum):
    """Named GraphQL operations and their expected variables."""
    RECENT_AC_SUBMISSIONS = "recentAcSubmissions"  # username, limit
    PROBLEM_DETAILS = "questionData"  # titleSlug
    USER_CALENDAR = "userProfileCalendar"  # username, year
    USER_SUBMISSIONS = "userSubmissions"  # username, offset, limit

    @property
    def query(self) -> str:
        return _QUERIES[self]


_QUERIES = {
    LeetCodeOperation.RECENT_AC_SUBMISSIONS: RECENT_AC_SUBMISSIONS_QUERY,
    LeetCodeOperation.PROBLEM_DETAILS: PROBLEM_DETAILS_QUERY,
    LeetCodeOperation.USER_CALENDAR: USER_CALENDAR_QUERY,
    LeetCodeOperation.USER_SUBMISSIONS: USER_SUBMISSIONS_QUERY,
}
