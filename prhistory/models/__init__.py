# Shared data models
from prhistory.models.pull_request import (
    UNKNOWN_AUTHOR,
    AuthorType,
    PRCommit,
    PRDetails,
    PullRequest,
)

__all__ = [
    "UNKNOWN_AUTHOR",
    "AuthorType",
    "PRCommit",
    "PRDetails",
    "PullRequest",
]
