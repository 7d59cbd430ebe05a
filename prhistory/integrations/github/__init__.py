"""
GitHub Integration Module

Provides GitHub API access and response normalization for PR history.
"""

from prhistory.integrations.github.client import GitHubClient, SearchPage
from prhistory.integrations.github.normalizer import (
    classify_author_type,
    normalize_graphql_pull_request,
    normalize_rest_pull_request,
)

__all__ = [
    "GitHubClient",
    "SearchPage",
    "classify_author_type",
    "normalize_graphql_pull_request",
    "normalize_rest_pull_request",
]
