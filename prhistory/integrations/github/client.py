"""
GitHub API Client

Responsibilities:
- Pull request detail and commit list lookups (REST)
- Issue search page walks (REST)
- Merged pull request bulk queries (GraphQL)

Calls run in worker threads, each with its own PyGithub transport built from
the configured token, timeout and throttle settings.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from github import Auth, Github
from github.Commit import Commit
from github.PaginatedList import PaginatedList
from github.PullRequest import PullRequest as GithubPullRequest
from github.Repository import Repository

from prhistory.config import get_settings
from prhistory.integrations.github.queries import MERGED_PULL_REQUESTS_QUERY

logger = logging.getLogger(__name__)


@dataclass
class SearchPage:
    """One page of issue search results."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    has_next_page: bool = False


def _has_next_link(headers: Dict[str, str]) -> bool:
    for key, value in headers.items():
        if key.lower() == "link":
            return 'rel="next"' in value
    return False


class GitHubClient:
    """
    GitHub API client wrapper scoped to a single repository.

    PyGithub keeps one persistent HTTP connection per Github instance, so each
    worker thread gets its own instance built from the same parameters.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        settings = get_settings()
        token = settings.github_token if token is None else token
        self.owner = owner or settings.github_repo_owner
        self.repo_name = repo or settings.github_repo_name
        self.timeout = timeout or settings.github_timeout
        self.search_page_size = settings.search_page_size

        auth = Auth.Token(token) if token else None
        if auth is None:
            logger.info("No GitHub token configured, using unauthenticated requests")

        self._github_kwargs = {
            "auth": auth,
            "base_url": api_url or settings.github_api_url,
            "timeout": self.timeout,
            "per_page": self.search_page_size,
            "seconds_between_requests": settings.github_seconds_between_requests,
            "seconds_between_writes": settings.github_seconds_between_writes,
            # No request until the first PR lookup
            "lazy": True,
        }
        self._local = threading.local()
        logger.info(f"GitHub client initialized for {self.full_name}")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    @property
    def github(self) -> Github:
        """The calling thread's Github instance, created on first use."""
        github = getattr(self._local, "github", None)
        if github is None:
            github = Github(**self._github_kwargs)
            self._local.github = github
            self._local.repo = github.get_repo(self.full_name)
        return github

    @property
    def repo(self) -> Repository:
        """The calling thread's Repository handle."""
        self.github
        return self._local.repo

    def _list_commits(self, pull: GithubPullRequest) -> List[Commit]:
        # Bound to this thread's requester, not the one that fetched `pull`
        commits = PaginatedList(
            Commit, self.github.requester, f"{pull.url}/commits", None
        )
        return list(commits)

    async def get_pull(self, number: int) -> GithubPullRequest:
        """
        Fetch a single pull request's detail.

        Args:
            number: PR number within the repository

        Returns:
            PyGithub PullRequest object
        """
        logger.debug(f"Fetching PR #{number} from {self.full_name}")
        return await asyncio.to_thread(lambda: self.repo.get_pull(number))

    async def get_pull_commits(self, pull: GithubPullRequest) -> List[Commit]:
        """
        Fetch every commit of a pull request, walking all commit pages.

        Args:
            pull: PyGithub PullRequest returned by get_pull

        Returns:
            Commits in API order
        """
        return await asyncio.to_thread(self._list_commits, pull)

    async def search_issues(self, query: str, page: int = 1) -> SearchPage:
        """
        Fetch one page of issue search results, newest created first.

        Args:
            query: Search predicate (e.g. "repo:o/r is:pr is:merged")
            page: 1-based page number

        Returns:
            SearchPage with raw issue items and the next-page flag
        """
        parameters = {
            "q": query,
            "sort": "created",
            "order": "desc",
            "per_page": self.search_page_size,
            "page": page,
        }
        headers, data = await asyncio.to_thread(
            lambda: self.github.requester.requestJsonAndCheck(
                "GET", "/search/issues", parameters=parameters
            )
        )
        items = data.get("items") or []
        logger.debug(f"Search page {page} returned {len(items)} items")
        return SearchPage(
            items=items,
            total_count=data.get("total_count", 0),
            has_next_page=_has_next_link(headers or {}),
        )

    async def query_merged_pull_requests(
        self, after: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Run the merged pull requests bulk query for one cursor page.

        Args:
            after: Continuation cursor from the previous page, None for the first

        Returns:
            The `pullRequests` connection: {"pageInfo": {...}, "nodes": [...]}

        Raises:
            GithubException: On transport failure or a GraphQL errors payload
        """
        variables = {"owner": self.owner, "repo": self.repo_name, "after": after}
        _, data = await asyncio.to_thread(
            lambda: self.github.requester.graphql_query(
                MERGED_PULL_REQUESTS_QUERY, variables
            )
        )
        repository = (data.get("data") or {}).get("repository") or {}
        return repository.get("pullRequests") or {"pageInfo": {}, "nodes": []}
