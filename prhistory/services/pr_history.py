"""
PR History Service

Entry point for consumers such as a changelog generator. Wires one GitHub
client to the bounded fetcher and both merged PR strategies. Callers pick one
strategy per run; results of the two are never merged or deduplicated.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from prhistory.integrations.github.client import GitHubClient
from prhistory.integrations.github.normalizer import normalize_rest_pull_request
from prhistory.models.pull_request import PRDetails, PullRequest
from prhistory.services.graphql_strategy import GraphQLStrategy
from prhistory.services.pr_fetcher import FetchResult, PRFetcher
from prhistory.services.search_strategy import SearchStrategy

logger = logging.getLogger(__name__)


class PRHistoryService:
    """Aggregates merged PR history for one repository."""

    def __init__(
        self,
        client: Optional[GitHubClient] = None,
        concurrency: Optional[int] = None,
    ):
        self.client = client or GitHubClient()
        self.fetcher = PRFetcher(self.client, concurrency=concurrency)
        self.search = SearchStrategy(self.client, self.fetcher)
        self.graphql = GraphQLStrategy(self.client, self.fetcher)

    async def fetch(self, numbers: Iterable[int]) -> FetchResult:
        """Fetch the given PRs with their commits; see PRFetcher.fetch_prs."""
        return await self.fetcher.fetch_prs(numbers)

    async def fetch_all_since_search(self, since: Optional[datetime] = None) -> FetchResult:
        """Merged PRs via issue search. Never fails on individual PR errors."""
        return await self.search.fetch_all_since(since)

    async def fetch_all_since_graphql(self, since: Optional[datetime] = None) -> FetchResult:
        """Merged PRs via GraphQL. Stops on the first failed page query."""
        return await self.graphql.fetch_all_since(since)

    async def get_pr_with_commits(self, number: int) -> PullRequest:
        """Fetch the full PR and its commits."""
        return await self.fetcher.fetch_pr(number)

    async def get_pr_validation_details(self, number: int) -> PRDetails:
        """Fetch only the state needed for validation; commits are not fetched."""
        pull = await self.client.get_pull(number)
        return PRDetails(
            pr=None,
            state=pull.state or "",
            mergeable=bool(pull.mergeable),
        )

    async def get_pr_details(self, number: int) -> PRDetails:
        """Fetch the full PR with commits along with its validation state."""
        pull = await self.client.get_pull(number)
        commits = await self.client.get_pull_commits(pull)
        return PRDetails(
            pr=normalize_rest_pull_request(pull, commits),
            state=pull.state or "",
            mergeable=bool(pull.mergeable),
        )
