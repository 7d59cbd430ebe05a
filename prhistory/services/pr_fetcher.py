"""
Bounded PR Fetcher

Fetches PR detail + commits for many PR numbers concurrently, with at most
`concurrency` fetches in flight. Failures are collected per requested number,
repeats included, and never cancel sibling fetches.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple

from prhistory.config import get_settings
from prhistory.integrations.github.client import GitHubClient
from prhistory.integrations.github.normalizer import normalize_rest_pull_request
from prhistory.models.pull_request import PullRequest

logger = logging.getLogger(__name__)


class PRFetchError(Exception):
    """Aggregate of per-PR fetch failures from one batch."""

    def __init__(self, failures: Iterable[Tuple[int, Exception]]):
        self.failures = sorted(failures, key=lambda failure: failure[0])
        details = "; ".join(
            f"PR #{number}: {error}" for number, error in self.failures
        )
        super().__init__(f"{len(self.failures)} PRs failed to fetch: {details}")

    @property
    def numbers(self) -> List[int]:
        return sorted({number for number, _ in self.failures})


@dataclass
class FetchResult:
    """PRs gathered by a fetch operation plus the error that cut it short, if any."""

    prs: List[PullRequest] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SinglePRFetcher(Protocol):
    """Anything that can fetch one fully populated PR by number."""

    async def fetch_pr(self, number: int) -> PullRequest: ...


class PRFetcher:
    """Fetches PRs with their commits through a bounded worker pool."""

    def __init__(self, client: GitHubClient, concurrency: Optional[int] = None):
        self.client = client
        self.concurrency = concurrency or get_settings().fetch_concurrency

    async def fetch_pr(self, number: int) -> PullRequest:
        """Fetch one PR's detail, then its commits, and normalize both."""
        pull = await self.client.get_pull(number)
        commits = await self.client.get_pull_commits(pull)
        return normalize_rest_pull_request(pull, commits)

    async def fetch_prs(self, numbers: Iterable[int]) -> FetchResult:
        """
        Fetch many PRs concurrently.

        Blocks until every fetch has finished. Result order is not guaranteed
        to follow the input order.

        Args:
            numbers: PR numbers to fetch

        Returns:
            FetchResult with every successful PR; `error` is a PRFetchError
            naming each failed PR number, or None when all succeeded
        """
        numbers = list(numbers)
        if not numbers:
            return FetchResult()

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _fetch_one(number: int) -> PullRequest:
            async with semaphore:
                return await self.fetch_pr(number)

        logger.debug(
            f"Fetching {len(numbers)} PRs with up to {self.concurrency} in flight"
        )
        outcomes = await asyncio.gather(
            *(_fetch_one(number) for number in numbers), return_exceptions=True
        )

        prs: List[PullRequest] = []
        failures: List[Tuple[int, Exception]] = []
        for number, outcome in zip(numbers, outcomes):
            if isinstance(outcome, Exception):
                failures.append((number, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                prs.append(outcome)

        if failures:
            return FetchResult(prs=prs, error=PRFetchError(failures))
        return FetchResult(prs=prs)
