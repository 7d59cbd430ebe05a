"""
Search-based merged PR walk.

Pages through issue search results (newest created first) and fetches each
page's PRs through the bounded fetcher. Best effort: PRs that fail to fetch
are logged and skipped.

The `since` bound only narrows the search predicate (by merge date, day
granularity). Pages are ordered by creation date, so the walk cannot stop
early on merge date and always runs to the last page.
"""

import logging
from datetime import datetime
from typing import List, Optional

from prhistory.integrations.github.client import GitHubClient
from prhistory.models.pull_request import PullRequest
from prhistory.services.pr_fetcher import FetchResult, PRFetchError, PRFetcher
from prhistory.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


def build_search_query(owner: str, repo: str, since: Optional[datetime] = None) -> str:
    """Build the merged-PR search predicate, e.g. 'repo:o/r is:pr is:merged merged:>=2024-01-01'."""
    query = f"repo:{owner}/{repo} is:pr is:merged"
    since = ensure_utc(since)
    if since is not None:
        query += f" merged:>={since.strftime('%Y-%m-%d')}"
    return query


class SearchStrategy:
    """Merged PR discovery via the issue search API."""

    def __init__(self, client: GitHubClient, fetcher: PRFetcher):
        self.client = client
        self.fetcher = fetcher

    async def fetch_all_since(self, since: Optional[datetime] = None) -> FetchResult:
        """
        Fetch every merged PR at or after `since` (all merged PRs when None).

        Returns:
            FetchResult; `error` is set only when a search page itself failed,
            in which case `prs` holds what earlier pages produced
        """
        query = build_search_query(self.client.owner, self.client.repo_name, since)
        logger.info(f"Searching merged PRs: {query}")

        all_prs: List[PullRequest] = []
        page = 1
        while True:
            try:
                result = await self.client.search_issues(query, page=page)
            except Exception as e:
                logger.error(f"Failed to search PRs (page {page}): {e}")
                return FetchResult(prs=all_prs, error=e)

            numbers = [
                item["number"] for item in result.items if item.get("pull_request")
            ]
            skipped = len(result.items) - len(numbers)
            if skipped:
                logger.debug(f"Page {page}: skipped {skipped} non-PR search hits")

            page_result = await self.fetcher.fetch_prs(numbers)
            all_prs.extend(page_result.prs)

            if isinstance(page_result.error, PRFetchError):
                for number, error in page_result.error.failures:
                    logger.warning(f"Failed to fetch PR #{number}: {error}")

            if not result.has_next_page:
                break
            page += 1

        logger.info(f"Total PRs fetched via search: {len(all_prs)}")
        return FetchResult(prs=all_prs)
