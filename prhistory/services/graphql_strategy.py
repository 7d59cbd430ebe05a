"""
GraphQL bulk merged PR walk.

Each cursor page returns up to 100 merged PRs with their commits inline, so
no per-PR request is needed unless the author is missing. Results come newest
first, which lets the walk stop at the first PR merged before `since`.
"""

import logging
from datetime import datetime
from typing import List, Optional

from prhistory.integrations.github.client import GitHubClient
from prhistory.integrations.github.normalizer import normalize_graphql_pull_request
from prhistory.models.pull_request import UNKNOWN_AUTHOR, AuthorType, PullRequest
from prhistory.services.pr_fetcher import FetchResult, SinglePRFetcher
from prhistory.utils.helpers import ensure_utc

logger = logging.getLogger(__name__)


class GraphQLStrategy:
    """Merged PR discovery via the GraphQL pullRequests connection."""

    def __init__(self, client: GitHubClient, fetcher: SinglePRFetcher):
        self.client = client
        self.fetcher = fetcher

    async def fetch_all_since(self, since: Optional[datetime] = None) -> FetchResult:
        """
        Fetch every merged PR at or after `since` (all merged PRs when None).

        Returns:
            FetchResult; `error` is set when a page query failed, in which case
            `prs` holds everything gathered from earlier pages
        """
        since = ensure_utc(since)
        all_prs: List[PullRequest] = []
        after: Optional[str] = None
        page = 0

        while True:
            page += 1
            try:
                connection = await self.client.query_merged_pull_requests(after)
            except Exception as e:
                logger.error(f"GraphQL query failed (page {page}): {e}")
                return FetchResult(prs=all_prs, error=e)

            nodes = [node for node in connection.get("nodes") or [] if node]
            logger.info(f"Fetched {len(nodes)} PRs via GraphQL (page {page})")

            for node in nodes:
                pr = normalize_graphql_pull_request(node)

                if since is not None and pr.merged_at is not None and pr.merged_at < since:
                    logger.info(
                        f"Reached PRs merged before {since:%Y-%m-%d}, stopping"
                    )
                    logger.info(f"Total PRs fetched via GraphQL: {len(all_prs)}")
                    return FetchResult(prs=all_prs)

                if not node.get("author"):
                    pr = await self._recover_author(pr)

                all_prs.append(pr)

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            after = page_info.get("endCursor")

        logger.info(f"Total PRs fetched via GraphQL: {len(all_prs)}")
        return FetchResult(prs=all_prs)

    async def _recover_author(self, pr: PullRequest) -> PullRequest:
        """Fill author fields from the REST detail, or the unknown sentinel."""
        logger.warning(
            f"PR #{pr.number}: Author is missing in GraphQL response, fetching from REST API"
        )
        try:
            rest_pr = await self.fetcher.fetch_pr(pr.number)
        except Exception as e:
            logger.warning(f"PR #{pr.number}: REST author lookup failed: {e}")
            rest_pr = None

        if rest_pr is not None and rest_pr.author:
            return pr.model_copy(
                update={
                    "author": rest_pr.author,
                    "author_url": rest_pr.author_url,
                    "author_type": rest_pr.author_type,
                }
            )
        return pr.model_copy(
            update={
                "author": UNKNOWN_AUTHOR,
                "author_url": "",
                "author_type": AuthorType.USER,
            }
        )
