"""
PR History API Routes

Provides REST API endpoints for merged PR history.
"""

import logging
from enum import Enum
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query
from github.GithubException import UnknownObjectException
from pydantic import BaseModel, Field

from prhistory.models.api_responses import PRListResponse
from prhistory.models.pull_request import PRDetails, PullRequest
from prhistory.services.pr_fetcher import FetchResult, PRFetchError
from prhistory.services.pr_history import PRHistoryService
from prhistory.utils.helpers import parse_since

logger = logging.getLogger(__name__)

router = APIRouter()

# Lazy initialization to avoid import-time GitHub client setup
_pr_history = None


def get_pr_history() -> PRHistoryService:
    """Get PRHistoryService instance with lazy initialization."""
    global _pr_history
    if _pr_history is None:
        _pr_history = PRHistoryService()
    return _pr_history


class Strategy(str, Enum):
    """Merged PR discovery strategy."""

    GRAPHQL = "graphql"
    SEARCH = "search"


# Request Models

class FetchPRsRequest(BaseModel):
    """Request to fetch specific PRs with their commits."""

    numbers: List[int] = Field(..., description="PR numbers to fetch")


def _to_response(result: FetchResult) -> PRListResponse:
    failed_numbers = (
        result.error.numbers if isinstance(result.error, PRFetchError) else []
    )
    return PRListResponse(
        status="success" if result.ok else "partial",
        count=len(result.prs),
        prs=result.prs,
        error=str(result.error) if result.error else None,
        failed_numbers=failed_numbers,
    )


# API Endpoints

@router.post("/fetch", response_model=PRListResponse)
async def fetch_prs(request: FetchPRsRequest):
    """
    Fetch the given PRs with their commits.

    PRs that fail are listed in `failed_numbers`; the rest are still returned.
    """
    logger.info(f"Fetching {len(request.numbers)} PRs")
    result = await get_pr_history().fetch(request.numbers)
    return _to_response(result)


@router.get("/merged", response_model=PRListResponse)
async def list_merged_prs(
    since: Optional[str] = Query(None, description="Lower bound: YYYY-MM-DD or ISO 8601 timestamp"),
    strategy: Strategy = Query(Strategy.GRAPHQL, description="graphql or search"),
):
    """
    List merged PRs at or after `since` with their commits.

    `graphql` uses the bulk query; `search` walks issue search pages and
    fetches each PR individually.
    """
    try:
        since_dt = parse_since(since)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid since value: {e}")

    logger.info(f"Listing merged PRs since {since_dt} via {strategy.value}")
    service = get_pr_history()
    if strategy == Strategy.SEARCH:
        result = await service.fetch_all_since_search(since_dt)
    else:
        result = await service.fetch_all_since_graphql(since_dt)
    return _to_response(result)


@router.get("/{number}", response_model=PullRequest)
async def get_pr(number: int):
    """Get a single PR with its commits."""
    try:
        return await get_pr_history().get_pr_with_commits(number)
    except UnknownObjectException:
        raise HTTPException(status_code=404, detail=f"PR #{number} not found")
    except Exception as e:
        logger.error(f"Error fetching PR #{number}: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{number}/validation", response_model=PRDetails)
async def get_pr_validation(number: int):
    """Get a PR's state and mergeability without fetching commits."""
    try:
        return await get_pr_history().get_pr_validation_details(number)
    except UnknownObjectException:
        raise HTTPException(status_code=404, detail=f"PR #{number} not found")
    except Exception as e:
        logger.error(f"Error fetching PR #{number} validation details: {e}")
        raise HTTPException(status_code=502, detail=str(e))
