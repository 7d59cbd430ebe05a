"""
API Response Models

Pydantic models for consistent API response structures.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from prhistory.models.pull_request import PullRequest


class PRListResponse(BaseModel):
    """
    Response model for multi-PR endpoints.
    Partial results are returned together with the error that interrupted them.
    """

    status: str = Field(..., description="Status: success or partial")
    count: int = Field(..., description="Number of PRs returned")
    prs: List[PullRequest] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="Error message when results are partial")
    failed_numbers: List[int] = Field(
        default_factory=list, description="PR numbers that failed to fetch"
    )
