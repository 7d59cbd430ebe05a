"""
Canonical Pull Request Model

Provider-independent PR and commit records shared by every fetch strategy.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_AUTHOR = "[unknown]"


class AuthorType(str, Enum):
    """Classification of a PR author account."""

    USER = "user"
    ORGANIZATION = "organization"
    BOT = "bot"


class PRCommit(BaseModel):
    """One commit belonging to a pull request."""

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str = ""
    author: str = ""
    email: str = ""  # Not every source supplies it
    date: Optional[datetime] = None
    parents: List[str] = Field(default_factory=list)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


class PullRequest(BaseModel):
    """One merged (or in-flight) pull request with its commits."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    body: str = ""
    url: str = ""
    merged_at: Optional[datetime] = None  # None = not merged
    merge_commit: str = ""
    author: str = ""
    author_url: str = ""
    author_type: AuthorType = AuthorType.USER
    commits: List[PRCommit] = Field(default_factory=list)  # API order

    @property
    def is_merged(self) -> bool:
        return self.merged_at is not None


class PRDetails(BaseModel):
    """PR state used for validation, optionally with the full PR."""

    model_config = ConfigDict(frozen=True)

    pr: Optional[PullRequest] = None
    state: str = ""
    mergeable: bool = False
