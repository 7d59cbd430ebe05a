"""
Pull Request Normalizer

Maps the two GitHub response shapes onto the canonical model:
- REST: PyGithub PullRequest + Commit objects (search strategy, single PR path)
- GraphQL: pullRequests connection nodes (bulk strategy)

Pure mapping, no I/O. Missing optional fields become empty values.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from prhistory.models.pull_request import AuthorType, PRCommit, PullRequest

logger = logging.getLogger(__name__)

_AUTHOR_TYPES = {
    "User": AuthorType.USER,
    "Organization": AuthorType.ORGANIZATION,
    "Bot": AuthorType.BOT,
}


def _text(value: Optional[str]) -> str:
    return value or ""


def classify_author_type(type_tag: Optional[str], pr_number: Optional[int] = None) -> AuthorType:
    """
    Map a GitHub account type tag ("User", "Organization", "Bot") to AuthorType.

    Unrecognized non-empty tags are logged and treated as users.
    """
    if type_tag in _AUTHOR_TYPES:
        return _AUTHOR_TYPES[type_tag]
    if type_tag:
        logger.warning(f"PR #{pr_number}: Unknown author type '{type_tag}'")
    return AuthorType.USER


def normalize_rest_commit(commit: Any) -> PRCommit:
    """Convert a PyGithub Commit (from a PR commit listing) to PRCommit."""
    git_commit = commit.commit
    git_author = git_commit.author if git_commit is not None else None

    return PRCommit(
        sha=_text(commit.sha),
        message=_text(git_commit.message if git_commit is not None else None).strip(),
        author=_text(git_author.name) if git_author is not None else "",
        email=_text(git_author.email) if git_author is not None else "",
        date=git_author.date if git_author is not None else None,
        parents=[parent.sha for parent in (commit.parents or []) if parent.sha],
    )


def normalize_rest_pull_request(pull: Any, commits: Iterable[Any]) -> PullRequest:
    """
    Convert a PyGithub PullRequest and its commits to the canonical PullRequest.

    Commits without a git commit payload are skipped.

    Args:
        pull: PyGithub PullRequest (from repo.get_pull)
        commits: PyGithub Commit objects for the pull request

    Returns:
        Canonical PullRequest
    """
    author = author_url = ""
    author_type = AuthorType.USER
    user = pull.user
    if user is not None:
        author = _text(user.login)
        author_url = _text(user.html_url)
        author_type = classify_author_type(user.type, pull.number)

    return PullRequest(
        number=pull.number,
        title=_text(pull.title),
        body=_text(pull.body),
        url=_text(pull.html_url),
        merged_at=pull.merged_at,
        merge_commit=_text(pull.merge_commit_sha),
        author=author,
        author_url=author_url,
        author_type=author_type,
        commits=[normalize_rest_commit(c) for c in commits if c.commit is not None],
    )


def normalize_graphql_commit(node: Dict[str, Any]) -> PRCommit:
    """Convert a GraphQL `commits.nodes[]` entry to PRCommit."""
    commit = node.get("commit") or {}
    author = commit.get("author") or {}
    parents = (commit.get("parents") or {}).get("nodes") or []

    return PRCommit(
        sha=_text(commit.get("oid")),
        message=_text(commit.get("message")).strip(),
        author=_text(author.get("name")),
        email=_text(author.get("email")),
        date=commit.get("authoredDate"),
        parents=[p["oid"] for p in parents if p.get("oid")],
    )


def normalize_graphql_pull_request(node: Dict[str, Any]) -> PullRequest:
    """
    Convert a GraphQL `pullRequests.nodes[]` entry to the canonical PullRequest.

    A null author yields empty author fields; recovering them is up to the caller.
    """
    number = node["number"]
    author = node.get("author")
    merge_commit = node.get("mergeCommit") or {}
    commit_nodes: List[Dict[str, Any]] = (node.get("commits") or {}).get("nodes") or []

    return PullRequest(
        number=number,
        title=_text(node.get("title")),
        body=_text(node.get("body")),
        url=_text(node.get("url")),
        merged_at=node.get("mergedAt"),
        merge_commit=_text(merge_commit.get("oid")),
        author=_text(author.get("login")) if author else "",
        author_url=_text(author.get("url")) if author else "",
        author_type=(
            classify_author_type(author.get("__typename"), number)
            if author
            else AuthorType.USER
        ),
        commits=[normalize_graphql_commit(c) for c in commit_nodes],
    )
