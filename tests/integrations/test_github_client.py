"""
Tests for the GitHub API client wrapper.

Most tests patch PyGithub out and check the client's own request shaping and
response unpacking. The concurrency tests run real PyGithub transports against
a local HTTP server.
"""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock, patch

import pytest
from github import Auth
from github.GithubException import GithubException

from prhistory.integrations.github.client import GitHubClient, SearchPage
from prhistory.integrations.github.queries import MERGED_PULL_REQUESTS_QUERY
from prhistory.services.pr_fetcher import PRFetcher


@pytest.fixture
def mock_github():
    with patch("prhistory.integrations.github.client.Github") as mock_github_class:
        instance = MagicMock()
        mock_github_class.return_value = instance
        yield mock_github_class, instance


def make_client(token="test_token", timeout=7):
    return GitHubClient(
        token=token,
        owner="x",
        repo="y",
        api_url="https://api.github.com",
        timeout=timeout,
    )


class TestClientInit:
    """Test suite for client construction."""

    def test_token_auth_and_timeout(self, mock_github):
        mock_github_class, instance = mock_github

        client = make_client()
        client.repo

        kwargs = mock_github_class.call_args.kwargs
        assert isinstance(kwargs["auth"], Auth.Token)
        assert kwargs["timeout"] == 7
        assert kwargs["base_url"] == "https://api.github.com"
        assert kwargs["lazy"] is True
        assert client.full_name == "x/y"
        instance.get_repo.assert_called_once_with("x/y")

    def test_transport_built_on_first_use(self, mock_github):
        mock_github_class, _ = mock_github

        make_client()

        mock_github_class.assert_not_called()

    def test_request_throttle_disabled_by_default(self, mock_github):
        mock_github_class, _ = mock_github

        make_client().github

        kwargs = mock_github_class.call_args.kwargs
        assert kwargs["seconds_between_requests"] is None
        assert kwargs["seconds_between_writes"] is None

    def test_empty_token_is_unauthenticated(self, mock_github):
        mock_github_class, _ = mock_github

        make_client(token="").github

        assert mock_github_class.call_args.kwargs["auth"] is None


class TestRestCalls:
    """Test suite for PR detail and commit lookups."""

    @pytest.mark.asyncio
    async def test_get_pull_delegates_to_repo(self, mock_github):
        _, instance = mock_github
        repo = instance.get_repo.return_value
        repo.get_pull.return_value = "pull-42"

        client = make_client()
        result = await client.get_pull(42)

        assert result == "pull-42"
        repo.get_pull.assert_called_once_with(42)

    @pytest.mark.asyncio
    async def test_get_pull_commits_materializes_all_pages(self, mock_github):
        _, instance = mock_github
        pull = MagicMock()
        pull.url = "https://api.github.com/repos/x/y/pulls/5"

        client = make_client()
        with patch(
            "prhistory.integrations.github.client.PaginatedList",
            return_value=iter(["c1", "c2", "c3"]),
        ) as mock_paginated:
            commits = await client.get_pull_commits(pull)

        assert commits == ["c1", "c2", "c3"]
        args = mock_paginated.call_args.args
        assert args[1] is instance.requester
        assert args[2] == "https://api.github.com/repos/x/y/pulls/5/commits"
        pull.get_commits.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_pull_propagates_errors(self, mock_github):
        _, instance = mock_github
        instance.get_repo.return_value.get_pull.side_effect = GithubException(
            404, {"message": "Not Found"}, None
        )

        client = make_client()
        with pytest.raises(GithubException):
            await client.get_pull(1)


class TestSearchIssues:
    """Test suite for search page requests."""

    @pytest.mark.asyncio
    async def test_request_parameters_and_next_page(self, mock_github):
        _, instance = mock_github
        instance.requester.requestJsonAndCheck.return_value = (
            {"link": '<https://api.github.com/search/issues?page=2>; rel="next"'},
            {"total_count": 150, "items": [{"number": 1}, {"number": 2}]},
        )

        client = make_client()
        page = await client.search_issues("repo:x/y is:pr is:merged", page=1)

        assert isinstance(page, SearchPage)
        assert page.has_next_page
        assert page.total_count == 150
        assert [i["number"] for i in page.items] == [1, 2]

        args, kwargs = instance.requester.requestJsonAndCheck.call_args
        assert args == ("GET", "/search/issues")
        assert kwargs["parameters"]["q"] == "repo:x/y is:pr is:merged"
        assert kwargs["parameters"]["sort"] == "created"
        assert kwargs["parameters"]["order"] == "desc"
        assert kwargs["parameters"]["per_page"] == 100
        assert kwargs["parameters"]["page"] == 1

    @pytest.mark.asyncio
    async def test_last_page_has_no_next(self, mock_github):
        _, instance = mock_github
        instance.requester.requestJsonAndCheck.return_value = (
            {"Link": '<https://api.github.com/search/issues?page=1>; rel="prev"'},
            {"total_count": 150, "items": []},
        )

        client = make_client()
        page = await client.search_issues("q", page=2)

        assert not page.has_next_page
        assert page.items == []


class TestGraphQL:
    """Test suite for the merged PR bulk query."""

    @pytest.mark.asyncio
    async def test_returns_pull_request_connection(self, mock_github):
        _, instance = mock_github
        connection = {
            "pageInfo": {"hasNextPage": True, "endCursor": "c1"},
            "nodes": [{"number": 1}],
        }
        instance.requester.graphql_query.return_value = (
            {},
            {"data": {"repository": {"pullRequests": connection}}},
        )

        client = make_client()
        result = await client.query_merged_pull_requests(after="c0")

        assert result == connection
        query, variables = instance.requester.graphql_query.call_args.args
        assert query == MERGED_PULL_REQUESTS_QUERY
        assert variables == {"owner": "x", "repo": "y", "after": "c0"}

    @pytest.mark.asyncio
    async def test_missing_repository_yields_empty_connection(self, mock_github):
        _, instance = mock_github
        instance.requester.graphql_query.return_value = ({}, {"data": {"repository": None}})

        client = make_client()
        result = await client.query_merged_pull_requests()

        assert result["nodes"] == []

    @pytest.mark.asyncio
    async def test_query_errors_propagate(self, mock_github):
        _, instance = mock_github
        instance.requester.graphql_query.side_effect = GithubException(
            400, {"errors": [{"message": "bad"}]}, None
        )

        client = make_client()
        with pytest.raises(GithubException):
            await client.query_merged_pull_requests()


class TestPerThreadTransport:
    """Test suite for per-thread PyGithub instances."""

    def test_each_thread_gets_its_own_github(self):
        with patch(
            "prhistory.integrations.github.client.Github",
            side_effect=lambda **kwargs: MagicMock(),
        ):
            client = make_client()
            barrier = threading.Barrier(2)
            seen = []

            def worker():
                barrier.wait()
                seen.append((client.github, client.github, client.repo))

            threads = [threading.Thread(target=worker) for _ in range(2)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        (first, first_again, first_repo), (second, _, _) = seen
        assert first is first_again
        assert first is not second
        assert first_repo is first.get_repo.return_value


class _PullRequestHandler(BaseHTTPRequestHandler):
    """Serves /repos/x/y, its pulls/{n} detail and pulls/{n}/commits."""

    protocol_version = "HTTP/1.1"

    def do_GET(self):
        base = f"http://127.0.0.1:{self.server.server_port}"
        parts = self.path.split("?", 1)[0].strip("/").split("/")
        if parts == ["repos", "x", "y"]:
            self._send(200, {"full_name": "x/y", "url": f"{base}/repos/x/y"})
            return
        if parts[:4] != ["repos", "x", "y", "pulls"] or len(parts) not in (5, 6):
            self._send(404, {"message": "Not Found"})
            return
        number = int(parts[4])
        if len(parts) == 6 and parts[5] == "commits":
            self._send(
                200,
                [
                    {
                        "sha": f"sha{number}",
                        "commit": {
                            "message": f"Commit for PR {number}",
                            "author": {
                                "name": "Octo Cat",
                                "email": "octo@example.com",
                                "date": "2024-01-01T00:00:00Z",
                            },
                        },
                        "parents": [{"sha": f"parent{number}"}],
                    }
                ],
            )
            return
        self._send(
            200,
            {
                "number": number,
                "title": f"PR {number}",
                "body": f"Body of PR {number}",
                "url": f"{base}/repos/x/y/pulls/{number}",
                "html_url": f"https://github.com/x/y/pull/{number}",
                "state": "closed",
                "merged_at": "2024-01-02T00:00:00Z",
                "merge_commit_sha": f"merge{number}",
                "user": {
                    "login": "octocat",
                    "html_url": "https://github.com/octocat",
                    "type": "User",
                },
            },
        )

    def _send(self, status, payload):
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_api():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _PullRequestHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    server.server_close()


class TestConcurrentFetches:
    """Test suite for many PR fetches sharing one client."""

    @pytest.mark.asyncio
    async def test_concurrent_fetches_keep_responses_paired(self, local_api):
        client = GitHubClient(token="", owner="x", repo="y", api_url=local_api, timeout=5)

        result = await PRFetcher(client, concurrency=10).fetch_prs(range(1, 31))

        assert result.ok, result.error
        assert sorted(pr.number for pr in result.prs) == list(range(1, 31))
        for pr in result.prs:
            assert pr.title == f"PR {pr.number}"
            assert pr.author == "octocat"
            assert [c.sha for c in pr.commits] == [f"sha{pr.number}"]
            assert pr.commits[0].parents == [f"parent{pr.number}"]
