"""
Unit tests for toplangs.ingestion.github_graphql_client.

All tests are fully offline: urlopen is replaced by a fake opener.
Tests cover the request shape, error classification (transport vs. structured)
and the repository node extraction.
"""
import io
import json
import urllib.error

import pytest

from toplangs.config import TopLangsConfig
from toplangs.errors import TransportError, UpstreamError
from toplangs.ingestion.github_graphql_client import (
    TOP_LANGUAGES_QUERY,
    GitHubGraphQLClient,
)
from toplangs.pipeline import build_top_languages_card


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FakeOpener:
    """Records requests; answers with ``payload`` or raises ``error``."""

    def __init__(self, payload=None, error=None, raw=None):
        self.payload = payload
        self.error = error
        self.raw = raw
        self.requests = []

    def __call__(self, req, timeout=None):
        self.requests.append((req, timeout))
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return FakeResponse(self.raw)
        return FakeResponse(json.dumps(self.payload).encode("utf-8"))


def user_payload(nodes):
    return {"data": {"user": {"repositories": {"nodes": nodes}}}}


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


def test_query_constant_asks_for_owned_repos_and_sized_languages():
    assert "ownerAffiliations: OWNER" in TOP_LANGUAGES_QUERY
    assert "first: 100" in TOP_LANGUAGES_QUERY
    assert "languages(first: 10, orderBy: {field: SIZE, direction: DESC})" in TOP_LANGUAGES_QUERY


def test_request_is_authenticated_post(repo_nodes):
    opener = FakeOpener(payload=user_payload(repo_nodes))
    config = TopLangsConfig(request_timeout_s=7)
    client = GitHubGraphQLClient("secret", config=config, opener=opener)

    client.fetch_repository_languages("octocat")

    req, timeout = opener.requests[0]
    assert req.get_method() == "POST"
    assert req.full_url == "https://api.github.com/graphql"
    assert req.get_header("Authorization") == "Bearer secret"
    assert timeout == 7
    body = json.loads(req.data)
    assert body["variables"] == {"login": "octocat"}


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def test_fetch_returns_non_empty_nodes(repo_nodes):
    opener = FakeOpener(payload=user_payload([None, *repo_nodes]))
    client = GitHubGraphQLClient("t", opener=opener)
    assert client.fetch_repository_languages("octocat") == repo_nodes


def test_unknown_user_is_upstream_error():
    opener = FakeOpener(payload={"data": {"user": None}})
    client = GitHubGraphQLClient("t", opener=opener)
    with pytest.raises(UpstreamError, match="Could not resolve to a User"):
        client.fetch_repository_languages("ghost")


def test_graphql_errors_are_upstream_errors():
    opener = FakeOpener(payload={"errors": [{"type": "RATE_LIMITED", "message": "API rate limit exceeded"}]})
    client = GitHubGraphQLClient("t", opener=opener)
    with pytest.raises(UpstreamError, match="API rate limit exceeded"):
        client.query(TOP_LANGUAGES_QUERY, {"login": "octocat"})


def test_http_error_is_transport_error():
    error = urllib.error.HTTPError(
        "https://api.github.com/graphql", 502, "Bad Gateway", hdrs=None, fp=None
    )
    client = GitHubGraphQLClient("t", opener=FakeOpener(error=error))
    with pytest.raises(TransportError, match="502"):
        client.fetch_repository_languages("octocat")


def test_network_error_is_transport_error():
    error = urllib.error.URLError("connection refused")
    client = GitHubGraphQLClient("t", opener=FakeOpener(error=error))
    with pytest.raises(TransportError, match="connection refused"):
        client.fetch_repository_languages("octocat")


def test_timeout_is_transport_error():
    client = GitHubGraphQLClient("t", opener=FakeOpener(error=TimeoutError("timed out")))
    with pytest.raises(TransportError):
        client.fetch_repository_languages("octocat")


def test_undecodable_body_is_transport_error():
    client = GitHubGraphQLClient("t", opener=FakeOpener(raw=b"<html>oops</html>"))
    with pytest.raises(TransportError, match="undecodable"):
        client.fetch_repository_languages("octocat")


@pytest.mark.parametrize("raw", [b"null", b"[1, 2]", b'"text"'])
def test_non_object_body_is_transport_error(raw):
    client = GitHubGraphQLClient("t", opener=FakeOpener(raw=raw))
    with pytest.raises(TransportError, match="unexpected body"):
        client.fetch_repository_languages("octocat")


def test_null_body_renders_error_card(recorded_sleep):
    opener = FakeOpener(raw=b"null")
    client = GitHubGraphQLClient("t", opener=opener)
    result = build_top_languages_card("octocat", token="t", client=client, sleep=recorded_sleep)
    assert result.error is not None
    assert len(opener.requests) == 4
    assert "Something went wrong!" in result.svg
