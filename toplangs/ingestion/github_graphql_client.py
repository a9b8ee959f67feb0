"""
GitHub GraphQL Client — Repository language sizes for a single user.

Fetches the first 100 repositories owned by a user (most recently pushed
first, forks included) together with up to 10 languages per repository,
ordered by byte size.

Every network or HTTP failure is raised as TransportError so that the caller
can retry it; a structured GraphQL ``errors`` payload is raised as
UpstreamError and must not be retried.
Uses only Python stdlib (urllib.request).
"""
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Callable, Optional

from toplangs.config import DEFAULT_CONFIG, TopLangsConfig
from toplangs.errors import TransportError, UpstreamError

logger = logging.getLogger(__name__)

USER_AGENT = "toplangs/0.1"

TOP_LANGUAGES_QUERY = """
query userInfo($login: String!) {
  user(login: $login) {
    repositories(ownerAffiliations: OWNER, first: 100, orderBy: {field: PUSHED_AT, direction: DESC}) {
      nodes {
        name
        languages(first: 10, orderBy: {field: SIZE, direction: DESC}) {
          edges {
            size
            node {
              name
              color
            }
          }
        }
      }
    }
  }
}
"""


class GitHubGraphQLClient:
    """Thin GraphQL transport for api.github.com.

    One call to ``query`` performs exactly one HTTP request; retries are the
    caller's concern (see toplangs.ingestion.retry).

    Args:
        token: GitHub personal access token, sent as a Bearer credential.
        config: Supplies the endpoint URL and request timeout.
        opener: Callable with the signature of urllib.request.urlopen.
            Injectable so tests can run fully offline.
    """

    def __init__(
        self,
        token: str,
        config: TopLangsConfig = DEFAULT_CONFIG,
        opener: Optional[Callable[..., Any]] = None,
    ) -> None:
        self._token = token
        self._endpoint = config.graphql_endpoint
        self._timeout = config.request_timeout_s
        self._opener = opener or urllib.request.urlopen

    def _post(self, payload: dict) -> dict:
        """POST a JSON payload and decode the JSON response.

        Raises:
            TransportError: On HTTP status errors, network errors, timeouts
                or an undecodable body.
        """
        req = urllib.request.Request(
            self._endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            method="POST",
        )
        try:
            with self._opener(req, timeout=self._timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as exc:
            raise TransportError(f"GitHub HTTP {exc.code} error: {exc.reason}") from exc
        except urllib.error.URLError as exc:
            raise TransportError(f"GitHub network error: {exc.reason}") from exc
        except (TimeoutError, OSError) as exc:
            raise TransportError(f"GitHub request failed: {exc}") from exc

        try:
            result = json.loads(body)
        except (TypeError, ValueError) as exc:
            raise TransportError(f"GitHub returned an undecodable body: {exc}") from exc
        if not isinstance(result, dict):
            raise TransportError(f"GitHub returned an unexpected body: {type(result).__name__}")
        return result

    def query(self, query: str, variables: dict) -> dict:
        """Run a GraphQL query and return its ``data`` object.

        Raises:
            UpstreamError: If the response carries a GraphQL ``errors`` list.
            TransportError: On any transport-level failure.
        """
        result = self._post({"query": query, "variables": variables})

        errors = result.get("errors")
        if errors:
            logger.error("GitHub GraphQL errors: %s", errors)
            message = (errors[0] or {}).get("message") or "GraphQL API error"
            raise UpstreamError(message)

        return result.get("data") or {}

    def fetch_repository_languages(self, login: str) -> list[dict]:
        """Fetch the repository nodes (name + language edges) of ``login``.

        Returns:
            List of repository dicts shaped like
            ``{"name": str, "languages": {"edges": [{"size": int,
            "node": {"name": str, "color": str | None}}]}}``.

        Raises:
            UpstreamError: Structured error, or the user does not exist.
            TransportError: On any transport-level failure.
        """
        data = self.query(TOP_LANGUAGES_QUERY, {"login": login})
        user = data.get("user")
        if user is None:
            raise UpstreamError(f"Could not resolve to a User with the login of '{login}'.")

        nodes = (user.get("repositories") or {}).get("nodes") or []
        logger.debug("GitHub: %d repositories fetched for %s", len(nodes), login)
        return [node for node in nodes if node]
