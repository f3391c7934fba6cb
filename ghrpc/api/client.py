"""GitHub GraphQL and REST API client with connection pooling."""

import logging
from typing import Any, Callable, Dict, List, TypeVar

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from ghrpc.api import mapper, queries
from ghrpc.auth import resolve_token
from ghrpc.config import GitHubConfig
from ghrpc.errors import MalformedResponse, TransportError, UpstreamError, UpstreamQueryError
from ghrpc.models import GraphQLEnvelope, Issue, Notification, PullRequest, Repository, User

LOG = logging.getLogger("ghrpc.api.client")

# Response bodies quoted in errors are cut to this many characters
BODY_SNIPPET = 500

T = TypeVar("T")


def _snippet(text: str) -> str:
    return text[:BODY_SNIPPET]


def _dig(envelope: GraphQLEnvelope, *keys: str) -> Any:
    """Walk required keys of the envelope's ``data`` object.

    A null on the way is an upstream failure when an error's ``path`` leads
    there (e.g. "Could not resolve to a PullRequest"), otherwise a shape
    violation. Nulls deeper down (list items, optional fields) are left to
    the mapper.
    """
    node: Any = envelope.data
    for depth, key in enumerate(keys, start=1):
        if not isinstance(node, dict):
            raise MalformedResponse(f"GraphQL response missing {'.'.join(keys)}")
        node = node.get(key)
        if node is None:
            walked = list(keys[:depth])
            explained = [err.message for err in envelope.errors or [] if err.path and err.path[:depth] == walked]
            if explained:
                raise UpstreamQueryError(explained)
            raise MalformedResponse(f"GraphQL response missing {'.'.join(keys)}")
    return node


def _map(build: Callable[[Any], T], node: Any) -> T:
    """Run a mapper function, turning shape errors into MalformedResponse."""
    try:
        return build(node)
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Unexpected response shape: {e!r}") from e


class GitHubClient:
    """GitHub API client with a persistent, bounded connection pool.

    One instance is shared by every call of the service. The token is
    resolved once here and never re-read.
    """

    def __init__(self, token: str | None = None, config: GitHubConfig | None = None) -> None:
        """Create the client.

        Args:
            token: Explicit token; when None the resolver checks env vars and
                the gh CLI hosts file
            config: Endpoints, timeout and pool size

        Raises:
            NoCredentialFound: No token available
            CredentialFileCorrupt: gh CLI hosts file could not be parsed
        """
        self.config = config or GitHubConfig()
        self.token = resolve_token(token)
        self.graphql_url = self.config.graphql_url
        self.api_url = self.config.api_url.rstrip("/")
        self.timeout = self.config.timeout

        self._session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=1,
            pool_maxsize=self.config.pool_maxsize,
            max_retries=0,
        )
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update(
            {
                "Authorization": f"Bearer {self.token}",
                "User-Agent": self.config.user_agent,
            }
        )

    def close(self) -> None:
        self._session.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and decode its JSON body.

        The response is always closed so its connection returns to the pool.

        Raises:
            TransportError: Connection failure or non-2xx status
            MalformedResponse: 2xx body is not JSON
        """
        LOG.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(None, str(e)) from e
        try:
            if not 200 <= resp.status_code < 300:
                raise TransportError(resp.status_code, _snippet(resp.text))
            try:
                return resp.json()
            except ValueError as e:
                raise MalformedResponse(f"JSON parse error: {e} | Raw: {_snippet(resp.text)}") from e
        finally:
            resp.close()

    def graphql(self, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """Execute a GraphQL query and return its ``data`` object.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The ``data`` member of the response envelope; parts of it may be
            null when it came with errors

        Raises:
            TransportError: Connection failure or non-2xx status
            UpstreamQueryError: Errors without data
            MalformedResponse: Neither data nor errors, or unparsable body
        """
        return self.execute(query, variables).data or {}

    def execute(self, query: str, variables: Dict[str, Any] | None = None) -> GraphQLEnvelope:
        """Like graphql() but keep the errors of a partial result.

        The returned envelope always has ``data``.
        """
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables
        raw = self._request("POST", self.graphql_url, json=payload)

        try:
            envelope = GraphQLEnvelope.model_validate(raw)
        except ValidationError as e:
            raise MalformedResponse(f"Unexpected GraphQL envelope: {e}") from e

        if envelope.data is None:
            if envelope.errors:
                raise UpstreamQueryError(envelope.messages)
            raise MalformedResponse("GraphQL response missing data field")

        if envelope.errors:
            LOG.warning("GraphQL partial result: %s", "; ".join(envelope.messages))
        return envelope

    def rest_get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        """GET a REST resource and return the decoded JSON body."""
        url = f"{self.api_url}{path}" if path.startswith("/") else f"{self.api_url}/{path}"
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.config.api_version,
        }
        return self._request("GET", url, params=params, headers=headers)

    def ping(self) -> bool:
        """Cheapest authenticated round trip.

        Returns:
            True if the viewer login is non-empty
        """
        envelope = self.execute(queries.VIEWER_LOGIN)
        return bool(_map(mapper.viewer_login, _dig(envelope, "viewer")))

    def get_user(self) -> User:
        """Get the authenticated user.

        The email field needs user:email or read:user scope. If the first
        query is refused for that reason it is re-run once without email and
        the user is returned with ``email=None``. Other failures propagate.
        """
        try:
            envelope = self.execute(queries.VIEWER_WITH_EMAIL)
        except UpstreamError as e:
            if not mapper.is_missing_scope_error(str(e)):
                raise
            LOG.info("Token lacks email scope, fetching viewer without email")
            envelope = self.execute(queries.VIEWER_WITHOUT_EMAIL)
        return _map(mapper.user_from_viewer, _dig(envelope, "viewer"))

    def list_repos(self, limit: int) -> List[Repository]:
        """List the viewer's repositories, most recently updated first."""
        envelope = self.execute(queries.VIEWER_REPOSITORIES, {"first": mapper.clamp_limit(limit)})
        connection = _dig(envelope, "viewer", "repositories")
        return [_map(mapper.repository_from_node, n) for n in mapper.nodes(connection)]

    def list_issues(self, owner: str, repo: str, state: str, limit: int) -> List[Issue]:
        """List issues of a repository filtered by state token."""
        variables = {
            "owner": owner,
            "name": repo,
            "first": mapper.clamp_limit(limit),
            "states": mapper.issue_states(state),
        }
        envelope = self.execute(queries.REPOSITORY_ISSUES, variables)
        connection = _dig(envelope, "repository", "issues")
        return [_map(mapper.issue_from_node, n) for n in mapper.nodes(connection)]

    def list_prs(self, owner: str, repo: str, state: str, limit: int) -> List[PullRequest]:
        """List pull requests of a repository filtered by state token."""
        variables = {
            "owner": owner,
            "name": repo,
            "first": mapper.clamp_limit(limit),
            "states": mapper.pr_states(state),
        }
        envelope = self.execute(queries.REPOSITORY_PULL_REQUESTS, variables)
        connection = _dig(envelope, "repository", "pullRequests")
        return [_map(mapper.pull_request_from_node, n) for n in mapper.nodes(connection)]

    def get_pr(self, owner: str, repo: str, pr_number: int) -> PullRequest:
        """Get one pull request with reviews and head commit checks."""
        variables = {"owner": owner, "name": repo, "number": pr_number}
        envelope = self.execute(queries.PULL_REQUEST, variables)
        return _map(mapper.pull_request_from_node, _dig(envelope, "repository", "pullRequest"))

    def get_notifications(self) -> List[Notification]:
        """Get unread notifications (REST)."""
        items = self.rest_get("/notifications")
        if not isinstance(items, list):
            raise MalformedResponse("Expected a list from /notifications")
        return [_map(mapper.notification_from_api, item) for item in items]

    def create_issue(self, owner: str, repo: str, title: str, body: str | None = None) -> Issue:
        """Create an issue; resolves the repository node id first."""
        repo_id = self._get_repo_id(owner, repo)
        variables = {"repositoryId": repo_id, "title": title, "body": body}
        envelope = self.execute(queries.CREATE_ISSUE, variables)
        return _map(mapper.issue_from_node, _dig(envelope, "createIssue", "issue"))

    def _get_repo_id(self, owner: str, repo: str) -> str:
        envelope = self.execute(queries.REPOSITORY_ID, {"owner": owner, "name": repo})
        return _dig(envelope, "repository", "id")
