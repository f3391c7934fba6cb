"""Unit tests for GitHubClient transport (mocked session)."""

from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from ghrpc.api import queries
from ghrpc.api.client import BODY_SNIPPET, GitHubClient
from ghrpc.config import GitHubConfig
from ghrpc.errors import MalformedResponse, TransportError, UpstreamQueryError


def json_response(payload: Any, status: int = 200, text: str = "") -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.json.return_value = payload
    resp.text = text
    return resp


def test_session_headers_and_pool(client: GitHubClient) -> None:
    """Client sets bearer auth and bounds the connection pool."""
    assert client._session.headers["Authorization"] == "Bearer test-token"
    assert client._session.headers["User-Agent"].startswith("ghrpc/")
    adapter = client._session.get_adapter("https://api.github.com/graphql")
    assert adapter._pool_maxsize == 5


def test_config_overrides_endpoints() -> None:
    config = GitHubConfig(api_url="https://ghe.example.com/api/v3/", pool_maxsize=2, timeout=5)
    c = GitHubClient(token="t", config=config)
    assert c.api_url == "https://ghe.example.com/api/v3"
    assert c.timeout == 5


class TestGraphQL:
    """graphql(): envelope rules."""

    def test_returns_data(self, client: GitHubClient) -> None:
        resp = json_response({"data": {"viewer": {"login": "octocat"}}})
        with patch.object(client._session, "request", return_value=resp) as req:
            data = client.graphql("query { viewer { login } }", {"x": 1})

        assert data == {"viewer": {"login": "octocat"}}
        assert req.call_args[0][0] == "POST"
        assert req.call_args[0][1] == "https://api.github.com/graphql"
        assert req.call_args[1]["json"] == {"query": "query { viewer { login } }", "variables": {"x": 1}}
        assert req.call_args[1]["timeout"] == 30
        resp.close.assert_called_once()

    def test_omits_variables_when_none(self, client: GitHubClient) -> None:
        resp = json_response({"data": {}})
        with patch.object(client._session, "request", return_value=resp) as req:
            client.graphql("query { viewer { login } }")
        assert "variables" not in req.call_args[1]["json"]

    def test_errors_without_data(self, client: GitHubClient) -> None:
        resp = json_response({"data": None, "errors": [{"message": "first"}, {"message": "second"}]})
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(UpstreamQueryError) as exc_info:
                client.graphql("query { x }")
        assert exc_info.value.messages == ["first", "second"]
        assert "first, second" in str(exc_info.value)

    def test_neither_data_nor_errors(self, client: GitHubClient) -> None:
        resp = json_response({})
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(MalformedResponse):
                client.graphql("query { x }")

    def test_empty_errors_list_without_data(self, client: GitHubClient) -> None:
        resp = json_response({"data": None, "errors": []})
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(MalformedResponse):
                client.graphql("query { x }")

    def test_envelope_not_an_object(self, client: GitHubClient) -> None:
        resp = json_response(["not", "an", "envelope"])
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(MalformedResponse):
                client.graphql("query { x }")

    def test_partial_error_on_null_node_keeps_data(
        self, client: GitHubClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Data with errors is returned as is; nulls are for the caller to judge."""
        payload = {
            "data": {"repository": {"pullRequest": None}},
            "errors": [
                {
                    "type": "NOT_FOUND",
                    "path": ["repository", "pullRequest"],
                    "message": "Could not resolve to a PullRequest with the number of 999.",
                }
            ],
        }
        with patch.object(client._session, "request", return_value=json_response(payload)):
            with caplog.at_level("WARNING", logger="ghrpc.api.client"):
                data = client.graphql("query { x }")
        assert data == {"repository": {"pullRequest": None}}
        assert "Could not resolve to a PullRequest" in caplog.text

    def test_execute_keeps_errors(self, client: GitHubClient) -> None:
        payload = {
            "data": {"viewer": None},
            "errors": [{"message": "nope", "path": ["viewer"]}],
        }
        with patch.object(client._session, "request", return_value=json_response(payload)):
            envelope = client.execute("query { x }")
        assert envelope.data == {"viewer": None}
        assert envelope.messages == ["nope"]

    def test_partial_error_on_populated_node_keeps_data(self, client: GitHubClient) -> None:
        payload = {
            "data": {"viewer": {"login": "octocat"}},
            "errors": [{"message": "something minor", "path": ["viewer", "login"]}],
        }
        with patch.object(client._session, "request", return_value=json_response(payload)):
            data = client.graphql("query { x }")
        assert data == {"viewer": {"login": "octocat"}}

    def test_non_2xx_is_transport_error_with_truncated_body(self, client: GitHubClient) -> None:
        body = "x" * (BODY_SNIPPET * 2)
        resp = json_response(None, status=502, text=body)
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(TransportError) as exc_info:
                client.graphql("query { x }")
        assert exc_info.value.status == 502
        assert len(exc_info.value.body) == BODY_SNIPPET
        resp.close.assert_called_once()

    def test_unauthorized(self, client: GitHubClient) -> None:
        resp = json_response(None, status=401, text='{"message": "Bad credentials"}')
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(TransportError) as exc_info:
                client.graphql("query { x }")
        assert exc_info.value.status == 401
        assert "Bad credentials" in str(exc_info.value)

    def test_invalid_json(self, client: GitHubClient) -> None:
        resp = json_response(None, text="<html>oops</html>")
        resp.json.side_effect = ValueError("Expecting value")
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(MalformedResponse) as exc_info:
                client.graphql("query { x }")
        assert "<html>oops</html>" in str(exc_info.value)

    @pytest.mark.parametrize(
        "exc",
        [
            requests.ConnectionError("Name or service not known"),
            requests.Timeout("Read timed out"),
            requests.exceptions.SSLError("certificate verify failed"),
        ],
    )
    def test_connection_failures_wrapped(self, client: GitHubClient, exc: Exception) -> None:
        with patch.object(client._session, "request", side_effect=exc):
            with pytest.raises(TransportError) as exc_info:
                client.graphql("query { x }")
        assert exc_info.value.status is None
        assert str(exc) in exc_info.value.body


class TestRestGet:
    """rest_get(): headers and failure handling."""

    def test_sends_version_headers(self, client: GitHubClient) -> None:
        resp = json_response([{"id": "1"}])
        with patch.object(client._session, "request", return_value=resp) as req:
            data = client.rest_get("/notifications", params={"all": "false"})

        assert data == [{"id": "1"}]
        assert req.call_args[0] == ("GET", "https://api.github.com/notifications")
        headers = req.call_args[1]["headers"]
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert req.call_args[1]["params"] == {"all": "false"}

    def test_relative_path_without_slash(self, client: GitHubClient) -> None:
        with patch.object(client._session, "request", return_value=json_response({})) as req:
            client.rest_get("user")
        assert req.call_args[0][1] == "https://api.github.com/user"

    def test_404(self, client: GitHubClient) -> None:
        resp = json_response(None, status=404, text='{"message": "Not Found"}')
        with patch.object(client._session, "request", return_value=resp):
            with pytest.raises(TransportError) as exc_info:
                client.rest_get("/notifications")
        assert exc_info.value.status == 404

    def test_connection_failure(self, client: GitHubClient) -> None:
        with patch.object(client._session, "request", side_effect=requests.ConnectionError("boom")):
            with pytest.raises(TransportError):
                client.rest_get("/notifications")


def test_ping(client: GitHubClient) -> None:
    with patch.object(client._session, "request", return_value=json_response({"data": {"viewer": {"login": "octocat"}}})) as req:
        assert client.ping() is True
    assert req.call_args[1]["json"]["query"] == queries.VIEWER_LOGIN


def test_ping_empty_login(client: GitHubClient) -> None:
    with patch.object(client._session, "request", return_value=json_response({"data": {"viewer": {"login": ""}}})):
        assert client.ping() is False


@pytest.mark.parametrize("viewer", ["octocat", ["octocat"], {"name": "no login"}])
def test_ping_unexpected_viewer_is_malformed(client: GitHubClient, viewer: Any) -> None:
    with patch.object(client._session, "request", return_value=json_response({"data": {"viewer": viewer}})):
        with pytest.raises(MalformedResponse):
            client.ping()


def test_ping_null_viewer_is_malformed(client: GitHubClient) -> None:
    with patch.object(client._session, "request", return_value=json_response({"data": {"viewer": None}})):
        with pytest.raises(MalformedResponse):
            client.ping()
