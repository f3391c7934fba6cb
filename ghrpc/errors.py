"""Error taxonomy shared by the resolver, the client and the dispatcher.

Every error carries a stable ``code`` so the RPC layer can return a typed
failure to the caller without inspecting exception classes.
"""

from typing import List


class GitHubServiceError(Exception):
    """Base class for all failures surfaced to RPC callers."""

    code = "error"

    def to_dict(self) -> dict:
        return {"code": self.code, "message": str(self)}


class CredentialError(GitHubServiceError):
    """Token could not be resolved; the service cannot start."""

    code = "credential_error"


class NoCredentialFound(CredentialError):
    """No token in config, environment or gh CLI hosts file."""

    code = "no_credential_found"


class CredentialFileCorrupt(CredentialError):
    """gh CLI hosts file exists but is not valid YAML mapping."""

    code = "credential_file_corrupt"


class UpstreamError(GitHubServiceError):
    """GitHub call failed (network, HTTP status, GraphQL or payload shape)."""

    code = "upstream_error"


class TransportError(UpstreamError):
    """Non-2xx status or connection-layer failure.

    ``status`` is None when no HTTP response was received (DNS, TLS, timeout).
    """

    code = "transport_error"

    def __init__(self, status: int | None, body: str) -> None:
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"GitHub request failed: {body}")
        else:
            super().__init__(f"GitHub API error {status}: {body}")


class UpstreamQueryError(UpstreamError):
    """GraphQL response carried errors instead of usable data."""

    code = "upstream_query_error"

    def __init__(self, messages: List[str]) -> None:
        self.messages = list(messages)
        super().__init__(f"GraphQL errors: {', '.join(self.messages)}")


class MalformedResponse(UpstreamError):
    """2xx response whose body does not have the expected shape."""

    code = "malformed_response"


class RequestError(GitHubServiceError):
    """Caller sent a request that cannot be served."""

    code = "invalid_request"


class InvalidRepoFormat(RequestError):
    """``repo`` parameter is not exactly ``owner/name``."""

    code = "invalid_repo_format"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid repo format. Expected 'owner/repo', got: {value}")


class MissingParameter(RequestError):
    code = "missing_parameter"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing required parameter: {name}")


class UnknownMethod(RequestError):
    code = "unknown_method"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown method: {name}")
