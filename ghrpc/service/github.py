"""GitHub RPC service: method catalog, dispatch and health probes."""

import logging
import time
from typing import Any, Callable, Dict, List

from ghrpc import __version__
from ghrpc.api.client import GitHubClient
from ghrpc.config import AppConfig
from ghrpc.errors import GitHubServiceError, UnknownMethod
from ghrpc.runtime import TaskRunner
from ghrpc.service.base import HealthStatus, MethodInfo, ParamInfo, ParamType, RpcService
from ghrpc.service.params import RepoRef, extract_params

LOG = logging.getLogger("ghrpc.service")

DEFAULT_LIMIT = 10

_REPO = ParamInfo(name="repo", param_type=ParamType.REPO, required=True, description="Repository as owner/repo")
_STATE = ParamInfo(
    name="state",
    param_type=ParamType.STRING,
    default="open",
    description="open, closed, merged (PRs only) or all",
)
_LIMIT = ParamInfo(name="limit", param_type=ParamType.INTEGER, default=DEFAULT_LIMIT, description="Max items (1-100)")

# Single source for both dispatch-time validation and method_list()
CATALOG: Dict[str, MethodInfo] = {
    m.name: m
    for m in [
        MethodInfo(name="health", description="Check GitHub API connectivity"),
        MethodInfo(name="user", description="Get current authenticated user"),
        MethodInfo(name="repos", description="List your repositories", params=[_LIMIT]),
        MethodInfo(name="issues", description="List issues for a repository", params=[_REPO, _STATE, _LIMIT]),
        MethodInfo(name="prs", description="List pull requests for a repository", params=[_REPO, _STATE, _LIMIT]),
        MethodInfo(
            name="pr",
            description="Get pull request details with reviews and status checks",
            params=[_REPO, ParamInfo(name="number", param_type=ParamType.INTEGER, required=True, minimum=1)],
        ),
        MethodInfo(name="notifications", description="Get unread notifications"),
        MethodInfo(
            name="create_issue",
            description="Create a new issue",
            params=[
                _REPO,
                ParamInfo(name="title", param_type=ParamType.STRING, required=True),
                ParamInfo(name="body", param_type=ParamType.STRING),
            ],
        ),
    ]
}


class GitHubService(RpcService):
    """RPC service for GitHub operations.

    Public methods are synchronous; each network call runs on the shared
    TaskRunner and the calling thread waits for that call only.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        client: GitHubClient | None = None,
        runner: TaskRunner | None = None,
    ) -> None:
        """Create the service.

        Args:
            config: Application config (defaults + env when None)
            client: Shared API client; built from config when None
            runner: Shared task runner; built from config when None

        Raises:
            CredentialError: No usable token (the service cannot start)
        """
        self.config = config or AppConfig()
        self.client = client or GitHubClient(token=self.config.explicit_token, config=self.config.github)
        self.runner = runner or TaskRunner(max_workers=self.config.service.workers)
        self._handlers: Dict[str, Callable[..., Any]] = {
            "health": self._health,
            "user": self._user,
            "repos": self._repos,
            "issues": self._issues,
            "prs": self._prs,
            "pr": self._pr,
            "notifications": self._notifications,
            "create_issue": self._create_issue,
        }

    def name(self) -> str:
        return self.config.service.name

    def version(self) -> str:
        return __version__

    def resolve_method(self, method: str) -> str:
        """Map ``repos`` or ``github.repos`` to the catalog name."""
        prefix = f"{self.name()}."
        bare = method[len(prefix) :] if method.startswith(prefix) else method
        if bare not in CATALOG:
            raise UnknownMethod(method)
        return bare

    def dispatch(self, method: str, params: Dict[str, Any] | None) -> Any:
        bare = self.resolve_method(method)
        kwargs = extract_params(CATALOG[bare].params, params)
        LOG.debug("Dispatching %s", bare)
        return self._handlers[bare](**kwargs)

    def method_list(self) -> List[MethodInfo]:
        return [m.model_copy(update={"name": f"{self.name()}.{m.name}"}) for m in CATALOG.values()]

    def _health(self) -> Dict[str, Any]:
        ok = self.runner.run(self.client.ping)
        return {
            "status": "healthy" if ok else "unhealthy",
            "api_connected": ok,
            "version": self.version(),
        }

    def _user(self) -> Dict[str, Any]:
        user = self.runner.run(self.client.get_user)
        return user.model_dump(mode="json")

    def _repos(self, limit: int) -> Dict[str, Any]:
        repos = self.runner.run(self.client.list_repos, limit)
        return {
            "repos": [r.model_dump(mode="json") for r in repos],
            "count": len(repos),
        }

    def _issues(self, repo: RepoRef, state: str, limit: int) -> Dict[str, Any]:
        issues = self.runner.run(self.client.list_issues, repo.owner, repo.name, state, limit)
        return {
            "repo": repo.full_name,
            "state": state,
            "issues": [i.model_dump(mode="json") for i in issues],
            "count": len(issues),
        }

    def _prs(self, repo: RepoRef, state: str, limit: int) -> Dict[str, Any]:
        prs = self.runner.run(self.client.list_prs, repo.owner, repo.name, state, limit)
        return {
            "repo": repo.full_name,
            "state": state,
            "prs": [p.model_dump(mode="json") for p in prs],
            "count": len(prs),
        }

    def _pr(self, repo: RepoRef, number: int) -> Dict[str, Any]:
        pr = self.runner.run(self.client.get_pr, repo.owner, repo.name, number)
        return pr.model_dump(mode="json")

    def _notifications(self) -> Dict[str, Any]:
        notifications = self.runner.run(self.client.get_notifications)
        return {
            "notifications": [n.model_dump(mode="json") for n in notifications],
            "unread_count": sum(1 for n in notifications if n.unread),
        }

    def _create_issue(self, repo: RepoRef, title: str, body: str | None) -> Dict[str, Any]:
        issue = self.runner.run(self.client.create_issue, repo.owner, repo.name, title, body)
        LOG.info("Created issue %s#%s", repo.full_name, issue.number)
        return {
            "created": True,
            "issue": issue.model_dump(mode="json"),
        }

    def on_start(self) -> None:
        """Verify the API is reachable before serving; raise to abort."""
        LOG.info("GitHubService starting, verifying API connection...")
        try:
            ok = self.runner.run(self.client.ping)
        except GitHubServiceError as e:
            LOG.error("Failed to connect to GitHub API: %s", e)
            raise
        if ok:
            LOG.info("GitHub API connection verified")
        else:
            LOG.warning("GitHub API returned empty viewer login")

    def health_check(self) -> Dict[str, HealthStatus]:
        start = time.perf_counter()
        try:
            ok = self.runner.run(self.client.ping)
        except Exception as e:
            LOG.debug("Health probe failed: %r", e)
            return {"github_api": HealthStatus.unhealthy(str(e) or type(e).__name__)}
        latency_ms = (time.perf_counter() - start) * 1000.0
        if not ok:
            return {"github_api": HealthStatus.unhealthy("Empty viewer login")}
        return {"github_api": HealthStatus.healthy_with_latency(latency_ms)}
