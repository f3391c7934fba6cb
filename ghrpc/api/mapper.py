"""Map GitHub GraphQL nodes and REST payloads to ghrpc.models."""

from typing import Any, Dict, List, Tuple

from ghrpc.models import (
    CheckContext,
    CheckStatus,
    Issue,
    Mergeable,
    Notification,
    PullRequest,
    Repository,
    Review,
    User,
)

MAX_PAGE_SIZE = 100

_ISSUE_STATES: Dict[str, Tuple[str, ...]] = {
    "OPEN": ("OPEN",),
    "CLOSED": ("CLOSED",),
    "ALL": ("OPEN", "CLOSED"),
}

_PR_STATES: Dict[str, Tuple[str, ...]] = {
    "OPEN": ("OPEN",),
    "CLOSED": ("CLOSED",),
    "MERGED": ("MERGED",),
    "ALL": ("OPEN", "CLOSED", "MERGED"),
}

# Substrings GitHub puts in INSUFFICIENT_SCOPES messages for the email field
_EMAIL_SCOPE_MARKERS = ("user:email", "read:user")


def issue_states(state: str) -> List[str]:
    """Translate a caller state token into issue ``states`` filter values.

    Unknown tokens (including "merged") fall back to open issues only.
    """
    return list(_ISSUE_STATES.get(state.strip().upper(), _ISSUE_STATES["OPEN"]))


def pr_states(state: str) -> List[str]:
    """Translate a caller state token into pull request ``states`` values.

    Unknown tokens fall back to open pull requests only.
    """
    return list(_PR_STATES.get(state.strip().upper(), _PR_STATES["OPEN"]))


def clamp_limit(limit: int) -> int:
    """Keep ``first:`` inside the page range GitHub accepts."""
    return max(1, min(limit, MAX_PAGE_SIZE))


def is_missing_scope_error(message: str) -> bool:
    """True if a GraphQL error message says the email scope is missing."""
    return any(marker in message for marker in _EMAIL_SCOPE_MARKERS)


def _login(node: Dict[str, Any] | None) -> str | None:
    if not node:
        return None
    return node.get("login")


def _total(node: Dict[str, Any] | None) -> int:
    if not node:
        return 0
    return node.get("totalCount") or 0


def nodes(connection: Dict[str, Any] | None) -> List[Dict[str, Any]]:
    """Non-null ``nodes`` of a GraphQL connection (empty if absent)."""
    if not connection:
        return []
    return [n for n in connection.get("nodes") or [] if n is not None]


def viewer_login(viewer: Dict[str, Any]) -> str:
    return viewer["login"] or ""


def user_from_viewer(viewer: Dict[str, Any]) -> User:
    return User(
        login=viewer["login"],
        name=viewer.get("name"),
        email=viewer.get("email"),
        avatar_url=viewer["avatarUrl"],
        bio=viewer.get("bio"),
        company=viewer.get("company"),
        location=viewer.get("location"),
        website_url=viewer.get("websiteUrl"),
        twitter_username=viewer.get("twitterUsername"),
        public_repos=_total(viewer.get("repositories")),
        followers=_total(viewer.get("followers")),
        following=_total(viewer.get("following")),
        created_at=viewer["createdAt"],
    )


def repository_from_node(node: Dict[str, Any]) -> Repository:
    language = node.get("primaryLanguage") or {}
    return Repository(
        name=node["name"],
        full_name=node["nameWithOwner"],
        description=node.get("description"),
        url=node["url"],
        is_private=bool(node.get("isPrivate")),
        is_fork=bool(node.get("isFork")),
        stars=node.get("stargazerCount") or 0,
        forks=node.get("forkCount") or 0,
        language=language.get("name"),
        updated_at=node["updatedAt"],
        pushed_at=node.get("pushedAt"),
    )


def issue_from_node(node: Dict[str, Any]) -> Issue:
    """Build Issue from a GraphQL issue node.

    Labels keep upstream order; duplicates are not collapsed.
    """
    return Issue(
        number=node["number"],
        title=node["title"],
        state=node["state"],
        url=node["url"],
        created_at=node["createdAt"],
        updated_at=node["updatedAt"],
        author=_login(node.get("author")),
        labels=[lb["name"] for lb in nodes(node.get("labels"))],
        comment_count=_total(node.get("comments")),
    )


def review_from_node(node: Dict[str, Any]) -> Review:
    return Review(
        author=_login(node.get("author")),
        state=node["state"],
        submitted_at=node.get("submittedAt"),
    )


def _mergeable(value: Any) -> Mergeable:
    try:
        return Mergeable(value)
    except ValueError:
        return Mergeable.UNKNOWN


def check_status_from_commits(connection: Dict[str, Any] | None) -> CheckStatus | None:
    """Extract the status check rollup of the last commit, if any.

    Check runs report name/status/conclusion; legacy commit statuses report
    context/state and are mapped onto the same shape.
    """
    commits = nodes(connection)
    if not commits:
        return None
    rollup = (commits[-1].get("commit") or {}).get("statusCheckRollup")
    if not rollup:
        return None
    contexts: List[CheckContext] = []
    for ctx in nodes(rollup.get("contexts")):
        if ctx.get("__typename") == "StatusContext" or "context" in ctx:
            contexts.append(CheckContext(name=ctx["context"], status=ctx.get("state")))
        else:
            contexts.append(CheckContext(name=ctx["name"], status=ctx.get("status"), conclusion=ctx.get("conclusion")))
    return CheckStatus(state=rollup["state"], contexts=contexts)


def pull_request_from_node(node: Dict[str, Any]) -> PullRequest:
    return PullRequest(
        number=node["number"],
        title=node["title"],
        state=node["state"],
        url=node["url"],
        is_draft=bool(node.get("isDraft")),
        mergeable=_mergeable(node.get("mergeable")),
        created_at=node["createdAt"],
        updated_at=node["updatedAt"],
        author=_login(node.get("author")),
        head_branch=node["headRefName"],
        base_branch=node["baseRefName"],
        additions=node.get("additions") or 0,
        deletions=node.get("deletions") or 0,
        changed_files=node.get("changedFiles") or 0,
        commit_count=_total(node.get("commits")),
        comment_count=_total(node.get("comments")),
        reviews=[review_from_node(r) for r in nodes(node.get("reviews"))],
        checks=check_status_from_commits(node.get("headCommit")),
    )


def notification_from_api(data: Dict[str, Any]) -> Notification:
    """Build Notification from a REST /notifications item."""
    subject = data["subject"]
    return Notification(
        id=str(data["id"]),
        unread=bool(data["unread"]),
        reason=data["reason"],
        subject_title=subject["title"],
        subject_type=subject["type"],
        subject_url=subject.get("url"),
        repo_full_name=data["repository"]["full_name"],
        updated_at=data["updated_at"],
    )
