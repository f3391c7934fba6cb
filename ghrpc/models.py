"""Data models for GitHub users, repositories, issues, PRs and notifications.

All records are immutable and built fresh from each response.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

_FROZEN = {"frozen": True, "extra": "forbid"}


class User(BaseModel):
    """Authenticated GitHub user."""

    model_config = _FROZEN

    login: str
    name: Optional[str] = None
    email: Optional[str] = Field(default=None, description="Absent when the token lacks user:email scope")
    avatar_url: str
    bio: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    website_url: Optional[str] = None
    twitter_username: Optional[str] = None
    public_repos: int = Field(default=0, ge=0)
    followers: int = Field(default=0, ge=0)
    following: int = Field(default=0, ge=0)
    created_at: str


class Repository(BaseModel):
    """GitHub repository."""

    model_config = _FROZEN

    name: str
    full_name: str = Field(..., description="owner/name")
    description: Optional[str] = None
    url: str
    is_private: bool = False
    is_fork: bool = False
    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    language: Optional[str] = None
    updated_at: str
    pushed_at: Optional[str] = None


class Issue(BaseModel):
    """GitHub issue."""

    model_config = _FROZEN

    number: int = Field(..., gt=0)
    title: str
    state: str = Field(..., description="OPEN or CLOSED")
    url: str
    created_at: str
    updated_at: str
    author: Optional[str] = None
    labels: List[str] = Field(default_factory=list, description="Label names in upstream order")
    comment_count: int = Field(default=0, ge=0)


class Mergeable(str, Enum):
    MERGEABLE = "MERGEABLE"
    CONFLICTING = "CONFLICTING"
    UNKNOWN = "UNKNOWN"


class Review(BaseModel):
    """Pull request review. No ``submitted_at`` means the review is pending."""

    model_config = _FROZEN

    author: Optional[str] = None
    state: str
    submitted_at: Optional[str] = None


class CheckContext(BaseModel):
    """One check run or commit status on the PR head commit."""

    model_config = _FROZEN

    name: str
    status: Optional[str] = None
    conclusion: Optional[str] = None


class CheckStatus(BaseModel):
    """Status check rollup of the PR head commit."""

    model_config = _FROZEN

    state: str
    contexts: List[CheckContext] = Field(default_factory=list)


class PullRequest(BaseModel):
    """GitHub pull request."""

    model_config = _FROZEN

    number: int = Field(..., gt=0)
    title: str
    state: str
    url: str
    is_draft: bool = False
    mergeable: Mergeable = Mergeable.UNKNOWN
    created_at: str
    updated_at: str
    author: Optional[str] = None
    head_branch: str
    base_branch: str
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    changed_files: int = Field(default=0, ge=0)
    commit_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    reviews: List[Review] = Field(default_factory=list, description="As returned upstream, not re-sorted")
    checks: Optional[CheckStatus] = Field(default=None, description="Only set by single-PR lookups")


class Notification(BaseModel):
    """GitHub notification thread."""

    model_config = _FROZEN

    id: str
    unread: bool
    reason: str
    subject_title: str
    subject_type: str
    subject_url: Optional[str] = None
    repo_full_name: str
    updated_at: str


class GraphQLError(BaseModel):
    """Single entry of a GraphQL ``errors`` array."""

    message: str
    type: Optional[str] = None
    path: Optional[List[Any]] = None


class GraphQLEnvelope(BaseModel):
    """GraphQL response wrapper: ``data`` and/or ``errors``."""

    data: Optional[dict] = None
    errors: Optional[List[GraphQLError]] = None

    @property
    def messages(self) -> List[str]:
        return [err.message for err in self.errors or []]
