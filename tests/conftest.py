"""Shared fixtures: a client with a fixed token and sample GraphQL nodes."""

import pytest

from ghrpc.api.client import GitHubClient


@pytest.fixture
def client() -> GitHubClient:
    return GitHubClient(token="test-token")


@pytest.fixture
def issue_node() -> dict:
    return {
        "number": 42,
        "title": "Found a bug",
        "state": "OPEN",
        "url": "https://github.com/octocat/hello-world/issues/42",
        "createdAt": "2024-01-14T00:00:00Z",
        "updatedAt": "2024-01-15T00:00:00Z",
        "author": {"login": "octocat"},
        "labels": {"nodes": [{"name": "bug"}, {"name": "help wanted"}, {"name": "bug"}]},
        "comments": {"totalCount": 5},
    }


@pytest.fixture
def pr_node() -> dict:
    return {
        "number": 123,
        "title": "Add new feature",
        "state": "OPEN",
        "url": "https://github.com/octocat/hello-world/pull/123",
        "isDraft": False,
        "mergeable": "MERGEABLE",
        "createdAt": "2024-01-14T00:00:00Z",
        "updatedAt": "2024-01-15T00:00:00Z",
        "author": {"login": "octocat"},
        "headRefName": "feature-branch",
        "baseRefName": "main",
        "additions": 100,
        "deletions": 50,
        "changedFiles": 5,
        "commits": {"totalCount": 3},
        "comments": {"totalCount": 2},
        "reviews": {
            "nodes": [
                {"author": {"login": "reviewer"}, "state": "APPROVED", "submittedAt": "2024-01-15T00:00:00Z"},
                {"author": None, "state": "PENDING", "submittedAt": None},
            ]
        },
    }


@pytest.fixture
def viewer_node() -> dict:
    return {
        "login": "octocat",
        "name": "The Octocat",
        "email": "octocat@github.com",
        "avatarUrl": "https://github.com/images/error/octocat.png",
        "bio": None,
        "company": "@github",
        "location": "San Francisco",
        "websiteUrl": None,
        "twitterUsername": None,
        "repositories": {"totalCount": 8},
        "followers": {"totalCount": 1000},
        "following": {"totalCount": 9},
        "createdAt": "2011-01-25T18:44:36Z",
    }
