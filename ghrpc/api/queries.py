"""GraphQL documents sent to the GitHub API."""

VIEWER_LOGIN = """
query {
    viewer {
        login
    }
}
"""

_VIEWER_FIELDS = """
        login
        name
        {email}
        avatarUrl
        bio
        company
        location
        websiteUrl
        twitterUsername
        repositories {{
            totalCount
        }}
        followers {{
            totalCount
        }}
        following {{
            totalCount
        }}
        createdAt
"""

# email requires user:email or read:user scope
VIEWER_WITH_EMAIL = "query {\n    viewer {" + _VIEWER_FIELDS.format(email="email") + "    }\n}\n"
VIEWER_WITHOUT_EMAIL = "query {\n    viewer {" + _VIEWER_FIELDS.format(email="") + "    }\n}\n"

VIEWER_REPOSITORIES = """
query($first: Int!) {
    viewer {
        repositories(first: $first, orderBy: {field: UPDATED_AT, direction: DESC}) {
            nodes {
                name
                nameWithOwner
                description
                url
                isPrivate
                isFork
                stargazerCount
                forkCount
                primaryLanguage {
                    name
                }
                updatedAt
                pushedAt
            }
        }
    }
}
"""

REPOSITORY_ISSUES = """
query($owner: String!, $name: String!, $first: Int!, $states: [IssueState!]) {
    repository(owner: $owner, name: $name) {
        issues(first: $first, states: $states, orderBy: {field: UPDATED_AT, direction: DESC}) {
            nodes {
                number
                title
                state
                url
                createdAt
                updatedAt
                author {
                    login
                }
                labels(first: 10) {
                    nodes {
                        name
                    }
                }
                comments {
                    totalCount
                }
            }
        }
    }
}
"""

_PR_FIELDS = """
                number
                title
                state
                url
                isDraft
                mergeable
                createdAt
                updatedAt
                author {
                    login
                }
                headRefName
                baseRefName
                additions
                deletions
                changedFiles
                commits {
                    totalCount
                }
                comments {
                    totalCount
                }
"""

REPOSITORY_PULL_REQUESTS = (
    """
query($owner: String!, $name: String!, $first: Int!, $states: [PullRequestState!]) {
    repository(owner: $owner, name: $name) {
        pullRequests(first: $first, states: $states, orderBy: {field: UPDATED_AT, direction: DESC}) {
            nodes {"""
    + _PR_FIELDS
    + """
                reviews(first: 5) {
                    nodes {
                        author {
                            login
                        }
                        state
                        submittedAt
                    }
                }
            }
        }
    }
}
"""
)

PULL_REQUEST = (
    """
query($owner: String!, $name: String!, $number: Int!) {
    repository(owner: $owner, name: $name) {
        pullRequest(number: $number) {"""
    + _PR_FIELDS
    + """
                reviews(first: 10) {
                    nodes {
                        author {
                            login
                        }
                        state
                        submittedAt
                    }
                }
                headCommit: commits(last: 1) {
                    nodes {
                        commit {
                            statusCheckRollup {
                                state
                                contexts(first: 20) {
                                    nodes {
                                        __typename
                                        ... on CheckRun {
                                            name
                                            status
                                            conclusion
                                        }
                                        ... on StatusContext {
                                            context
                                            state
                                        }
                                    }
                                }
                            }
                        }
                    }
                }
        }
    }
}
"""
)

REPOSITORY_ID = """
query($owner: String!, $name: String!) {
    repository(owner: $owner, name: $name) {
        id
    }
}
"""

CREATE_ISSUE = """
mutation($repositoryId: ID!, $title: String!, $body: String) {
    createIssue(input: {repositoryId: $repositoryId, title: $title, body: $body}) {
        issue {
            number
            title
            state
            url
            createdAt
            updatedAt
            author {
                login
            }
            labels(first: 10) {
                nodes {
                    name
                }
            }
            comments {
                totalCount
            }
        }
    }
}
"""
