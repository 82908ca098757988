"""Mock GitHub REST API response payloads.

Trimmed to the fields the client schemas read; githubkit's parsed models
dump to dicts of this shape.
"""

from tests.conftest import SPRINT_1_DUE_ISO, SPRINT_2_DUE_ISO

GITHUB_USER_RESPONSE = {
    "login": "octocat",
    "id": 583231,
    "type": "User",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
    "html_url": "https://github.com/octocat",
}

GITHUB_REPO_RESPONSE = {
    "id": 1296269,
    "name": "hello-world",
    "full_name": "octo-org/hello-world",
    "private": False,
    "description": "This your first repo!",
    "html_url": "https://github.com/octo-org/hello-world",
    "clone_url": "https://github.com/octo-org/hello-world.git",
    "language": "Python",
    "stargazers_count": 80,
    "forks_count": 9,
    "open_issues_count": 2,
    "created_at": "2011-01-26T19:01:12Z",
    "updated_at": "2024-01-10T09:00:00Z",
}

GITHUB_PERMISSION_RESPONSE = {
    "permission": "write",
    "role_name": "write",
    "user": GITHUB_USER_RESPONSE,
}

GITHUB_MILESTONES_RESPONSE = [
    {
        "id": 1002604,
        "number": 1,
        "title": "Sprint 1",
        "state": "open",
        "description": "First sprint",
        "due_on": SPRINT_1_DUE_ISO,
    },
    {
        "id": 1002605,
        "number": 2,
        "title": "Sprint 2",
        "state": "closed",
        "description": None,
        "due_on": SPRINT_2_DUE_ISO,
    },
]

GITHUB_LABEL_RESPONSE = {
    "id": 208045946,
    "name": "bug",
    "color": "d73a4a",
    "description": "Something isn't working",
}

GITHUB_ISSUE_RESPONSE = {
    "id": 1,
    "number": 1347,
    "title": "Found a bug",
    "body": "I'm having a problem with this.",
    "state": "open",
    "html_url": "https://github.com/octo-org/hello-world/issues/1347",
    "user": GITHUB_USER_RESPONSE,
    "labels": [GITHUB_LABEL_RESPONSE],
    "assignees": [GITHUB_USER_RESPONSE],
    "milestone": GITHUB_MILESTONES_RESPONSE[0],
    "created_at": "2024-01-15T10:00:00Z",
    "updated_at": "2024-01-16T14:00:00Z",
}

GITHUB_PULL_REQUEST_AS_ISSUE = {
    **GITHUB_ISSUE_RESPONSE,
    "id": 2,
    "number": 1348,
    "title": "Fix the bug",
    "pull_request": {"url": "https://api.github.com/repos/octo-org/hello-world/pulls/1348"},
}

GITHUB_PULL_REQUEST_RESPONSE = {
    "id": 1296001,
    "number": 1348,
    "title": "Fix the bug",
    "body": "Closes #1347",
    "state": "open",
    "html_url": "https://github.com/octo-org/hello-world/pull/1348",
    "user": GITHUB_USER_RESPONSE,
    "head": {"ref": "fix-login", "sha": "6dcb09b5b57875f334f61aebed695e2e4193db5e", "label": "octocat:fix-login"},
    "base": {"ref": "main", "sha": "9a2f3c1e7d6b5a4f3e2d1c0b9a8f7e6d5c4b3a21", "label": "octo-org:main"},
    "draft": False,
    "mergeable": None,
    "merged": False,
    "created_at": "2024-01-16T09:00:00Z",
    "updated_at": "2024-01-16T09:30:00Z",
}
