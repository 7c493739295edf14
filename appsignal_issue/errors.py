from __future__ import annotations

from typing import List, Optional


class AppSignalIssueError(RuntimeError):
    category = "general"


# input


class InvalidAppId(AppSignalIssueError):
    category = "input"

    def __init__(self, app_id: str):
        super().__init__(f"Invalid APP_ID format (expected 24-character hex string): {app_id!r}")
        self.app_id = app_id


class InvalidIncidentNumber(AppSignalIssueError):
    category = "input"

    def __init__(self, number: str):
        super().__init__(f"Invalid INCIDENT_NUMBER format (expected positive integer): {number!r}")
        self.number = number


class InvalidRepoFormat(AppSignalIssueError):
    category = "input"

    def __init__(self, repo: str, source: str = "TARGET_REPO"):
        super().__init__(f"Invalid {source} format (expected owner/repo): {repo!r}")
        self.repo = repo
        self.source = source


class MissingCredential(AppSignalIssueError):
    category = "input"

    def __init__(self, names: List[str]):
        super().__init__("; ".join(f"{n} environment variable is required" for n in names))
        self.names = list(names)


# fetch boundary


class NetworkError(AppSignalIssueError):
    category = "network"


class ApiError(AppSignalIssueError):
    category = "api"

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class MalformedResponse(AppSignalIssueError):
    category = "api"


class QueryError(AppSignalIssueError):
    category = "api"

    def __init__(self, messages: List[str]):
        super().__init__("GraphQL errors: " + "; ".join(messages))
        self.messages = list(messages)


class IncidentNotFound(AppSignalIssueError):
    category = "not_found"


class WrongIncidentType(AppSignalIssueError):
    category = "wrong_kind"

    def __init__(self, kind: Optional[str]):
        super().__init__(f"Not a performance issue (incident type: {kind or 'unknown'})")
        self.kind = kind


# publish boundary


class RepoNotDetected(AppSignalIssueError):
    category = "publish"


class IssueCreationError(AppSignalIssueError):
    category = "publish"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to create GitHub issue: {message}")
        self.status_code = status_code


# local output


class ReportWriteError(AppSignalIssueError):
    category = "output"
