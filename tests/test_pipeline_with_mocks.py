import json
from pathlib import Path

import pytest

from appsignal_issue.appsignal_client import extract_incident
from appsignal_issue.errors import IssueCreationError, WrongIncidentType
from appsignal_issue.models import CreatedIssue, RepoRef
from appsignal_issue.pipeline import run_pipeline
from appsignal_issue.validation import validate_args

FIXTURES = Path(__file__).parent / "fixtures"
ARGS = validate_args("64cb678083eb67f665b627b0", "42", "acme/api-service")


class FakeAppSignal:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def fetch_incident(self, app_id: str, incident_number: int):
        self.calls.append((app_id, incident_number))
        return extract_incident(self.payload)


class FakeGitHub:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.created = []

    def create_issue(self, repo, *, title, body, labels):
        if self.fail:
            raise IssueCreationError("GitHub API 500: boom", status_code=500)
        self.created.append({"repo": repo, "title": title, "body": body, "labels": labels})
        return CreatedIssue(url=f"https://github.com/{repo.full_name}/issues/9", number=9)


def _payload():
    return json.loads((FIXTURES / "incident_performance.json").read_text(encoding="utf-8"))


def test_pipeline_files_issue_in_resolved_repo_not_target_repo():
    appsignal = FakeAppSignal(_payload())
    github = FakeGitHub()
    result = run_pipeline(args=ARGS, appsignal=appsignal, github=github, repo=RepoRef("acme", "ops"))

    assert appsignal.calls == [("64cb678083eb67f665b627b0", 42)]
    assert result.issue == CreatedIssue(url="https://github.com/acme/ops/issues/9", number=9)
    created = github.created[0]
    assert created["repo"] == RepoRef("acme", "ops")
    assert created["title"] == "[Performance] UsersController#show - Slow response time (1.25 s)"
    assert set(created["labels"]) == {"performance", "appsignal", "critical", "n+1-query"}
    assert created["body"].startswith("---\nrepository: acme/api-service\n---\n")


def test_wrong_kind_never_reaches_composer(monkeypatch):
    import appsignal_issue.pipeline as p

    def boom(*args, **kwargs):
        raise AssertionError("composer should not run")

    monkeypatch.setattr(p, "render_report_md", boom)
    payload = {"data": {"app": {"incident": {"__typename": "ExceptionIncident", "id": "e1"}}}}
    github = FakeGitHub()
    with pytest.raises(WrongIncidentType):
        run_pipeline(args=ARGS, appsignal=FakeAppSignal(payload), github=github, repo=RepoRef("acme", "ops"))
    assert github.created == []


def test_issue_creation_failure_propagates():
    with pytest.raises(IssueCreationError):
        run_pipeline(args=ARGS, appsignal=FakeAppSignal(_payload()), github=FakeGitHub(fail=True), repo=RepoRef("a", "b"))


def test_draft_only_writes_output(tmp_path: Path):
    out = tmp_path / "nested" / "report.md"
    result = run_pipeline(args=ARGS, appsignal=FakeAppSignal(_payload()), output_path=out)
    assert result.issue is None
    assert out.read_text(encoding="utf-8") == result.draft.body


def test_output_write_failure_is_classified(tmp_path: Path):
    from appsignal_issue.errors import ReportWriteError

    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    github = FakeGitHub()
    with pytest.raises(ReportWriteError):
        run_pipeline(
            args=ARGS,
            appsignal=FakeAppSignal(_payload()),
            github=github,
            repo=RepoRef("acme", "ops"),
            output_path=blocker / "sub" / "report.md",
        )
    assert github.created == []
