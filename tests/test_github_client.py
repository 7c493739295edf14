import json

import pytest
import requests

from appsignal_issue.config import Config
from appsignal_issue.errors import IssueCreationError, NetworkError
from appsignal_issue.github_client import GitHubClient
from appsignal_issue.models import RepoRef


class _Resp:
    def __init__(self, status_code: int, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def _client():
    return GitHubClient(cfg=Config(appsignal_api_key="k", github_token="ghp_x", timeout_seconds=0.1))


def test_create_issue_posts_title_body_labels(monkeypatch):
    c = _client()
    calls = []

    def fake_request(**kwargs):
        calls.append(kwargs)
        return _Resp(201, {"html_url": "https://github.com/acme/ops/issues/7", "number": 7})

    monkeypatch.setattr(c.session, "request", fake_request)
    created = c.create_issue(RepoRef("acme", "ops"), title="t", body="b", labels=["performance", "appsignal"])

    assert created.url == "https://github.com/acme/ops/issues/7"
    assert created.number == 7
    call = calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.github.com/repos/acme/ops/issues"
    assert call["headers"]["Authorization"] == "Bearer ghp_x"
    assert json.loads(call["data"]) == {"title": "t", "body": "b", "labels": ["performance", "appsignal"]}


def test_non_2xx_wraps_platform_message(monkeypatch):
    c = _client()
    monkeypatch.setattr(
        c.session,
        "request",
        lambda **kw: _Resp(422, {"message": "Validation Failed", "errors": [{"field": "labels"}]}),
    )
    with pytest.raises(IssueCreationError) as ei:
        c.create_issue(RepoRef("acme", "ops"), title="t", body="b", labels=[])
    assert ei.value.status_code == 422
    assert "Validation Failed" in str(ei.value)
    assert "422" in str(ei.value)


def test_transport_failure_is_network_error(monkeypatch):
    c = _client()

    def boom(**kw):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(c.session, "request", boom)
    with pytest.raises(NetworkError):
        c.create_issue(RepoRef("acme", "ops"), title="t", body="b", labels=[])


def test_response_without_url_is_creation_error(monkeypatch):
    c = _client()
    monkeypatch.setattr(c.session, "request", lambda **kw: _Resp(201, {"id": 1}))
    with pytest.raises(IssueCreationError):
        c.create_issue(RepoRef("acme", "ops"), title="t", body="b", labels=[])
