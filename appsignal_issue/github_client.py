from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import IssueCreationError, NetworkError
from .models import CreatedIssue, RepoRef

logger = logging.getLogger(__name__)


def _platform_message(resp: Any) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text
    if isinstance(payload, dict) and payload.get("message"):
        msg = str(payload["message"])
        errors = payload.get("errors")
        if errors:
            msg += f" ({json.dumps(errors)})"
        return msg
    return resp.text


@dataclass
class GitHubClient:
    cfg: Config
    session: requests.Session = field(default_factory=requests.Session)

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.cfg.github_token}",
            "User-Agent": "appsignal-issue",
            "X-GitHub-Api-Version": "2022-11-28",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, *, json_body: Optional[dict] = None) -> Any:
        url = f"{self.cfg.github_api_url}{path}"
        logger.debug("GitHub request: %s %s", method, path)
        try:
            resp = self.session.request(
                method=method,
                url=url,
                data=None if json_body is None else json.dumps(json_body),
                headers=self._headers(),
                timeout=self.cfg.timeout_seconds,
            )
        except requests.RequestException as e:
            raise NetworkError(f"GitHub request failed: {e}") from e

        logger.debug("GitHub response status=%s body=%s", resp.status_code, resp.text)
        if resp.status_code < 200 or resp.status_code >= 300:
            raise IssueCreationError(
                f"GitHub API {resp.status_code}: {_platform_message(resp)}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise IssueCreationError(f"Failed to parse GitHub response: {e}", status_code=resp.status_code) from e

    def create_issue(self, repo: RepoRef, *, title: str, body: str, labels: List[str]) -> CreatedIssue:
        resp = self._request(
            "POST",
            f"/repos/{repo.owner}/{repo.repo}/issues",
            json_body={"title": title, "body": body, "labels": list(labels or [])},
        )
        if not isinstance(resp, dict) or resp.get("html_url") is None or resp.get("number") is None:
            raise IssueCreationError("GitHub response is missing html_url/number")
        return CreatedIssue(url=str(resp["html_url"]), number=int(resp["number"]))
