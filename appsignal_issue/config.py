from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import MissingCredential

DEFAULT_APPSIGNAL_ENDPOINT = "https://appsignal.com/graphql"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


def _truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def debug_from_env() -> bool:
    return _truthy(os.environ.get("DEBUG"))


@dataclass(frozen=True)
class Config:
    appsignal_api_key: str
    github_token: str = ""
    github_repo: Optional[str] = None
    debug: bool = False
    appsignal_endpoint: str = DEFAULT_APPSIGNAL_ENDPOINT
    github_api_url: str = DEFAULT_GITHUB_API_URL
    timeout_seconds: float = 20.0

    @staticmethod
    def from_env(*, require_github: bool = True) -> "Config":
        api_key = os.environ.get("APPSIGNAL_API_KEY", "").strip()
        token = (os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN") or "").strip()
        missing = []
        if not api_key:
            missing.append("APPSIGNAL_API_KEY")
        if require_github and not token:
            missing.append("GH_TOKEN")
        if missing:
            raise MissingCredential(missing)
        repo = os.environ.get("GITHUB_REPO", "").strip() or None
        endpoint = os.environ.get("APPSIGNAL_ENDPOINT", "").strip() or DEFAULT_APPSIGNAL_ENDPOINT
        api_url = os.environ.get("GITHUB_API_URL", "").strip() or DEFAULT_GITHUB_API_URL
        return Config(
            appsignal_api_key=api_key,
            github_token=token,
            github_repo=repo,
            debug=debug_from_env(),
            appsignal_endpoint=endpoint,
            github_api_url=api_url.rstrip("/"),
        )
