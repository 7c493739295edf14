from __future__ import annotations

import logging
import re
import subprocess
from typing import Callable, Optional

from .errors import InvalidRepoFormat, RepoNotDetected
from .models import RepoRef

logger = logging.getLogger(__name__)

_OVERRIDE_RE = re.compile(r"([^/]+)/([^/]+)")
# git@github.com:owner/repo.git
_SSH_RE = re.compile(r"^[\w.-]+@[^:/]+:([^/]+)/(.+?)(?:\.git)?/?$")
# https://github.com/owner/repo.git, ssh://git@github.com/owner/repo.git
_URL_RE = re.compile(r"^[a-z][a-z0-9+.-]*://(?:[^@/]+@)?[^/]+/([^/]+)/(.+?)(?:\.git)?/?$")


def parse_remote_url(url: str) -> Optional[RepoRef]:
    url = (url or "").strip()
    if not url:
        return None
    m = _SSH_RE.match(url) or _URL_RE.match(url)
    if not m:
        return None
    owner, repo = m.group(1), m.group(2)
    if "/" in repo:
        return None
    return RepoRef(owner=owner, repo=repo)


def git_remote_url(remote: str = "origin") -> Optional[str]:
    try:
        out = subprocess.run(
            ["git", "config", "--get", f"remote.{remote}.url"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("git remote lookup failed: %s", e)
        return None
    return out.stdout.strip() or None


def resolve_repo(
    override: Optional[str],
    *,
    remote_url: Callable[[], Optional[str]] = git_remote_url,
) -> RepoRef:
    """Where the issue gets filed: GITHUB_REPO if set, else the local origin remote."""
    if override:
        m = _OVERRIDE_RE.fullmatch(override.strip())
        if not m:
            raise InvalidRepoFormat(override, source="GITHUB_REPO")
        return RepoRef(owner=m.group(1), repo=m.group(2))

    url = remote_url()
    ref = parse_remote_url(url) if url else None
    if ref is None:
        raise RepoNotDetected("Could not detect GitHub repository. Please set GITHUB_REPO environment variable.")
    logger.debug("detected repository %s from git remote %s", ref.full_name, url)
    return ref
