from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InvalidAppId, InvalidIncidentNumber, InvalidRepoFormat

# AppSignal app ids are MongoDB ObjectIds
_APP_ID_RE = re.compile(r"[0-9a-fA-F]{24}")
_REPO_RE = re.compile(r"[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+")


def is_valid_app_id(app_id: str) -> bool:
    return isinstance(app_id, str) and _APP_ID_RE.fullmatch(app_id) is not None


def is_valid_incident_number(number: str) -> bool:
    if not isinstance(number, str) or not number.isascii() or not number.isdigit():
        return False
    n = int(number)
    return n > 0 and str(n) == number


def is_valid_repo_format(repo: str) -> bool:
    return isinstance(repo, str) and _REPO_RE.fullmatch(repo) is not None


@dataclass(frozen=True)
class ValidatedArgs:
    app_id: str
    incident_number: str
    target_repo: str

    @property
    def incident_number_int(self) -> int:
        return int(self.incident_number)


def validate_args(app_id: str, incident_number: str, target_repo: str) -> ValidatedArgs:
    if not is_valid_app_id(app_id):
        raise InvalidAppId(app_id)
    if not is_valid_incident_number(incident_number):
        raise InvalidIncidentNumber(incident_number)
    if not is_valid_repo_format(target_repo):
        raise InvalidRepoFormat(target_repo)
    return ValidatedArgs(app_id=app_id, incident_number=incident_number, target_repo=target_repo)
