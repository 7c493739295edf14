from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .appsignal_client import AppSignalClient
from .errors import ReportWriteError
from .github_client import GitHubClient
from .issue import issue_labels, issue_title
from .models import CreatedIssue, PerformanceIncident, RepoRef
from .render.report_md import render_report_md
from .validation import ValidatedArgs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueDraft:
    incident: PerformanceIncident
    title: str
    body: str
    labels: List[str]


@dataclass(frozen=True)
class PipelineResult:
    draft: IssueDraft
    repo: Optional[RepoRef] = None
    issue: Optional[CreatedIssue] = None


def build_draft(incident: PerformanceIncident, args: ValidatedArgs) -> IssueDraft:
    return IssueDraft(
        incident=incident,
        title=issue_title(incident),
        body=render_report_md(incident, args.app_id, args.incident_number, args.target_repo),
        labels=issue_labels(incident),
    )


def write_report(body: str, output_path: Path) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(body, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(f"Failed to write report to {output_path}: {e}") from e
    logger.info("Report written to %s", output_path)


def run_pipeline(
    *,
    args: ValidatedArgs,
    appsignal: AppSignalClient,
    github: Optional[GitHubClient] = None,
    repo: Optional[RepoRef] = None,
    output_path: Optional[Path] = None,
) -> PipelineResult:
    """Fetch the incident, compose the report and file it.

    `repo` is where the issue is created; it is independent of
    `args.target_repo`, which only lands in the report frontmatter. With no
    `github` client the draft is returned without publishing.
    """
    logger.info("Fetching incident data from AppSignal...")
    incident = appsignal.fetch_incident(args.app_id, args.incident_number_int)

    logger.info("Generating markdown report...")
    draft = build_draft(incident, args)
    if output_path is not None:
        write_report(draft.body, output_path)

    if github is None or repo is None:
        return PipelineResult(draft=draft, repo=repo)

    logger.info("Creating GitHub issue in %s...", repo.full_name)
    created = github.create_issue(repo, title=draft.title, body=draft.body, labels=draft.labels)
    return PipelineResult(draft=draft, repo=repo, issue=created)
