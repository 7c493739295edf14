from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

from .appsignal_client import AppSignalClient
from .config import Config, debug_from_env
from .errors import (
    AppSignalIssueError,
    ApiError,
    IncidentNotFound,
    InvalidAppId,
    InvalidIncidentNumber,
    InvalidRepoFormat,
    IssueCreationError,
    MissingCredential,
    NetworkError,
    RepoNotDetected,
    ReportWriteError,
    WrongIncidentType,
)
from .github_client import GitHubClient
from .log import setup_logging
from .pipeline import run_pipeline
from .repo import resolve_repo
from .validation import validate_args

logger = logging.getLogger(__name__)

_EPILOG = """\
environment variables:
  APPSIGNAL_API_KEY  Required. Your AppSignal API key
  GH_TOKEN           Required. GitHub token (GITHUB_TOKEN is used as a fallback)
  GITHUB_REPO        Optional. Where to create the issue (default: auto-detect from git)
  DEBUG              Optional. Enable debug logging

examples:
  appsignal-issue 64cb678083eb67f665b627b0 123 mycompany/api-service
  APPSIGNAL_API_KEY=xxx GH_TOKEN=yyy appsignal-issue 64cb678083eb67f665b627b0 123 mycompany/api-service

TARGET_REPO is recorded in the report only. The GitHub issue is created in the
repository detected from git (or GITHUB_REPO if set), not in the target repo.
"""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_help(sys.stderr)
        self.exit(1, f"\nERROR: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="appsignal-issue",
        description="Create a GitHub issue with a markdown report from an AppSignal performance incident",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("app_id", metavar="APP_ID", help="AppSignal application ID (24-character hex string)")
    parser.add_argument("incident_number", metavar="INCIDENT_NUMBER", help="Incident number (positive integer)")
    parser.add_argument(
        "target_repo",
        metavar="TARGET_REPO",
        help="Repository where the problem occurs (format: owner/repo)",
    )
    parser.add_argument("--output", default=None, help="Also write the markdown report to this path")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the report instead of creating an issue (GH_TOKEN not required)",
    )
    return parser


def remediation_hint(err: AppSignalIssueError) -> Optional[str]:
    if isinstance(err, NetworkError):
        return "Network error. Please check your internet connection."
    if isinstance(err, (ApiError, IssueCreationError)) and err.status_code in (401, 403):
        return "Authentication failed. Please check your API keys."
    if isinstance(err, WrongIncidentType):
        return "This incident is not a PerformanceIncident type.\nThis tool only supports performance incidents."
    if isinstance(err, IncidentNotFound):
        return (
            "The specified incident could not be found.\n"
            "Please verify the App ID and Incident Number are correct."
        )
    if isinstance(err, MissingCredential):
        return "Please set the required environment variables and try again."
    if isinstance(err, RepoNotDetected):
        return "Set GITHUB_REPO=owner/repo or run from a clone with an origin remote."
    if isinstance(err, ReportWriteError):
        return "Check that the --output path is writable and its parent is a directory."
    return None


def _handle_error(err: AppSignalIssueError) -> int:
    print(f"ERROR: {err}", file=sys.stderr)
    logger.debug("failure details", exc_info=err)
    hint = remediation_hint(err)
    if hint:
        print(f"\n{hint}", file=sys.stderr)
    return 1


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if debug_from_env() else "INFO")

    try:
        validated = validate_args(str(args.app_id), str(args.incident_number), str(args.target_repo))
    except (InvalidAppId, InvalidIncidentNumber, InvalidRepoFormat) as e:
        print(f"ERROR: {e}\n", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    output_path = Path(str(args.output)) if args.output else None

    try:
        cfg = Config.from_env(require_github=not args.dry_run)
        appsignal = AppSignalClient(cfg=cfg)

        if args.dry_run:
            result = run_pipeline(args=validated, appsignal=appsignal, output_path=output_path)
            print(f"Title: {result.draft.title}")
            print(f"Labels: {', '.join(result.draft.labels)}")
            print()
            print(result.draft.body, end="")
            return 0

        repo = resolve_repo(cfg.github_repo)
        github = GitHubClient(cfg=cfg)
        result = run_pipeline(
            args=validated,
            appsignal=appsignal,
            github=github,
            repo=repo,
            output_path=output_path,
        )
    except AppSignalIssueError as e:
        return _handle_error(e)

    print("\n✅ Success!")
    print(f"GitHub Issue: {result.issue.url}")
    print(f"Issue Number: #{result.issue.number}")
    print(f"Target Repository: {validated.target_repo}")
    return 0
