#!/usr/bin/env python3
"""PR data fetcher: turns GitHub payloads into the models the agent works on.

Reads the PR either from the workflow event payload or from the REST API,
then collects changed files and commits, applies exclude globs and the patch
budget, and returns a PRDiff.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from configs.config import Config
from .diff_models import FileChange, PRDiff
from .diff_reducer import filter_excluded, reduce_patches, total_patch_size
from .errors import FetchError
from .github_client import GithubApiError, GithubClient
from .pr_models import CommitInfo, PRContext, safe_extract

# Set up logging
logger = logging.getLogger(__name__)


class PRFetchError(FetchError):
    """Raised when PR fetching operations fail with a typed code for friendly handling."""


_FRIENDLY_MESSAGES = {
    "TIMEOUT": "Timeout while fetching data. Please retry or increase HTTP_TIMEOUT_S.",
    "NOT_FOUND": "PR not found. Please check repository name and PR number.",
    "UNAUTHORIZED": "Access denied. Please check your GitHub token and its scopes.",
    "RATE_LIMIT": "Rate limit exceeded. Please wait a few minutes and retry.",
    "NETWORK": "Network error while contacting GitHub. Please retry.",
}


def friendly_message_from_code(code: str, *, fallback: str) -> str:
    return _FRIENDLY_MESSAGES.get(code, fallback)


def context_from_event(event_path: Optional[str] = None, repository: Optional[str] = None) -> PRContext:
    """Build the PR context from the workflow event payload.

    Args:
        event_path: Path to the event JSON (defaults to GITHUB_EVENT_PATH)
        repository: "owner/repo" (defaults to GITHUB_REPOSITORY, then the payload)

    Raises:
        PRFetchError: If the payload is missing or not a pull request event
    """
    path = event_path or Config.GITHUB_EVENT_PATH
    if not path:
        raise PRFetchError("GITHUB_EVENT_PATH is not set; pass --owner/--repo/--pr to run outside Actions", code="NO_EVENT")
    try:
        event = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise PRFetchError(f"Unable to read event payload {path}: {e}", code="NO_EVENT") from e

    pr_data = event.get("pull_request")
    if not pr_data:
        raise PRFetchError(
            "This action must be run on a pull_request or pull_request_target event",
            code="NO_EVENT",
        )

    full_name = repository or Config.GITHUB_REPOSITORY or safe_extract(event, "repository", "full_name", default="")
    if "/" not in (full_name or ""):
        raise PRFetchError("Unable to determine repository (GITHUB_REPOSITORY)", code="NO_EVENT")
    owner, repo = full_name.split("/", 1)
    return PRContext.from_api(owner, repo, pr_data)


def normalize_file(file_data: Dict[str, Any]) -> FileChange:
    return FileChange(
        filename=file_data.get("filename", ""),
        status=file_data.get("status", "modified"),
        additions=int(file_data.get("additions", 0) or 0),
        deletions=int(file_data.get("deletions", 0) or 0),
        patch=file_data.get("patch") or None,
        previous_filename=file_data.get("previous_filename"),
    )


def normalize_commit(commit_data: Dict[str, Any]) -> CommitInfo:
    """Normalize raw commit data into CommitInfo.

    Author preference: git author name, then GitHub login, then "unknown".
    """
    author = (
        safe_extract(commit_data, "commit", "author", "name")
        or safe_extract(commit_data, "author", "login")
        or "unknown"
    )
    return CommitInfo(
        sha=commit_data.get("sha", ""),
        message=safe_extract(commit_data, "commit", "message", default="") or "",
        author=author,
    )


class PRFetcher:
    """Fetches and normalizes pull request data over the GitHub REST API."""

    def __init__(self, client: GithubClient):
        self.client = client

    def _wrap(self, e: GithubApiError, fallback: str) -> PRFetchError:
        code = getattr(e, "code", "UNKNOWN")
        return PRFetchError(friendly_message_from_code(code, fallback=f"{fallback}: {e}"), code=code, cause=e)

    def get_pr_context(self, owner: str, repo: str, pr_number: int) -> PRContext:
        """Fetch the PR context from the API.

        Raises:
            PRFetchError: If fetching fails or PR not found
        """
        try:
            pr_data = self.client.get_pull_request(owner, repo, pr_number)
        except GithubApiError as e:
            raise self._wrap(e, f"Failed to fetch PR {owner}/{repo}#{pr_number}") from e
        return PRContext.from_api(owner, repo, pr_data)

    def list_files(self, pr: PRContext) -> List[FileChange]:
        try:
            files_data = self.client.list_pull_request_files(pr.owner, pr.repo, pr.pull_number)
        except GithubApiError as e:
            raise self._wrap(e, f"Failed to fetch file changes for {pr.full_name}#{pr.pull_number}") from e
        return [normalize_file(f) for f in files_data if f.get("filename")]

    def list_commits(self, pr: PRContext) -> List[CommitInfo]:
        try:
            commits_data = self.client.list_commits_for_pr(pr.owner, pr.repo, pr.pull_number)
        except GithubApiError as e:
            raise self._wrap(e, f"Failed to fetch commits for {pr.full_name}#{pr.pull_number}") from e
        return [normalize_commit(c) for c in commits_data]

    def fetch_diff(self, pr: PRContext, max_diff_size: int, exclude_patterns: Sequence[str] = ()) -> PRDiff:
        """Collect files and commits, drop excluded files and fit patches to the budget.

        Raises:
            PRFetchError: If any request fails
        """
        logger.debug(f"Fetching diff for PR #{pr.pull_number} in {pr.full_name}")
        files, excluded = filter_excluded(self.list_files(pr), list(exclude_patterns))

        size = total_patch_size(files)
        truncated = False
        if size > max_diff_size:
            logger.info(f"Diff size ({size}) exceeds max ({max_diff_size}), truncating patches")
            files = reduce_patches(files, max_diff_size)
            truncated = True

        commits = self.list_commits(pr)
        diff = PRDiff.from_files(files, commits, truncated=truncated, excluded_files=excluded)
        logger.debug(f"Found {len(diff.files)} changed files, {len(diff.commits)} commits")
        logger.debug(f"Total changes: +{diff.total_additions} -{diff.total_deletions}")
        return diff

    def close(self) -> None:
        self.client.close()
