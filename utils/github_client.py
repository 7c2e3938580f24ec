#!/usr/bin/env python3
"""GitHub REST API client for pull request reads and the description write-back.

GET requests are retried on transient HTTP statuses by the session adapter.
The PATCH that updates the PR body is sent exactly once.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)


class GithubApiError(Exception):
    """Raised when GitHub API operations fail."""

    def __init__(self, message: str, code: str = "UNKNOWN", status: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


class GithubAuthError(GithubApiError):
    """Raised when GitHub API authentication fails."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message, code="UNAUTHORIZED", status=status)


def _code_for_status(status: int) -> str:
    if status == 404:
        return "NOT_FOUND"
    if status == 429:
        return "RATE_LIMIT"
    if status >= 500:
        return "SERVER"
    return "UNKNOWN"


class GithubClient:
    """Thin client over the pull request endpoints used by the action."""

    def __init__(
        self,
        token: Optional[str] = None,
        timeout_s: Optional[int] = None,
        *,
        api_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub token (defaults to Config.GITHUB_TOKEN)
            timeout_s: Request timeout in seconds (defaults to Config.HTTP_TIMEOUT_S)
            api_url: API root, for GitHub Enterprise (defaults to Config.GITHUB_API_URL)
            session: Pre-built session, mainly for tests

        Raises:
            GithubAuthError: If no token is provided
        """
        github_config = Config.get_github_config()
        self.token = token or github_config["token"]
        self.timeout_s = timeout_s or github_config["timeout_s"]
        self.base_url = (api_url or github_config["api_url"]).rstrip("/")
        self.max_pages = int(github_config["max_pages"])

        if not self.token:
            raise GithubAuthError("GitHub token is required (github_token input or GITHUB_TOKEN env var)")

        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'User-Agent': github_config["user_agent"],
        })

        if session is None:
            # Configure retries for transient failures; PATCH is not idempotent-safe here
            retry_strategy = Retry(
                total=3,
                status_forcelist=[429, 500, 502, 503, 504],
                backoff_factor=1,
                allowed_methods=["HEAD", "GET", "OPTIONS"]
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self.session.mount("https://", adapter)

        logger.debug("GitHub client initialized")

    def _check(self, response: requests.Response, what: str) -> None:
        status = response.status_code
        if status in (401, 403):
            raise GithubAuthError(f"Invalid GitHub token or insufficient permissions for {what}", status=status)
        if status == 404:
            raise GithubApiError(f"{what} not found", code="NOT_FOUND", status=status)
        if status >= 400:
            raise GithubApiError(f"GitHub API error for {what}: HTTP {status}", code=_code_for_status(status), status=status)

    def _get_paginated(self, url: str, what: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        per_page = 100

        while True:
            params = {'page': page, 'per_page': per_page}
            response = self.session.get(url, params=params, timeout=self.timeout_s)
            self._check(response, what)

            page_items = response.json()
            if not page_items:
                break

            items.extend(page_items)
            if len(page_items) < per_page:
                break
            page += 1

            # Safety limit to prevent infinite loops
            if page > self.max_pages:
                logger.warning(f"{what} has more than {self.max_pages * per_page} items, truncating")
                break

        return items

    def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        """Fetch pull request metadata.

        Raises:
            GithubApiError: If API request fails
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/{number}"
        what = f"Pull request {owner}/{repo}#{number}"
        try:
            logger.info(f"Fetching PR metadata: {owner}/{repo}#{number}")
            response = self.session.get(url, timeout=self.timeout_s)
            self._check(response, what)
            data = response.json()
            logger.debug(f"✓ Retrieved PR: #{data.get('number')} - {(data.get('title') or '')[:50]}")
            return data
        except requests.Timeout as e:
            raise GithubApiError(f"Timeout fetching {what}: {e}", code="TIMEOUT")
        except requests.RequestException as e:
            raise GithubApiError(f"Failed to fetch {what}: {e}", code="NETWORK")

    def list_pull_request_files(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        """Fetch file changes for a pull request (all pages).

        Note: GitHub omits `patch` for binary and very large files.

        Raises:
            GithubApiError: If API request fails
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/{number}/files"
        what = f"Files of {owner}/{repo}#{number}"
        try:
            logger.info(f"Fetching PR file changes: {owner}/{repo}#{number}")
            files = self._get_paginated(url, what)
            logger.debug(f"✓ Retrieved {len(files)} file changes for PR #{number}")
            return files
        except requests.Timeout as e:
            raise GithubApiError(f"Timeout fetching {what}: {e}", code="TIMEOUT")
        except requests.RequestException as e:
            raise GithubApiError(f"Failed to fetch {what}: {e}", code="NETWORK")

    def list_commits_for_pr(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        """Fetch commits for a pull request (all pages).

        Raises:
            GithubApiError: If API request fails
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/{number}/commits"
        what = f"Commits of {owner}/{repo}#{number}"
        try:
            logger.info(f"Fetching PR commits: {owner}/{repo}#{number}")
            commits = self._get_paginated(url, what)
            logger.debug(f"✓ Retrieved {len(commits)} commits for PR #{number}")
            return commits
        except requests.Timeout as e:
            raise GithubApiError(f"Timeout fetching {what}: {e}", code="TIMEOUT")
        except requests.RequestException as e:
            raise GithubApiError(f"Failed to fetch {what}: {e}", code="NETWORK")

    def update_pull_request_body(self, owner: str, repo: str, number: int, body: str) -> Dict[str, Any]:
        """Replace the pull request description.

        Raises:
            GithubApiError: If API request fails
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/{number}"
        what = f"Pull request {owner}/{repo}#{number}"
        try:
            logger.debug(f"Updating PR #{number} description ({len(body)} characters)")
            response = self.session.patch(url, json={"body": body}, timeout=self.timeout_s)
            self._check(response, what)
            return response.json()
        except requests.Timeout as e:
            raise GithubApiError(f"Timeout updating {what}: {e}", code="TIMEOUT")
        except requests.RequestException as e:
            raise GithubApiError(f"Failed to update {what}: {e}", code="NETWORK")

    def close(self) -> None:
        """Close the GitHub client session."""
        if self.session:
            self.session.close()
            logger.debug("GitHub client session closed")
