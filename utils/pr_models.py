#!/usr/bin/env python3
"""Pydantic models for pull request data structures.

This module defines the data models used for representing the pull request
being described, its commits, and the result reported back to the workflow.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class CommitInfo(BaseModel):
    """Information about a commit in a pull request."""

    sha: str = Field(..., description="Commit SHA")
    message: str = Field("", description="Full commit message")
    author: str = Field("unknown", description="Commit author name or GitHub login")

    model_config = {"extra": "ignore", "frozen": True}

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def first_line(self) -> str:
        return extract_first_line(self.message)


class PRContext(BaseModel):
    """The pull request being described, as seen at the start of the run."""

    owner: str = Field(..., description="Repository owner")
    repo: str = Field(..., description="Repository name")
    pull_number: int = Field(..., description="Pull request number")
    title: str = Field("", description="Pull request title")
    current_description: str = Field("", description="Pull request body at fetch time")
    base_branch: str = Field("main", description="Base branch name")
    head_branch: str = Field("", description="Head branch name")
    is_draft: bool = Field(False, description="Whether the PR is a draft")

    model_config = {"extra": "ignore", "frozen": True}

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_api(cls, owner: str, repo: str, pr_data: Dict[str, Any]) -> "PRContext":
        """Build a context from a GitHub pull request payload.

        The same shape is served by `GET /pulls/{n}` and by the
        `pull_request` key of a workflow event payload.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_data: Raw pull request dictionary

        Returns:
            Normalized PRContext
        """
        return cls(
            owner=owner,
            repo=repo,
            pull_number=int(pr_data["number"]),
            title=pr_data.get("title") or "",
            current_description=pr_data.get("body") or "",
            base_branch=safe_extract(pr_data, "base", "ref", default=None) or "main",
            head_branch=safe_extract(pr_data, "head", "ref", default=None) or "",
            is_draft=bool(pr_data.get("draft", False)),
        )


class GenerationResult(BaseModel):
    """What the action reports once a run finishes."""

    description: str = Field(..., description="Final PR description")
    generated: bool = Field(..., description="Whether new content was generated")
    model: str = Field(..., description="Generator model identifier")
    reason: Optional[str] = Field(None, description="Why generation did or did not run")

    model_config = {"frozen": True}


def extract_first_line(message: str) -> str:
    """Extract the first line of a commit message.

    Args:
        message: Full commit message

    Returns:
        First line of the message, stripped of whitespace
    """
    if not message:
        return ""

    lines = message.splitlines()
    return lines[0].strip() if lines else ""


def safe_extract(data: Dict, *keys, default=None):
    """Safely extract nested dictionary values.

    Args:
        data: Dictionary to extract from
        *keys: Sequence of keys to traverse
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default

    Example:
        safe_extract(pr_data, "base", "ref", default="main")
        # Equivalent to pr_data.get("base", {}).get("ref", "main")
    """
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
