#!/usr/bin/env python3
"""Pydantic models for diff data structures."""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from utils.pr_models import CommitInfo

FileStatus = Literal["added", "removed", "modified", "renamed", "copied"]

# GitHub reports a few extra statuses that carry no meaning for a description.
_STATUS_ALIASES = {"changed": "modified", "unchanged": "modified"}


class FileChange(BaseModel):
    filename: str
    status: FileStatus = "modified"
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None
    previous_filename: Optional[str] = None

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        raw = str(value or "modified").lower()
        return _STATUS_ALIASES.get(raw, raw)

    @property
    def patch_size(self) -> int:
        return len(self.patch) if self.patch else 0


class PRDiff(BaseModel):
    files: List[FileChange] = Field(default_factory=list)
    commits: List[CommitInfo] = Field(default_factory=list)
    total_additions: int = 0
    total_deletions: int = 0
    truncated: bool = False
    excluded_files: int = 0

    @classmethod
    def from_files(
        cls,
        files: List[FileChange],
        commits: List[CommitInfo],
        *,
        truncated: bool = False,
        excluded_files: int = 0,
    ) -> "PRDiff":
        return cls(
            files=files,
            commits=commits,
            total_additions=sum(f.additions for f in files),
            total_deletions=sum(f.deletions for f in files),
            truncated=truncated,
            excluded_files=excluded_files,
        )
