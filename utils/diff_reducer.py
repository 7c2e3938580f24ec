#!/usr/bin/env python3
"""Exclude filtering and patch budgeting for the prompt's code-change section.

The reducer decides which patches are kept whole, which are cut, and which are
dropped so the total patch text fits a character budget. It never drops a
file from the list and never changes the presented order (by filename).
"""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from typing import Iterable, List, Sequence, Tuple

from utils.diff_models import FileChange

logger = logging.getLogger(__name__)

TRUNCATION_SENTINEL = "\n... (truncated)"


def _match_segments(parts: Sequence[str], pats: Sequence[str]) -> bool:
    if not pats:
        return not parts
    head = pats[0]
    if head == "**":
        # Zero or more whole directories
        return any(_match_segments(parts[i:], pats[1:]) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], pats[1:])


def _matches(path: str, pattern: str) -> bool:
    """Segment-wise glob: `*` and `?` stay within one path segment, `**` spans directories.

    A pattern without `/` therefore only matches files at the repository root;
    use `**/name` to match at any depth.
    """
    return _match_segments(path.strip("/").split("/"), pattern.strip("/").split("/"))


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        pattern = pattern.strip()
        if pattern and _matches(path, pattern):
            return True
    return False


def filter_excluded(files: Sequence[FileChange], patterns: Sequence[str]) -> Tuple[List[FileChange], int]:
    """Drop files matching any exclude glob.

    Returns the kept files and the number excluded.
    """
    if not patterns:
        return list(files), 0
    kept = [f for f in files if not is_excluded(f.filename, patterns)]
    excluded = len(files) - len(kept)
    if excluded:
        logger.info(f"Excluded {excluded} file(s) matching {list(patterns)}")
    return kept, excluded


def total_patch_size(files: Iterable[FileChange]) -> int:
    return sum(f.patch_size for f in files)


def reduce_patches(files: Sequence[FileChange], max_size: int) -> List[FileChange]:
    """Fit patch text into `max_size` characters, cutting the largest patches first.

    Files are visited by descending patch size (ties by filename). Each patch
    is kept whole if it fits the remaining budget, cut to the remaining budget
    with `TRUNCATION_SENTINEL` appended (sentinel included in the budget), or
    dropped when nothing useful is left. The result is ordered by filename.

    If the input already fits, it is returned unchanged.
    """
    if total_patch_size(files) <= max_size:
        return list(files)

    remaining = max(0, int(max_size))
    ordered = sorted(files, key=lambda f: (-f.patch_size, f.filename))
    result: List[FileChange] = []

    for f in ordered:
        size = f.patch_size
        if size <= remaining:
            result.append(f)
            remaining -= size
        elif remaining > len(TRUNCATION_SENTINEL):
            keep = remaining - len(TRUNCATION_SENTINEL)
            result.append(f.model_copy(update={"patch": f.patch[:keep] + TRUNCATION_SENTINEL}))
            logger.debug(f"Truncated patch for {f.filename}: {size} -> {keep} chars")
            remaining = 0
        else:
            result.append(f.model_copy(update={"patch": None}))

    result.sort(key=lambda f: f.filename)
    logger.info(f"Reduced patches to {total_patch_size(result)} chars (budget {max_size})")
    return result


__all__ = [
    "TRUNCATION_SENTINEL",
    "is_excluded",
    "filter_excluded",
    "total_patch_size",
    "reduce_patches",
]
