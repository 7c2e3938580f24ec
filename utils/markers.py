#!/usr/bin/env python3
"""Marker codec for the generated section of a PR description.

A description may hold one block owned by the generator, bounded by a start
marker and an end marker derived from a single configured base marker:

    <!-- gemini-pr-description -->

    generated text

    <!-- gemini-pr-description-end -->

Everything outside that block belongs to the user and is never discarded.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import NamedTuple

from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "<!-- gemini-pr-description -->"
END_MARKER_SUFFIX = "-end"

# Base markers must be a single-line HTML comment with a non-empty label.
_MARKER_RE = re.compile(r"^<!--\s*(?P<label>[^\s<>](?:[^<>\n]*[^\s<>])?)\s*-->$")


class MarkerPair(NamedTuple):
    start: str
    end: str


class ParsedDescription(NamedTuple):
    before: str
    generated: str
    after: str


class _ScanState(str, Enum):
    SCAN_START = "scan_start"
    SCAN_END = "scan_end"
    SPLIT = "split"
    DEGENERATE = "degenerate"


def markers_for(base_marker: str) -> MarkerPair:
    """Derive the start/end marker pair from the configured base marker.

    Raises:
        ConfigurationError: if the base marker is not an HTML comment.
    """
    marker = (base_marker or "").strip()
    match = _MARKER_RE.match(marker)
    if not match:
        raise ConfigurationError(
            f"Invalid generation_marker: {base_marker!r}. Expected an HTML comment like {DEFAULT_MARKER}"
        )
    cut = match.end("label")
    return MarkerPair(start=marker, end=marker[:cut] + END_MARKER_SUFFIX + marker[cut:])


def parse_description(description: str, base_marker: str) -> ParsedDescription:
    """Split a description into the text before, inside and after the marked block.

    Only the first start marker and the first end marker strictly after it are
    considered. If either is missing the whole document is returned as
    `before`, untouched, with empty `generated` and `after`.
    """
    pair = markers_for(base_marker)
    doc = description or ""

    state = _ScanState.SCAN_START
    start_idx = end_idx = -1
    while state not in (_ScanState.SPLIT, _ScanState.DEGENERATE):
        if state is _ScanState.SCAN_START:
            start_idx = doc.find(pair.start)
            state = _ScanState.SCAN_END if start_idx != -1 else _ScanState.DEGENERATE
        elif state is _ScanState.SCAN_END:
            end_idx = doc.find(pair.end, start_idx + len(pair.start))
            state = _ScanState.SPLIT if end_idx != -1 else _ScanState.DEGENERATE

    if state is _ScanState.DEGENERATE:
        return ParsedDescription(before=doc, generated="", after="")

    return ParsedDescription(
        before=doc[:start_idx].strip(),
        generated=doc[start_idx + len(pair.start):end_idx].strip(),
        after=doc[end_idx + len(pair.end):].strip(),
    )


def has_generated_content(description: str, base_marker: str) -> bool:
    """True when both the start and the end marker occur somewhere in the description.

    Order is not checked; `parse_description` falls back to the degenerate
    split for a reversed pair.
    """
    pair = markers_for(base_marker)
    doc = description or ""
    return pair.start in doc and pair.end in doc


def wrap_with_markers(content: str, base_marker: str) -> str:
    pair = markers_for(base_marker)
    return f"{pair.start}\n\n{content}\n\n{pair.end}"


__all__ = [
    "DEFAULT_MARKER",
    "END_MARKER_SUFFIX",
    "MarkerPair",
    "ParsedDescription",
    "markers_for",
    "parse_description",
    "has_generated_content",
    "wrap_with_markers",
]
