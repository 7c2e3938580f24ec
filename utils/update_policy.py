#!/usr/bin/env python3
"""Update-mode policy: whether to generate, and how to splice the result.

Both functions are pure; fetching and persisting happen in the agent.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from utils.errors import ConfigurationError
from utils.markers import has_generated_content, parse_description, wrap_with_markers

APPEND_SEPARATOR = "---"


class UpdateMode(str, Enum):
    EMPTY = "empty"
    APPEND = "append"
    REPLACE = "replace"
    SMART = "smart"

    @classmethod
    def parse(cls, value: str) -> "UpdateMode":
        """Parse a user-supplied mode (case-insensitive).

        Raises:
            ConfigurationError: if the value is not one of the four modes.
        """
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for mode in cls:
            if mode.value == raw:
                return mode
        allowed = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"Invalid update_mode: {value}. Must be one of: {allowed}")


class GenerationDecision(NamedTuple):
    generate: bool
    reason: str


def should_generate(current_description: str, mode: UpdateMode) -> GenerationDecision:
    mode = UpdateMode.parse(mode)
    if mode is UpdateMode.EMPTY:
        if not (current_description or "").strip():
            return GenerationDecision(True, "Description is empty")
        return GenerationDecision(False, "Description is not empty (mode: empty)")
    if mode is UpdateMode.APPEND:
        return GenerationDecision(True, "Appending to existing description")
    if mode is UpdateMode.REPLACE:
        return GenerationDecision(True, "Replacing entire description")
    return GenerationDecision(True, "Using smart mode with markers")


def apply_update_mode(
    existing_description: str,
    generated_text: str,
    mode: UpdateMode,
    base_marker: str,
) -> str:
    """Combine the existing description with freshly generated text.

    `empty` does not re-check that the description is empty; the caller has
    already decided via `should_generate`.
    """
    mode = UpdateMode.parse(mode)
    wrapped = wrap_with_markers(generated_text, base_marker)
    existing = (existing_description or "").strip()

    if mode in (UpdateMode.EMPTY, UpdateMode.REPLACE):
        return wrapped

    if mode is UpdateMode.APPEND:
        if existing:
            return f"{existing}\n\n{APPEND_SEPARATOR}\n\n{wrapped}"
        return wrapped

    # smart
    if has_generated_content(existing_description or "", base_marker):
        parsed = parse_description(existing_description, base_marker)
        parts = [p for p in (parsed.before, wrapped, parsed.after) if p.strip()]
        return "\n\n".join(parts)
    if existing:
        return f"{existing}\n\n{wrapped}"
    return wrapped


__all__ = [
    "APPEND_SEPARATOR",
    "UpdateMode",
    "GenerationDecision",
    "should_generate",
    "apply_update_mode",
]
