#!/usr/bin/env python3
"""GitHub Actions workflow commands: step outputs and error annotations."""

from __future__ import annotations

import hashlib
import os
import sys
from typing import Optional, TextIO

from utils.pr_models import GenerationResult


def _escape_command(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_output(name: str, value: str, *, output_file: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Set a step output, multi-line safe.

    Writes a heredoc block to $GITHUB_OUTPUT; outside Actions falls back to the
    legacy `::set-output` command on stdout.
    """
    path = output_file if output_file is not None else os.environ.get("GITHUB_OUTPUT", "")
    text = str(value)
    if path:
        delimiter = f"EOF_{hashlib.sha256(f'{name}:{text}'.encode()).hexdigest()[:16]}"
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n")
            f.write(f"{text}\n")
            f.write(f"{delimiter}\n")
    else:
        print(f"::set-output name={name}::{_escape_command(text)}", file=stream or sys.stdout)


def write_result(result: GenerationResult, *, output_file: Optional[str] = None) -> None:
    set_output("description", result.description, output_file=output_file)
    set_output("generated", "true" if result.generated else "false", output_file=output_file)
    set_output("model_used", result.model, output_file=output_file)


def error(message: str, stream: Optional[TextIO] = None) -> None:
    """Emit an error annotation visible in the workflow run summary."""
    print(f"::error::{_escape_command(message)}", file=stream or sys.stdout)
