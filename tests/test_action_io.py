"""Tests for workflow outputs and annotations."""

import io

from utils import action_io
from utils.pr_models import GenerationResult


def test_multiline_output_uses_heredoc(tmp_path):
    path = tmp_path / "out"
    action_io.set_output("description", "line 1\nline 2", output_file=str(path))
    lines = path.read_text().splitlines()
    assert lines[0].startswith("description<<EOF_")
    delimiter = lines[0].split("<<", 1)[1]
    assert lines[1:] == ["line 1", "line 2", delimiter]


def test_write_result(tmp_path):
    path = tmp_path / "out"
    result = GenerationResult(description="Body", generated=False, model="gemini-3-flash")
    action_io.write_result(result, output_file=str(path))
    text = path.read_text()
    for name, value in [("description", "Body"), ("generated", "false"), ("model_used", "gemini-3-flash")]:
        assert f"{name}<<" in text
        assert f"\n{value}\n" in text


def test_set_output_without_output_file():
    stream = io.StringIO()
    action_io.set_output("generated", "a\nb", output_file="", stream=stream)
    assert stream.getvalue() == "::set-output name=generated::a%0Ab\n"


def test_error_annotation_is_escaped():
    stream = io.StringIO()
    action_io.error("bad\ninput 100%", stream=stream)
    assert stream.getvalue() == "::error::bad%0Ainput 100%25\n"
