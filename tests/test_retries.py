"""Tests for the bounded retry loop and error classification."""

import pytest

from clients.base import call_with_retries
from utils.errors import (
    PermanentGenerationError,
    TransientGenerationError,
    classify_generation_error,
)
from utils.wrap import with_retries


def failing_then(results):
    """Return a callable that raises or returns the queued results in order."""
    calls = {"n": 0}

    def fn():
        item = results[calls["n"]]
        calls["n"] += 1
        if isinstance(item, Exception):
            raise item
        return item

    fn.calls = calls
    return fn


def by_type(exc):
    return "TRANSIENT" if isinstance(exc, TransientGenerationError) else "FATAL"


class TestWithRetries:
    def test_success_after_transient_failures(self):
        sleeps = []
        fn = failing_then([TransientGenerationError("429"), TransientGenerationError("503"), "ok"])
        result = with_retries(fn, max_attempts=3, backoff_s=1.0, retry_on={"TRANSIENT"},
                              classify_exc=by_type, sleep=sleeps.append)
        assert result == "ok"
        assert sleeps == [2.0, 4.0]

    def test_fatal_error_is_not_retried(self):
        sleeps = []
        fn = failing_then([PermanentGenerationError("bad key"), "ok"])
        with pytest.raises(PermanentGenerationError):
            with_retries(fn, max_attempts=3, backoff_s=1.0, retry_on={"TRANSIENT"},
                         classify_exc=by_type, sleep=sleeps.append)
        assert fn.calls["n"] == 1
        assert sleeps == []

    def test_last_error_raised_when_attempts_run_out(self):
        last = TransientGenerationError("still down")
        fn = failing_then([TransientGenerationError("down"), TransientGenerationError("down"), last])
        with pytest.raises(TransientGenerationError) as info:
            with_retries(fn, max_attempts=3, backoff_s=0.5, retry_on={"TRANSIENT"},
                         classify_exc=by_type, sleep=lambda s: None)
        assert info.value is last
        assert fn.calls["n"] == 3

    def test_call_with_retries_uses_explicit_policy(self):
        sleeps = []
        fn = failing_then([TransientGenerationError("timeout"), "done"])
        assert call_with_retries(fn, max_attempts=2, backoff_s=0.1, sleep=sleeps.append) == "done"
        assert sleeps == [pytest.approx(0.2)]


class TestClassifyGenerationError:
    @pytest.mark.parametrize(
        "message",
        [
            "429 Too Many Requests",
            "Rate limit reached",
            "Quota exceeded for project",
            "RESOURCE_EXHAUSTED",
            "503 Service Unavailable",
            "Deadline exceeded",
            "Request timed out",
            "500 Internal Server Error",
        ],
    )
    def test_transient(self, message):
        assert isinstance(classify_generation_error(RuntimeError(message)), TransientGenerationError)

    def test_timeout_error_is_transient(self):
        assert isinstance(classify_generation_error(TimeoutError()), TransientGenerationError)

    @pytest.mark.parametrize("message", ["API key not valid", "Invalid argument", "Safety block"])
    def test_permanent(self, message):
        assert isinstance(classify_generation_error(ValueError(message)), PermanentGenerationError)

    def test_typed_errors_pass_through(self):
        err = PermanentGenerationError("empty", code="EMPTY")
        assert classify_generation_error(err) is err

    def test_cause_is_kept(self):
        cause = RuntimeError("503")
        assert classify_generation_error(cause).cause is cause
