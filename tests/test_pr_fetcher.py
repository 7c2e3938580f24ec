"""Tests for PR context loading and diff collection."""

import json

import pytest

from utils.diff_reducer import TRUNCATION_SENTINEL
from utils.github_client import GithubApiError, GithubAuthError
from utils.pr_fetcher import PRFetcher, PRFetchError, context_from_event, normalize_commit, normalize_file

from .fakes import FakeGithubClient, commit_payload, file_payload, pr_payload


@pytest.fixture
def event_file(tmp_path):
    def _write(payload):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(payload))
        return str(path)
    return _write


class TestContextFromEvent:
    def test_pull_request_event(self, event_file):
        path = event_file({"pull_request": pr_payload(number=9, body=None)})
        pr = context_from_event(path, "acme/shop")
        assert (pr.owner, pr.repo, pr.pull_number) == ("acme", "shop", 9)
        assert pr.current_description == ""
        assert pr.head_branch == "feature/cache"

    def test_repository_from_payload(self, event_file):
        path = event_file({"pull_request": pr_payload(), "repository": {"full_name": "org/app"}})
        assert context_from_event(path).full_name == "org/app"

    def test_not_a_pull_request_event(self, event_file):
        path = event_file({"push": {}})
        with pytest.raises(PRFetchError, match="pull_request") as info:
            context_from_event(path, "acme/shop")
        assert info.value.code == "NO_EVENT"

    def test_no_event_path(self):
        with pytest.raises(PRFetchError) as info:
            context_from_event()
        assert info.value.code == "NO_EVENT"

    def test_unreadable_payload(self, tmp_path):
        with pytest.raises(PRFetchError):
            context_from_event(str(tmp_path / "missing.json"), "acme/shop")


class TestNormalize:
    def test_file_status_aliases(self):
        change = normalize_file(file_payload("a.py", status="changed"))
        assert change.status == "modified"
        assert change.patch is None

    def test_renamed_file(self):
        data = dict(file_payload("new.py", patch="@@", status="renamed"), previous_filename="old.py")
        change = normalize_file(data)
        assert change.status == "renamed"
        assert change.previous_filename == "old.py"

    def test_commit_author_preference(self):
        assert normalize_commit(commit_payload("a" * 40, "msg", name="Ada", login="ada")).author == "Ada"
        assert normalize_commit(commit_payload("a" * 40, "msg", name=None, login="ada")).author == "ada"
        assert normalize_commit({"sha": "abc", "commit": {"message": "m"}}).author == "unknown"


class TestPRFetcher:
    def test_get_pr_context(self):
        client = FakeGithubClient(pr=pr_payload(body="Existing"))
        pr = PRFetcher(client).get_pr_context("acme", "shop", 5)
        assert pr.pull_number == 5
        assert pr.current_description == "Existing"

    def test_fetch_diff_filters_and_totals(self):
        client = FakeGithubClient(
            files=[
                file_payload("src/app.py", patch="+x", additions=3, deletions=1),
                file_payload("poetry.lock", patch="+y" * 50, additions=100, deletions=90),
            ],
            commits=[commit_payload("b" * 40, "Add app\n\nbody")],
        )
        fetcher = PRFetcher(client)
        diff = fetcher.fetch_diff(fetcher.get_pr_context("acme", "shop", 5), 1000, ["*.lock"])
        assert [f.filename for f in diff.files] == ["src/app.py"]
        assert diff.excluded_files == 1
        assert (diff.total_additions, diff.total_deletions) == (3, 1)
        assert diff.truncated is False
        assert diff.commits[0].first_line == "Add app"

    def test_fetch_diff_reduces_over_budget(self):
        client = FakeGithubClient(files=[
            file_payload("big.py", patch="x" * 500),
            file_payload("mid.py", patch="x" * 300),
            file_payload("small.py", patch="x" * 100),
        ])
        fetcher = PRFetcher(client)
        diff = fetcher.fetch_diff(fetcher.get_pr_context("acme", "shop", 5), 350)
        assert diff.truncated is True
        assert [f.filename for f in diff.files] == ["big.py", "mid.py", "small.py"]
        assert diff.files[0].patch.endswith(TRUNCATION_SENTINEL)
        assert sum(f.patch_size for f in diff.files) <= 350

    @pytest.mark.parametrize(
        "error, code",
        [
            (GithubApiError("gone", code="NOT_FOUND", status=404), "NOT_FOUND"),
            (GithubAuthError("denied", status=401), "UNAUTHORIZED"),
            (GithubApiError("slow", code="TIMEOUT"), "TIMEOUT"),
        ],
    )
    def test_errors_are_wrapped(self, error, code):
        client = FakeGithubClient()
        client.fail["get_pull_request"] = error
        with pytest.raises(PRFetchError) as info:
            PRFetcher(client).get_pr_context("acme", "shop", 5)
        assert info.value.code == code
        assert info.value.cause is error

    def test_close_closes_client(self):
        client = FakeGithubClient()
        PRFetcher(client).close()
        assert client.closed
