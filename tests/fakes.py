from typing import Any, Dict, List, Optional

from utils.github_client import GithubApiError

# ruff: noqa: ARG002


def pr_payload(number: int = 7, body: Optional[str] = "", title: str = "Add caching") -> Dict[str, Any]:
    return {
        "number": number,
        "title": title,
        "body": body,
        "draft": False,
        "base": {"ref": "main"},
        "head": {"ref": "feature/cache"},
    }


def file_payload(filename: str, patch: Optional[str] = None, status: str = "modified",
                 additions: int = 1, deletions: int = 0) -> Dict[str, Any]:
    data = {"filename": filename, "status": status, "additions": additions, "deletions": deletions}
    if patch is not None:
        data["patch"] = patch
    return data


def commit_payload(sha: str, message: str, name: Optional[str] = "Ada", login: Optional[str] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"sha": sha, "commit": {"message": message, "author": {"name": name}}}
    if login:
        data["author"] = {"login": login}
    return data


class FakeGithubClient:
    """In-memory stand-in for GithubClient; records PATCH calls."""

    def __init__(self, pr: Optional[Dict[str, Any]] = None, files=None, commits=None) -> None:
        self.pr = pr or pr_payload()
        self.files: List[Dict[str, Any]] = list(files or [])
        self.commits: List[Dict[str, Any]] = list(commits or [])
        self.updates: List[Dict[str, Any]] = []
        self.fail: Dict[str, GithubApiError] = {}
        self.closed = False

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail:
            raise self.fail[name]

    def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        self._maybe_fail("get_pull_request")
        return dict(self.pr, number=number)

    def list_pull_request_files(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        self._maybe_fail("list_pull_request_files")
        return list(self.files)

    def list_commits_for_pr(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        self._maybe_fail("list_commits_for_pr")
        return list(self.commits)

    def update_pull_request_body(self, owner: str, repo: str, number: int, body: str) -> Dict[str, Any]:
        self._maybe_fail("update_pull_request_body")
        self.updates.append({"owner": owner, "repo": repo, "number": number, "body": body})
        return dict(self.pr, body=body)

    def close(self) -> None:
        self.closed = True


class FixedGenerator:
    model = "fake-model"

    def __init__(self, text: str = "Generated summary") -> None:
        self.text = text
        self.calls: List[Dict[str, str]] = []

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt})
        return self.text


class FailingGenerator(FixedGenerator):
    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt})
        raise self.error


class FakeResponse:
    def __init__(self, status_code: int = 200, data: Any = None) -> None:
        self.status_code = status_code
        self._data = data

    def json(self) -> Any:
        return self._data


class FakeSession:
    """Serves queued responses and records every request."""

    def __init__(self, responses: Optional[List[FakeResponse]] = None) -> None:
        self.headers: Dict[str, str] = {}
        self.responses = list(responses or [])
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    def _next(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        return self.responses.pop(0)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("PATCH", url, **kwargs)

    def close(self) -> None:
        self.closed = True
