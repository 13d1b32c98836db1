import base64
import json
from unittest.mock import MagicMock

import httpx
import pytest

from docs_edit_bot.api.handlers import Services
from docs_edit_bot.config import Settings
from docs_edit_bot.github.client import GitHubClient

OWNER = "acme"
REPO = "cafe-docs"
BASE_SHA = "base-sha-1"
BRANCH_NAME = "ai-edit-1700000000000"


class FakeGitHub:
    """In-memory stand-in for the GitHub REST endpoints the pipeline calls.

    ``fail`` maps an operation key to ``(status, body)``; keys are "repo",
    "ref", "create_ref", "get:<path>", "put:<path>" and "pulls".
    """

    def __init__(self, default_branch: str = "main", existing: dict[str, str] | None = None):
        self.default_branch = default_branch
        self.heads = {default_branch: BASE_SHA}
        self.files: dict[tuple[str, str], dict] = {}
        for path, text in (existing or {}).items():
            self.files[(default_branch, path)] = {"sha": f"blob-existing-{path}", "content": text}
        self.pulls: list[dict] = []
        self.requests: list[tuple[str, str]] = []
        self.put_bodies: list[dict] = []
        self.fail: dict[str, tuple[int, str]] = {}
        self._counter = 0

    def _next(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def _failure(self, key: str) -> httpx.Response | None:
        if key in self.fail:
            status, body = self.fail[key]
            return httpx.Response(status, text=body)
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        self.requests.append((method, path))
        parts = path.strip("/").split("/")
        assert parts[:3] == ["repos", OWNER, REPO], path
        rest = parts[3:]

        if not rest and method == "GET":
            failed = self._failure("repo")
            if failed is not None:
                return failed
            return httpx.Response(
                200, json={"full_name": f"{OWNER}/{REPO}", "default_branch": self.default_branch}
            )

        if rest[:3] == ["git", "ref", "heads"] and method == "GET":
            failed = self._failure("ref")
            if failed is not None:
                return failed
            branch = "/".join(rest[3:])
            if branch not in self.heads:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"ref": f"refs/heads/{branch}", "object": {"sha": self.heads[branch]}})

        if rest == ["git", "refs"] and method == "POST":
            failed = self._failure("create_ref")
            if failed is not None:
                return failed
            payload = json.loads(request.content)
            branch = payload["ref"].removeprefix("refs/heads/")
            if branch in self.heads:
                return httpx.Response(422, json={"message": "Reference already exists"})
            source = next(name for name, sha in self.heads.items() if sha == payload["sha"])
            for (file_branch, file_path), entry in list(self.files.items()):
                if file_branch == source:
                    self.files[(branch, file_path)] = dict(entry)
            self.heads[branch] = payload["sha"]
            return httpx.Response(201, json={"ref": payload["ref"], "object": {"sha": payload["sha"]}})

        if rest[:1] == ["contents"]:
            file_path = "/".join(rest[1:])
            if method == "GET":
                failed = self._failure(f"get:{file_path}")
                if failed is not None:
                    return failed
                entry = self.files.get((request.url.params.get("ref"), file_path))
                if entry is None:
                    return httpx.Response(404, json={"message": "Not Found"})
                return httpx.Response(200, json={"path": file_path, "sha": entry["sha"]})
            if method == "PUT":
                failed = self._failure(f"put:{file_path}")
                if failed is not None:
                    return failed
                payload = json.loads(request.content)
                self.put_bodies.append(payload)
                key = (payload["branch"], file_path)
                current = self.files.get(key)
                if current is not None and payload.get("sha") != current["sha"]:
                    return httpx.Response(422, json={"message": "sha wasn't supplied"})
                blob = self._next("blob")
                self.files[key] = {
                    "sha": blob,
                    "content": base64.b64decode(payload["content"]).decode("utf-8"),
                }
                return httpx.Response(
                    201 if current is None else 200,
                    json={"content": {"path": file_path, "sha": blob}, "commit": {"sha": self._next("commit")}},
                )

        if rest == ["pulls"] and method == "POST":
            failed = self._failure("pulls")
            if failed is not None:
                return failed
            payload = json.loads(request.content)
            number = len(self.pulls) + 1
            pull = {
                "number": number,
                "html_url": f"https://github.com/{OWNER}/{REPO}/pull/{number}",
                "title": payload["title"],
                "body": payload["body"],
                "head": {"ref": payload["head"]},
                "base": {"ref": payload["base"]},
            }
            self.pulls.append(pull)
            return httpx.Response(201, json=pull)

        return httpx.Response(404, json={"message": f"Unhandled {method} {path}"})

    def calls(self, method: str) -> list[str]:
        return [path for m, path in self.requests if m == method]

    def content(self, branch: str, path: str) -> str | None:
        entry = self.files.get((branch, path))
        return entry["content"] if entry else None


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def github_client(fake_github):
    client = GitHubClient(token="ghp-test", transport=httpx.MockTransport(fake_github.handler))
    yield client
    client.close()


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        github_token="ghp-test",
        repo_owner=OWNER,
        repo_name=REPO,
    )


@pytest.fixture
def mock_completion():
    """Completion client double; set ``.complete.return_value`` per test."""
    completion = MagicMock()
    completion.complete.return_value = ""
    return completion


@pytest.fixture
def make_services(settings, fake_github, mock_completion):
    """Factory building Services wired to the fakes, with optional settings overrides."""

    def _make(**overrides) -> Services:
        effective = settings.model_copy(update=overrides) if overrides else settings
        return Services(
            settings=effective,
            completion_factory=lambda _settings: mock_completion,
            github_factory=lambda s: GitHubClient(
                token=s.github_token, transport=httpx.MockTransport(fake_github.handler)
            ),
            branch_namer=lambda: BRANCH_NAME,
        )

    return _make
