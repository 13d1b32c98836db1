"""GitHub REST calls used to turn an edit plan into a pull request.

Requires a token with ``repo`` scope. Only the calls the change pipeline needs
are exposed; every non-success response raises UpstreamError carrying the
status code and response body.
"""

from __future__ import annotations

import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from docs_edit_bot.agents.exceptions import UpstreamError

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github+json"


def encode_content(content: str) -> str:
    """Base64-encode UTF-8 text for the contents API."""
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


def _contents_url(owner: str, repo: str, path: str) -> str:
    return f"/repos/{owner}/{repo}/contents/{quote(path.lstrip('/'), safe='/')}"


class GitHubClient:
    """Thin synchronous client over ``httpx.Client``."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        transport: httpx.BaseTransport | None = None,
    ):
        self._http = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"token {token}",
                "Accept": GITHUB_ACCEPT,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings, transport: httpx.BaseTransport | None = None) -> GitHubClient:
        return cls(token=settings.github_token, base_url=settings.github_api_url, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check(self, response: httpx.Response, action: str) -> dict[str, Any]:
        if not response.is_success:
            raise UpstreamError(
                f"GitHub {action} failed: {response.status_code} {response.text}",
                service="github",
                status=response.status_code,
                body=response.text,
            )
        return response.json()

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        response = self._http.get(f"/repos/{owner}/{repo}")
        return self._check(response, "repo lookup")

    def get_branch_ref(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        response = self._http.get(f"/repos/{owner}/{repo}/git/ref/heads/{branch}")
        return self._check(response, "branch ref lookup")

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> dict[str, Any]:
        response = self._http.post(
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        return self._check(response, "branch creation")

    def get_file_sha(self, owner: str, repo: str, path: str, ref: str) -> str | None:
        """Return the blob sha of ``path`` on ``ref``, or None if it cannot be read.

        Any non-success answer is treated as "file does not exist", so the
        following write creates the file.
        """
        response = self._http.get(_contents_url(owner, repo, path), params={"ref": ref})
        if not response.is_success:
            if response.status_code != 404:
                logger.warning(
                    "Existence check for %s returned %s; treating as new file",
                    path,
                    response.status_code,
                )
            return None
        payload = response.json()
        if isinstance(payload, dict):
            return payload.get("sha")
        # A list means the path is a directory
        return None

    def put_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "message": message,
            "content": encode_content(content),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        response = self._http.put(_contents_url(owner, repo, path), json=body)
        return self._check(response, f"create/update of file {path}")

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str,
    ) -> dict[str, Any]:
        response = self._http.post(
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "head": head, "base": base, "body": body},
        )
        return self._check(response, "pull request creation")
