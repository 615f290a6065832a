"""GitHub REST client — repository metadata, pull requests, issues.

Only the three calls the remediation flow needs. Every non-2xx response
raises GitHubAPIError; transport errors (httpx.TransportError) propagate.
No retries, no backoff.
"""

from __future__ import annotations

from typing import Any

import httpx

from npmaudit import __version__
from npmaudit.config import RunConfig
from npmaudit.errors import GitHubAPIError

API_VERSION = "2022-11-28"


class GitHubClient:
    """Token-authenticated client bound to one repository.

    Use as a context manager so the underlying connection pool is closed:

        with GitHubClient.from_config(config) as client:
            client.get_repository()
    """

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        base_url: str = "https://api.github.com",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": f"npmaudit/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=30.0,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: RunConfig, transport: httpx.BaseTransport | None = None
    ) -> "GitHubClient":
        owner, repo = config.owner_repo
        return cls(
            token=config.github_token,
            owner=owner,
            repo=repo,
            base_url=config.api_url,
            transport=transport,
        )

    # ── Context manager ──────────────────────────────────────────────────

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ── Endpoints ────────────────────────────────────────────────────────

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def get_repository(self) -> dict[str, Any]:
        """GET /repos/{owner}/{repo} — includes default_branch."""
        return self._request("GET", self._repo_path)

    def create_pull_request(self, title: str, body: str, base: str, head: str) -> dict[str, Any]:
        """POST /repos/{owner}/{repo}/pulls"""
        return self._request(
            "POST",
            f"{self._repo_path}/pulls",
            json={"title": title, "body": body, "base": base, "head": head},
        )

    def create_issue(self, title: str, body: str) -> dict[str, Any]:
        """POST /repos/{owner}/{repo}/issues"""
        return self._request(
            "POST",
            f"{self._repo_path}/issues",
            json={"title": title, "body": body},
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        resp = self._http.request(method, path, **kwargs)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GitHubAPIError(
                method, str(resp.request.url), resp.status_code, _error_detail(resp)
            ) from e
        return resp.json()


def _error_detail(resp: httpx.Response) -> str:
    """Best-effort human message from a GitHub error body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip()[:200]
    if isinstance(data, dict):
        message = data.get("message", "")
        errors = data.get("errors")
        if errors:
            details = "; ".join(
                e.get("message", str(e)) if isinstance(e, dict) else str(e)
                for e in errors
            )
            return f"{message} ({details})" if message else details
        return message
    return ""
