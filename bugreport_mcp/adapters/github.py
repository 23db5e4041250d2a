"""GitHub REST API access - one GET per tool call, failures classified."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from bugreport_mcp.errors import MissingCredential, RemoteRejected, TransportFailure
from bugreport_mcp.validation.config import ServerConfig

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/vnd.github+json"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"

# How much of a rejected response body is kept for diagnostics
ERROR_SNIPPET_CHARS = 200


class GitHubClient:
    """
    Minimal GitHub client for the pull request tools.

    Every request carries the configured token as a bearer credential and
    a fixed User-Agent. The token is checked before anything touches the
    network, so a missing token never produces a request.
    """

    def __init__(
        self,
        config: ServerConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            config: Server configuration (token, API URL, user agent).
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        """
        self._config = config
        self._client = httpx.Client(
            base_url=config.github_api_url,
            timeout=config.http_timeout,
            transport=transport,
        )

    # ── Requests ──────────────────────────────────────────────────────────

    def get(
        self,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Issue a single authenticated GET.

        Raises
        ------
        MissingCredential : no token configured
        TransportFailure : the request never got a response
        RemoteRejected : the response status is outside [200, 300)
        """
        if not self._config.github_token:
            raise MissingCredential(
                "GITHUB_TOKEN is not set. Please configure a GitHub token as an environment variable."
            )

        request_headers = {
            "Authorization": f"Bearer {self._config.github_token}",
            "User-Agent": self._config.user_agent,
            **(headers or {}),
        }

        logger.debug("GET %s params=%s", path, params)
        try:
            response = self._client.get(path, headers=request_headers, params=params)
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Failed to call GitHub API: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise RemoteRejected(response.status_code, response.text[:ERROR_SNIPPET_CHARS])

        return response

    def list_pull_requests(self, owner: str, repo: str, state: str) -> List[Dict[str, Any]]:
        """Raw pull request records, in the order GitHub returns them."""
        response = self.get(
            f"{_repo_path(owner, repo)}/pulls",
            headers={"Accept": JSON_MEDIA_TYPE},
            params={"state": state},
        )
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteRejected(response.status_code, f"invalid JSON body: {exc}") from exc

        if not isinstance(data, list):
            raise RemoteRejected(response.status_code, f"expected a list, got {type(data).__name__}")
        for item in data:
            if not isinstance(item, dict):
                raise RemoteRejected(
                    response.status_code,
                    f"unexpected pull request record: {type(item).__name__}",
                )
        return data

    def get_pull_request_diff(self, owner: str, repo: str, number: int) -> str:
        """Unified diff text for one pull request."""
        response = self.get(
            f"{_repo_path(owner, repo)}/pulls/{number}",
            headers={"Accept": DIFF_MEDIA_TYPE},
        )
        return response.text

    # ── Cleanup ───────────────────────────────────────────────────────────

    def close(self) -> None:
        self._client.close()


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
