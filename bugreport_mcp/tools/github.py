"""GitHub pull request tools."""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Type

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, create_model

from bugreport_mcp.adapters.github import GitHubClient
from bugreport_mcp.errors import RemoteRejected
from bugreport_mcp.tools.base import ToolHandler, ToolResult
from bugreport_mcp.validation.config import ServerConfig

logger = logging.getLogger(__name__)

PullRequestState = Literal["open", "closed", "all"]


class PullRequestRecord(BaseModel):
    """One pull request as the tools report it."""

    number: int
    title: str
    url: str
    state: str


class PullRequestList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pull_requests: List[PullRequestRecord] = Field(alias="pullRequests")
    count: int


class PullRequestDiff(BaseModel):
    diff: str


def repo_input_model(name: str, config: ServerConfig, **fields: Any) -> Type[BaseModel]:
    """
    Input model with ``owner`` and ``repo`` defaulted from the configuration.

    Defaults are baked in when the handler is built, so the published schema
    shows the values a call without owner/repo will actually use.
    """
    return create_model(
        name,
        __config__=ConfigDict(extra="forbid"),
        owner=(str, Field(default=config.default_owner, description="Repository owner (user or organisation)")),
        repo=(str, Field(default=config.default_repo, description="Repository name")),
        **fields,
    )


class ListPullRequestsTool(ToolHandler):
    name = "github.list_pull_requests"
    description = "List pull requests for a GitHub repository"
    failure_prefix = "Failed to list pull requests"
    output_model = PullRequestList

    def __init__(self, config: ServerConfig, client: GitHubClient):
        self._client = client
        self.input_model = repo_input_model(
            "ListPullRequestsInput",
            config,
            state=(PullRequestState, Field(default="open", description="Pull request state filter")),
        )

    def handle(self, params: Any) -> ToolResult:
        raw = self._client.list_pull_requests(params.owner, params.repo, params.state)

        try:
            pull_requests = [
                PullRequestRecord(
                    number=pr.get("number"),
                    title=pr.get("title"),
                    url=pr.get("html_url"),
                    state=pr.get("state"),
                )
                for pr in raw
            ]
        except ValidationError as exc:
            # The response already passed the 2xx check
            raise RemoteRejected(200, f"unexpected pull request record: {exc.errors()[0].get('msg')}") from exc
        payload = PullRequestList(pull_requests=pull_requests, count=len(pull_requests))

        return ToolResult.success(
            f"Found {payload.count} PR(s) in {params.owner}/{params.repo} (state={params.state})",
            payload,
        )


class GetPullRequestDiffTool(ToolHandler):
    name = "github.get_pr_diff"
    description = "Get unified diff for a specific GitHub pull request"
    failure_prefix = "Failed to get pull request diff"
    output_model = PullRequestDiff

    def __init__(self, config: ServerConfig, client: GitHubClient):
        self._client = client
        self.input_model = repo_input_model(
            "GetPullRequestDiffInput",
            config,
            number=(StrictInt, Field(ge=1, description="Pull request number")),
        )

    def handle(self, params: Any) -> ToolResult:
        diff = self._client.get_pull_request_diff(params.owner, params.repo, params.number)

        return ToolResult.success(
            f"Unified diff for PR #{params.number} in {params.owner}/{params.repo} "
            f"(length {len(diff)} chars)",
            PullRequestDiff(diff=diff),
        )
