"""Tests for the GitHub adapter and pull request tools."""

import json

import httpx
import pytest

from bugreport_mcp.adapters.github import GitHubClient
from bugreport_mcp.errors import InvalidArgument, MissingCredential, RemoteRejected, TransportFailure
from bugreport_mcp.tools.github import GetPullRequestDiffTool, ListPullRequestsTool
from bugreport_mcp.validation.config import ServerConfig

PULLS = [
    {"number": 43, "title": "Fix ANR parser", "html_url": "https://github.com/acme/widgets/pull/43", "state": "open", "user": {}},
    {"number": 41, "title": "Add logcat filter", "html_url": "https://github.com/acme/widgets/pull/41", "state": "open"},
    {"number": 42, "title": "Bump deps", "html_url": "https://github.com/acme/widgets/pull/42", "state": "closed"},
]

DIFF = "diff --git a/x.py b/x.py\n--- a/x.py\n+++ b/x.py\n@@ -1 +1 @@\n-a\n+b\n"


class Recorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, responder):
        self.requests = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)


def make_client(config, responder):
    recorder = Recorder(responder)
    return GitHubClient(config, transport=httpx.MockTransport(recorder)), recorder


# ---------------------------------------------------------------------------
# GitHubClient
# ---------------------------------------------------------------------------


class TestGitHubClient:
    def test_headers_and_query(self, config):
        client, recorder = make_client(config, lambda r: httpx.Response(200, json=PULLS))

        client.list_pull_requests("acme", "widgets", "closed")

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/repos/acme/widgets/pulls"
        assert request.url.params["state"] == "closed"
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.headers["User-Agent"] == "AOSPBugreportAnalyzerMCPServer"
        assert request.headers["Accept"] == "application/vnd.github+json"

    def test_missing_token_no_request(self, tmp_path):
        config = ServerConfig(github_token=None)
        client, recorder = make_client(config, lambda r: httpx.Response(200, json=[]))

        with pytest.raises(MissingCredential, match="GITHUB_TOKEN"):
            client.list_pull_requests("acme", "widgets", "open")

        assert recorder.requests == []

    def test_non_success_status(self, config):
        body = "x" * 500
        client, _ = make_client(config, lambda r: httpx.Response(404, text=body))

        with pytest.raises(RemoteRejected) as excinfo:
            client.get_pull_request_diff("acme", "widgets", 7)

        assert excinfo.value.status_code == 404
        assert len(excinfo.value.body) == 200
        assert "404" in str(excinfo.value)

    def test_redirect_status_rejected(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(304))

        with pytest.raises(RemoteRejected):
            client.list_pull_requests("acme", "widgets", "open")

    def test_transport_failure(self, config):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(config, boom)

        with pytest.raises(TransportFailure, match="Failed to call GitHub API: connection refused"):
            client.list_pull_requests("acme", "widgets", "open")

    def test_invalid_json(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(200, text="<html>"))

        with pytest.raises(RemoteRejected, match="invalid JSON"):
            client.list_pull_requests("acme", "widgets", "open")

    def test_non_object_record(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(200, json=[PULLS[0], "oops"]))

        with pytest.raises(RemoteRejected, match="unexpected pull request record"):
            client.list_pull_requests("acme", "widgets", "open")

    def test_path_segments_quoted(self, config):
        client, recorder = make_client(config, lambda r: httpx.Response(200, json=[]))

        client.list_pull_requests("acme/../evil", "widgets", "open")

        assert recorder.requests[0].url.raw_path.startswith(b"/repos/acme%2F..%2Fevil/widgets/pulls")


# ---------------------------------------------------------------------------
# github.list_pull_requests
# ---------------------------------------------------------------------------


class TestListPullRequestsTool:
    def test_maps_records_in_remote_order(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(200, json=PULLS))
        tool = ListPullRequestsTool(config, client)

        result = tool.call({"owner": "acme", "repo": "widgets"})

        assert result.is_error is False
        pull_requests = result.structured_content["pullRequests"]
        assert [pr["number"] for pr in pull_requests] == [43, 41, 42]
        assert pull_requests[0] == {
            "number": 43,
            "title": "Fix ANR parser",
            "url": "https://github.com/acme/widgets/pull/43",
            "state": "open",
        }

    def test_count_matches_summary(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(200, json=PULLS))
        tool = ListPullRequestsTool(config, client)

        result = tool.call({})

        assert result.structured_content["count"] == len(result.structured_content["pullRequests"]) == 3
        assert result.text == "Found 3 PR(s) in acme/widgets (state=open)"

    def test_empty_list(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(200, json=[]))
        tool = ListPullRequestsTool(config, client)

        result = tool.call({"state": "all"})

        assert result.structured_content == {"pullRequests": [], "count": 0}
        assert result.text == "Found 0 PR(s) in acme/widgets (state=all)"

    def test_defaults_from_config(self, config):
        client, recorder = make_client(config, lambda r: httpx.Response(200, json=[]))
        tool = ListPullRequestsTool(config, client)

        tool.call(None)

        request = recorder.requests[0]
        assert request.url.path == "/repos/acme/widgets/pulls"
        assert request.url.params["state"] == "open"

    def test_invalid_state(self, config):
        client, recorder = make_client(config, lambda r: httpx.Response(200, json=[]))
        tool = ListPullRequestsTool(config, client)

        with pytest.raises(InvalidArgument, match="state"):
            tool.call({"state": "merged"})

        assert recorder.requests == []

    def test_remote_failure_is_error_result(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(401, json={"message": "Bad credentials"}))
        tool = ListPullRequestsTool(config, client)

        result = tool.call({})

        assert result.is_error is True
        assert result.structured_content is None
        assert result.text.startswith("Failed to list pull requests: GitHub API error: 401")
        assert "Bad credentials" in result.text

    @pytest.mark.parametrize(
        "records",
        [
            [{"number": 1, "title": None, "html_url": "u", "state": "open"}],
            [{"number": 1, "html_url": "u", "state": "open"}],
            [{"number": 1, "title": "t", "html_url": "u", "state": "open"}, 7],
        ],
    )
    def test_malformed_record_is_error_result(self, config, records):
        client, _ = make_client(config, lambda r: httpx.Response(200, json=records))
        tool = ListPullRequestsTool(config, client)

        result = tool.call({})

        assert result.is_error is True
        assert "unexpected pull request record" in result.text

    def test_missing_token_is_error_result(self):
        config = ServerConfig(github_token=None)
        client, recorder = make_client(config, lambda r: httpx.Response(200, json=[]))
        tool = ListPullRequestsTool(config, client)

        result = tool.call({})

        assert result.is_error is True
        assert "GITHUB_TOKEN is not set" in result.text
        assert recorder.requests == []

    def test_schema_shows_defaults(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(200, json=[]))
        schema = ListPullRequestsTool(config, client).get_schema()

        properties = schema["inputSchema"]["properties"]
        assert properties["owner"]["default"] == "acme"
        assert properties["repo"]["default"] == "widgets"
        assert properties["state"]["enum"] == ["open", "closed", "all"]
        assert "pullRequests" in schema["outputSchema"]["properties"]


# ---------------------------------------------------------------------------
# github.get_pr_diff
# ---------------------------------------------------------------------------


class TestGetPullRequestDiffTool:
    def test_returns_diff_verbatim(self, config):
        client, recorder = make_client(config, lambda r: httpx.Response(200, text=DIFF))
        tool = GetPullRequestDiffTool(config, client)

        result = tool.call({"number": 43})

        request = recorder.requests[0]
        assert request.url.path == "/repos/acme/widgets/pulls/43"
        assert request.headers["Accept"] == "application/vnd.github.v3.diff"
        assert result.structured_content == {"diff": DIFF}
        assert result.text == f"Unified diff for PR #43 in acme/widgets (length {len(DIFF)} chars)"

    @pytest.mark.parametrize("number", [0, -3, 1.5, "5", True, None])
    def test_invalid_number_never_calls_adapter(self, config, number):
        client, recorder = make_client(config, lambda r: httpx.Response(200, text=DIFF))
        tool = GetPullRequestDiffTool(config, client)

        with pytest.raises(InvalidArgument):
            tool.call({"number": number})

        assert recorder.requests == []

    def test_missing_number(self, config):
        client, recorder = make_client(config, lambda r: httpx.Response(200, text=DIFF))
        tool = GetPullRequestDiffTool(config, client)

        with pytest.raises(InvalidArgument, match="number"):
            tool.call({"owner": "acme"})

        assert recorder.requests == []

    def test_remote_failure_is_error_result(self, config):
        client, _ = make_client(config, lambda r: httpx.Response(404, text=json.dumps({"message": "Not Found"})))
        tool = GetPullRequestDiffTool(config, client)

        result = tool.call({"number": 999})

        assert result.is_error is True
        assert "404" in result.text
