"""Tests for webclean.server - line-delimited JSON-RPC front end."""

from __future__ import annotations

import io
import json
from unittest.mock import patch

import pytest

from webclean import settings
from webclean.items import CleanOptions, CleanResult
from webclean.server import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RPCServer,
    serve,
)

URL = "https://example.com/blog/post"


def _line(method: str, params=None, req_id=1) -> str:
    msg = {"jsonrpc": "2.0", "id": req_id, "method": method}
    if params is not None:
        msg["params"] = params
    return json.dumps(msg)


def _call(arguments: dict, name: str = settings.TOOL_NAME) -> str:
    return _line("tools/call", {"name": name, "arguments": arguments})


@pytest.fixture
def server() -> RPCServer:
    return RPCServer(stdin=io.StringIO(), stdout=io.StringIO())


# ---------------------------------------------------------------------------
# Envelope handling
# ---------------------------------------------------------------------------

class TestEnvelope:
    def test_blank_line_ignored(self, server):
        assert server.handle_line("   \n") is None

    def test_parse_error(self, server):
        resp = server.handle_line("{not json")
        assert resp == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": PARSE_ERROR, "message": "Parse error"},
        }

    def test_non_object_is_invalid_request(self, server):
        resp = server.handle_line("[1, 2]")
        assert resp["error"]["code"] == INVALID_REQUEST
        assert resp["id"] is None

    def test_unknown_method(self, server):
        resp = server.handle_line(_line("resources/list", req_id=9))
        assert resp["id"] == 9
        assert resp["error"] == {"code": METHOD_NOT_FOUND, "message": "Method not found"}
        assert "result" not in resp

    def test_notification_gets_no_response(self, server):
        line = json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert server.handle_line(line) is None

    def test_string_id_echoed(self, server):
        resp = server.handle_line(_line("initialize", req_id="abc"))
        assert resp["id"] == "abc"


# ---------------------------------------------------------------------------
# initialize / tools/list
# ---------------------------------------------------------------------------

class TestHandshake:
    def test_initialize(self, server):
        resp = server.handle_line(_line("initialize", {"capabilities": {}}))
        assert "error" not in resp
        assert resp["result"] == {
            "protocolVersion": "2024-11-05",
            "serverInfo": {"name": "webfetch-clean", "version": "1.0.0"},
            "capabilities": {"tools": {"list": True, "call": True}},
        }

    def test_tools_list(self, server):
        resp = server.handle_line(_line("tools/list"))
        tools = resp["result"]["tools"]
        assert len(tools) == 1
        tool = tools[0]
        assert tool["name"] == "webfetch_clean"
        schema = tool["inputSchema"]
        assert schema["type"] == "object"
        assert schema["required"] == ["url"]
        assert set(schema["properties"]) == {
            "url", "output_format", "preserve_main_only", "remove_images", "timeout",
        }
        assert schema["properties"]["url"] == {
            "type": "string",
            "description": "URL to fetch and clean (required)",
        }
        assert schema["properties"]["output_format"]["enum"] == ["html", "markdown"]
        assert schema["properties"]["preserve_main_only"]["default"] is False
        assert schema["properties"]["timeout"]["type"] == "integer"


# ---------------------------------------------------------------------------
# tools/call
# ---------------------------------------------------------------------------

class TestToolsCall:
    def _ok(self, content: str = "# Title") -> CleanResult:
        return CleanResult(url=URL, content=content, title="Title", format="markdown")

    def test_success_wraps_result_json(self, server):
        with patch("webclean.server.process", return_value=self._ok()) as mock_process:
            resp = server.handle_line(_call({"url": URL}))
        mock_process.assert_called_once_with(
            URL,
            output_format="markdown",
            options=CleanOptions(),
            timeout=settings.DEFAULT_TIMEOUT,
        )
        content = resp["result"]["content"]
        assert content[0]["type"] == "text"
        payload = json.loads(content[0]["text"])
        assert payload == {
            "content": "# Title", "url": URL, "title": "Title", "format": "markdown",
        }

    def test_arguments_forwarded(self, server):
        with patch("webclean.server.process", return_value=self._ok()) as mock_process:
            server.handle_line(_call({
                "url": URL,
                "output_format": "html",
                "preserve_main_only": True,
                "remove_images": True,
                "timeout": 12.0,
            }))
        mock_process.assert_called_once_with(
            URL,
            output_format="html",
            options=CleanOptions(preserve_main_only=True, remove_images=True),
            timeout=12,
        )

    def test_wrong_type_arguments_use_defaults(self, server):
        with patch("webclean.server.process", return_value=self._ok()) as mock_process:
            server.handle_line(_call({
                "url": URL,
                "output_format": 3,
                "preserve_main_only": "yes",
                "remove_images": 1,
                "timeout": "10",
            }))
        mock_process.assert_called_once_with(
            URL,
            output_format="markdown",
            options=CleanOptions(),
            timeout=settings.DEFAULT_TIMEOUT,
        )

    def test_processing_error_reported_in_result(self, server):
        failed = CleanResult(url=URL, format="markdown", error="server error (HTTP 500)")
        with patch("webclean.server.process", return_value=failed):
            resp = server.handle_line(_call({"url": URL}))
        assert "error" not in resp
        payload = json.loads(resp["result"]["content"][0]["text"])
        assert payload["error"] == "server error (HTTP 500)"
        assert payload["content"] == ""

    @pytest.mark.parametrize("arguments", [{}, {"url": ""}, {"url": 42}])
    def test_missing_url(self, server, arguments):
        with patch("webclean.server.process") as mock_process:
            resp = server.handle_line(_call(arguments))
        mock_process.assert_not_called()
        assert resp["error"] == {
            "code": INVALID_PARAMS,
            "message": "Missing or invalid 'url' parameter",
        }

    def test_unknown_tool(self, server):
        resp = server.handle_line(_call({"url": URL}, name="other_tool"))
        assert resp["error"] == {"code": INVALID_PARAMS, "message": "Unknown tool"}

    @pytest.mark.parametrize("params", [None, [], {"arguments": {}}, {"name": 1, "arguments": []}])
    def test_invalid_params(self, server, params):
        line = _line("tools/call", params) if params is not None else _line("tools/call")
        resp = server.handle_line(line)
        assert resp["error"] == {"code": INVALID_PARAMS, "message": "Invalid params"}


# ---------------------------------------------------------------------------
# serve() loop
# ---------------------------------------------------------------------------

class TestServeLoop:
    def test_one_response_line_per_request(self):
        stdin = io.StringIO(
            _line("initialize", req_id=1) + "\n"
            + "\n"
            + json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}) + "\n"
            + "garbage\n"
            + _line("tools/list", req_id=2) + "\n",
        )
        stdout = io.StringIO()
        assert serve(stdin=stdin, stdout=stdout) == 0

        lines = stdout.getvalue().splitlines()
        assert len(lines) == 3
        responses = [json.loads(x) for x in lines]
        assert responses[0]["id"] == 1
        assert responses[1]["error"]["code"] == PARSE_ERROR
        assert responses[2]["id"] == 2
        assert "tools" in responses[2]["result"]
