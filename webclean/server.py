"""Line-delimited JSON-RPC 2.0 server exposing the ``webfetch_clean`` tool.

Each non-blank line on the input stream is one request; each response is
written as one JSON line on the output stream.  Requests are handled one at
a time.  Logging must go to stderr since stdout carries the protocol.

Usage::

    from webclean.server import RPCServer

    RPCServer().serve()
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import Any, TextIO

from pydantic import ValidationError

from webclean import settings
from webclean.items import (
    CleanOptions,
    ContentItem,
    InitializeResult,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    ToolCallParams,
    ToolCallResult,
    webfetch_clean_tool,
)
from webclean.query import process

logger = logging.getLogger(__name__)

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RPCServer:
    """Dispatches JSON-RPC requests read from *stdin* and answers on *stdout*."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._handlers: dict[str, Callable[[JSONRPCRequest], JSONRPCResponse]] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    def serve(self) -> int:
        """Process requests until end of input; return a process exit code."""
        logger.info("%s %s listening on stdin", settings.SERVER_NAME, settings.SERVER_VERSION)
        for line in self._stdin:
            response = self.handle_line(line)
            if response is not None:
                self._write(response)
        return 0

    def handle_line(self, line: str) -> dict[str, Any] | None:
        """Answer one raw input line; None for blank lines and notifications."""
        line = line.strip()
        if not line:
            return None

        try:
            payload = json.loads(line)
        except json.JSONDecodeError:
            return _error(None, PARSE_ERROR, "Parse error").to_wire()

        try:
            req = JSONRPCRequest.model_validate(payload)
        except ValidationError:
            return _error(None, INVALID_REQUEST, "Invalid Request").to_wire()

        if req.is_notification and req.method.startswith("notifications/"):
            logger.debug("Notification %s", req.method)
            return None

        return self.handle_request(req).to_wire()

    def handle_request(self, req: JSONRPCRequest) -> JSONRPCResponse:
        handler = self._handlers.get(req.method)
        if handler is None:
            logger.warning("Unknown method %r", req.method)
            return _error(req.id, METHOD_NOT_FOUND, "Method not found")
        return handler(req)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _handle_initialize(self, req: JSONRPCRequest) -> JSONRPCResponse:
        return JSONRPCResponse(id=req.id, result=InitializeResult().model_dump())

    def _handle_tools_list(self, req: JSONRPCRequest) -> JSONRPCResponse:
        tool = webfetch_clean_tool().model_dump(exclude_none=True)
        return JSONRPCResponse(id=req.id, result={"tools": [tool]})

    def _handle_tools_call(self, req: JSONRPCRequest) -> JSONRPCResponse:
        try:
            params = ToolCallParams.model_validate(req.params)
        except ValidationError:
            return _error(req.id, INVALID_PARAMS, "Invalid params")

        if params.name != settings.TOOL_NAME:
            return _error(req.id, INVALID_PARAMS, "Unknown tool")

        args = params.arguments
        url = args.get("url")
        if not isinstance(url, str) or not url:
            return _error(req.id, INVALID_PARAMS, "Missing or invalid 'url' parameter")

        # Arguments of the wrong type fall back to their defaults
        output_format = args.get("output_format")
        if not isinstance(output_format, str):
            output_format = settings.DEFAULT_FORMAT

        timeout = args.get("timeout")
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            timeout = settings.DEFAULT_TIMEOUT

        options = CleanOptions(
            preserve_main_only=_flag(args, "preserve_main_only"),
            remove_images=_flag(args, "remove_images"),
        )

        result = process(url, output_format=output_format, options=options, timeout=int(timeout))
        if result.error:
            logger.warning("webfetch_clean failed for %s: %s", url, result.error)

        try:
            text = result.to_json()
        except (TypeError, ValueError) as exc:
            logger.exception("Failed to marshal result: %s", exc)
            return _error(req.id, INTERNAL_ERROR, "Failed to marshal result")

        call_result = ToolCallResult(content=[ContentItem(type="text", text=text)])
        return JSONRPCResponse(id=req.id, result=call_result.model_dump())

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _write(self, response: dict[str, Any]) -> None:
        try:
            data = json.dumps(response, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.error("Failed to marshal response: %s", exc)
            return
        self._stdout.write(data + "\n")
        self._stdout.flush()


def _error(req_id: Any, code: int, message: str) -> JSONRPCResponse:
    return JSONRPCResponse(id=req_id, error=JSONRPCError(code=code, message=message))


def _flag(args: dict[str, Any], name: str) -> bool:
    value = args.get(name)
    return value if isinstance(value, bool) else False


def serve(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Run the JSON-RPC loop on the given streams (default: process stdio)."""
    return RPCServer(stdin=stdin, stdout=stdout).serve()
