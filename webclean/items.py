"""Pydantic models for cleaning options, results, and the JSON-RPC wire format."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from webclean import settings

# ---------------------------------------------------------------------------
# Cleaning configuration and result
# ---------------------------------------------------------------------------

class CleanOptions(BaseModel):
    """The two knobs the cleaning pipeline depends on."""

    model_config = {"frozen": True}

    preserve_main_only: bool = False
    remove_images: bool = False


class CleanResult(BaseModel):
    """Outcome of one fetch-clean-convert request.

    ``title`` and ``error`` are dropped from the JSON form when empty, so a
    successful result serializes as ``{"content", "url", "title", "format"}``
    and a failed one as ``{"content": "", "url", "format", "error"}``.
    """

    content: str = ""
    url: str
    title: str | None = None
    format: str = settings.DEFAULT_FORMAT
    error: str | None = None

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("title", "error", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
        return v or None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------

class JSONRPCRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: Any = None
    method: str
    params: Any = None

    @property
    def is_notification(self) -> bool:
        """True when the message carried no ``id`` member at all."""
        return "id" not in self.model_fields_set


class JSONRPCError(BaseModel):
    code: int
    message: str


class JSONRPCResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: Any = None
    result: Any = None
    error: JSONRPCError | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the response as a dict with exactly one of result/error.

        ``id`` is always present, even when null (parse errors).
        """
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump()
        else:
            data["result"] = self.result
        return data


# ---------------------------------------------------------------------------
# MCP tool surface
# ---------------------------------------------------------------------------

class ServerInfo(BaseModel):
    name: str = settings.SERVER_NAME
    version: str = settings.SERVER_VERSION


class InitializeResult(BaseModel):
    protocolVersion: str = settings.PROTOCOL_VERSION  # noqa: N815
    serverInfo: ServerInfo = Field(default_factory=ServerInfo)  # noqa: N815
    capabilities: dict[str, Any] = Field(
        default_factory=lambda: {"tools": {"list": True, "call": True}},
    )


class ToolProperty(BaseModel):
    type: str
    description: str
    enum: list[str] | None = None
    default: Any = None


class InputSchema(BaseModel):
    type: str = "object"
    properties: dict[str, ToolProperty] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class Tool(BaseModel):
    name: str
    description: str
    inputSchema: InputSchema  # noqa: N815


class ToolCallParams(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ContentItem(BaseModel):
    type: str = "text"
    text: str


class ToolCallResult(BaseModel):
    content: list[ContentItem] = Field(default_factory=list)


def webfetch_clean_tool() -> Tool:
    """Describe the single tool exposed over JSON-RPC."""
    return Tool(
        name=settings.TOOL_NAME,
        description=settings.TOOL_DESCRIPTION,
        inputSchema=InputSchema(
            properties={
                "url": ToolProperty(
                    type="string",
                    description="URL to fetch and clean (required)",
                ),
                "output_format": ToolProperty(
                    type="string",
                    description="Output format: 'html' or 'markdown' (default: 'markdown')",
                    enum=list(settings.OUTPUT_FORMATS),
                    default=settings.DEFAULT_FORMAT,
                ),
                "preserve_main_only": ToolProperty(
                    type="boolean",
                    description=(
                        "Only preserve content inside <main> or <article> tags "
                        "(default: false)"
                    ),
                    default=False,
                ),
                "remove_images": ToolProperty(
                    type="boolean",
                    description="Remove all images from output (default: false)",
                    default=False,
                ),
                "timeout": ToolProperty(
                    type="integer",
                    description=(
                        f"HTTP request timeout in seconds (default: {settings.DEFAULT_TIMEOUT})"
                    ),
                    default=settings.DEFAULT_TIMEOUT,
                ),
            },
            required=["url"],
        ),
    )
