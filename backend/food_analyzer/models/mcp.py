"""Pydantic models for the MCP JSON-RPC envelopes and tool metadata."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"


class JsonRpcRequest(BaseModel):
    """Incoming JSON-RPC 2.0 request envelope."""

    jsonrpc: str
    id: Any = None  # string or number, echoed verbatim
    method: str
    params: Any = None  # only tools/call reads it


class JsonRpcErrorObject(BaseModel):
    """The `error` member of a failed JSON-RPC response."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """Outgoing JSON-RPC 2.0 response; exactly one of result/error is set."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: Any = None
    result: dict[str, Any] | None = None
    error: JsonRpcErrorObject | None = None

    def to_dict(self) -> dict:
        data = self.model_dump(exclude_none=True)
        data["id"] = self.id
        return data


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(BaseModel):
    """Result of the `initialize` handshake."""

    protocolVersion: str
    capabilities: dict[str, Any] = Field(default_factory=lambda: {"tools": {}})
    serverInfo: ServerInfo


class Tool(BaseModel):
    """Tool descriptor as returned by `tools/list`."""

    name: str
    description: str
    inputSchema: dict[str, Any] = Field(description="JSON Schema for the tool arguments")


class ListToolsResult(BaseModel):
    tools: list[Tool]


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    """Result of `tools/call`. Execution failures set isError instead of a JSON-RPC error."""

    content: list[TextContent]
    isError: bool = False
