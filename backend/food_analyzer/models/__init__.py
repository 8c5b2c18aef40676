"""Pydantic models for the food analyzer MCP server."""

from .mcp import (
    JSONRPC_VERSION,
    JsonRpcRequest,
    JsonRpcErrorObject,
    JsonRpcResponse,
    ServerInfo,
    InitializeResult,
    Tool,
    ListToolsResult,
    TextContent,
    CallToolResult,
)

__all__ = [
    "JSONRPC_VERSION",
    "JsonRpcRequest",
    "JsonRpcErrorObject",
    "JsonRpcResponse",
    "ServerInfo",
    "InitializeResult",
    "Tool",
    "ListToolsResult",
    "TextContent",
    "CallToolResult",
]
