"""
MCP request dispatcher.

Maps JSON-RPC 2.0 envelopes onto the Model Context Protocol methods this
server supports:

- initialize: protocol version, capabilities and server info
- tools/list: the registered tool descriptors
- tools/call: runs a tool and renders its outcome

Protocol problems (bad envelope, unknown method, bad params) become JSON-RPC
`error` objects. Tool execution failures are successful responses whose
result carries `isError: true`.
"""

import logging

from pydantic import ValidationError

from food_analyzer.errors import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcError,
)
from food_analyzer.models.mcp import (
    JSONRPC_VERSION,
    InitializeResult,
    JsonRpcErrorObject,
    JsonRpcRequest,
    JsonRpcResponse,
    ListToolsResult,
    ServerInfo,
)
from food_analyzer.services.tools import AnalyzeFoodImageTool
from food_analyzer.services.vision import VisionService

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


def error_response(request_id, code: int, message: str, data=None) -> dict:
    """Build a JSON-RPC error envelope."""
    error = JsonRpcErrorObject(code=code, message=message, data=data)
    return JsonRpcResponse(id=request_id, error=error).to_dict()


def is_jsonrpc_envelope(body) -> bool:
    """True when a request body should be handled as JSON-RPC rather than legacy.

    A 2.0 envelope always wins. Otherwise an `image` field means a legacy
    request, and any other body with `jsonrpc` or `method` is a (bad) envelope.
    """
    if not isinstance(body, dict):
        return False
    if body.get("jsonrpc") == JSONRPC_VERSION:
        return True
    if body.get("image"):
        return False
    return "jsonrpc" in body or "method" in body


class MCPDispatcher:
    """Routes one JSON-RPC envelope to its method handler."""

    def __init__(
        self,
        vision: VisionService,
        server_name: str = "food-analyzer-mcp",
        server_version: str = "1.0.0",
    ):
        self.server_info = ServerInfo(name=server_name, version=server_version)
        self.tools = {tool.name: tool for tool in [AnalyzeFoodImageTool(vision)]}
        self._methods = {
            "initialize": self.initialize,
            "tools/list": self.list_tools,
            "tools/call": self.call_tool,
        }

    async def handle(self, envelope: dict) -> dict:
        """Dispatch an envelope and return the response envelope as a dict."""
        request_id = envelope.get("id")

        if envelope.get("jsonrpc") != JSONRPC_VERSION:
            return error_response(request_id, INVALID_REQUEST, "Invalid Request: jsonrpc must be 2.0")

        try:
            request = JsonRpcRequest.model_validate(envelope)
        except ValidationError as e:
            logger.warning("Malformed JSON-RPC envelope: %s", e.errors(include_url=False))
            return error_response(request_id, INVALID_REQUEST, "Invalid Request: malformed envelope")

        handler = self._methods.get(request.method)
        if handler is None:
            return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {request.method}")

        try:
            result = await handler(request.params)
        except JsonRpcError as e:
            return error_response(request_id, e.code, e.message, e.data)

        return JsonRpcResponse(id=request_id, result=result).to_dict()

    async def initialize(self, params) -> dict:
        # Client capabilities in params are accepted but not negotiated
        return InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            serverInfo=self.server_info,
        ).model_dump()

    async def list_tools(self, params) -> dict:
        return ListToolsResult(tools=[t.descriptor for t in self.tools.values()]).model_dump()

    async def call_tool(self, params) -> dict:
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: params must be an object")

        name = params.get("name")
        tool = self.tools.get(name) if isinstance(name, str) else None
        if tool is None:
            raise JsonRpcError(INVALID_PARAMS, f"Invalid params: Unknown tool: {name}")

        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: arguments must be an object")

        outcome = await tool.call(arguments)
        return outcome.to_result().model_dump()
