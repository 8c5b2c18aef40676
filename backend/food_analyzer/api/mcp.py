"""
MCP endpoint - JSON-RPC tool invocation over HTTP.

Any path and any method other than OPTIONS is accepted (GET routes for / and
/health* are registered first). The body decides what happens:

- JSON-RPC envelope ({"jsonrpc": "2.0", "method": ...}): dispatched as MCP,
  always answered with HTTP 200 and a JSON-RPC envelope
- legacy body ({"image": "<url or data URL>"}): analysis result returned
  as-is, no envelope
- anything else: 400 {"error": "Invalid request format"}

Unexpected failures (unparsable JSON, legacy analysis errors) return
500 {"error": "Internal server error", "message": ...}.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from food_analyzer.api.deps import get_dispatcher, get_vision_service
from food_analyzer.services.mcp import MCPDispatcher, is_jsonrpc_envelope
from food_analyzer.services.vision import VisionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.api_route("/{path:path}", methods=["POST", "GET", "PUT", "PATCH", "DELETE"])
async def handle_request(
    request: Request,
    dispatcher: MCPDispatcher = Depends(get_dispatcher),
    vision: VisionService = Depends(get_vision_service),
):
    """Entry point for MCP clients and legacy image analysis."""
    try:
        body = await request.json()

        if is_jsonrpc_envelope(body):
            logger.info("Received MCP request: method=%s id=%s", body.get("method"), body.get("id"))
            response = await dispatcher.handle(body)
            return JSONResponse(content=response)

        # Non-MCP request (legacy support)
        image = body.get("image") if isinstance(body, dict) else None
        if image:
            logger.info("Received legacy analysis request")
            food_data = await vision.analyze(image)
            return JSONResponse(content=food_data)

        return JSONResponse(status_code=400, content={"error": "Invalid request format"})

    except Exception as e:
        logger.exception("Server error")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)},
        )
