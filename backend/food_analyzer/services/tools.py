"""MCP tools exposed by the server and their call outcomes."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Union

from food_analyzer.errors import INVALID_PARAMS, JsonRpcError
from food_analyzer.models.mcp import CallToolResult, TextContent, Tool
from food_analyzer.services.vision import VisionService

logger = logging.getLogger(__name__)


@dataclass
class ToolSuccess:
    """Tool ran; payload is rendered as pretty-printed JSON text."""
    payload: Any

    def to_result(self) -> CallToolResult:
        text = json.dumps(self.payload, indent=2, ensure_ascii=False)
        return CallToolResult(content=[TextContent(text=text)], isError=False)


@dataclass
class ToolFailure:
    """Tool ran and failed; reported to the caller as an error-flagged result."""
    message: str

    def to_result(self) -> CallToolResult:
        return CallToolResult(content=[TextContent(text=self.message)], isError=True)


ToolOutcome = Union[ToolSuccess, ToolFailure]


class AnalyzeFoodImageTool:
    """`analyze_food_image`: nutrition facts for a food photo."""

    descriptor = Tool(
        name="analyze_food_image",
        description=(
            "Analyzes a food image and returns detailed nutritional information including "
            "macros (calories, protein, fat, carbs), micronutrients, and ingredients"
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "imageUrl": {
                    "type": "string",
                    "description": (
                        "The URL or base64 data URL of the food image to analyze "
                        "(supports data:image/jpeg;base64,... format)"
                    ),
                }
            },
            "required": ["imageUrl"],
        },
    )

    def __init__(self, vision: VisionService):
        self.vision = vision

    @property
    def name(self) -> str:
        return self.descriptor.name

    async def call(self, arguments: dict) -> ToolOutcome:
        """Run the analysis.

        Missing arguments are a protocol error (raised); anything that goes
        wrong talking to the model is a ToolFailure.
        """
        image_url = arguments.get("imageUrl")
        if not image_url:
            raise JsonRpcError(INVALID_PARAMS, "Invalid params: imageUrl is required")

        logger.info("Analyzing food image...")
        try:
            record = await self.vision.analyze(image_url)
        except Exception as e:
            logger.error("Tool execution error: %s", e)
            return ToolFailure(f"Error analyzing food: {e}")

        return ToolSuccess(record)
