"""
Common dependencies for API endpoints.
"""

from fastapi import Depends, Request

from food_analyzer.config import Settings, get_settings
from food_analyzer.services.mcp import MCPDispatcher
from food_analyzer.services.vision import VisionService


def get_vision_service(request: Request) -> VisionService:
    """Vision service created in the application lifespan."""
    return request.app.state.vision_service


def get_dispatcher(
    vision: VisionService = Depends(get_vision_service),
    settings: Settings = Depends(get_settings),
) -> MCPDispatcher:
    return MCPDispatcher(
        vision,
        server_name=settings.server_name,
        server_version=settings.server_version,
    )
