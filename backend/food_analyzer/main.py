"""
food-analyzer-mcp: FastAPI server exposing food photo analysis over MCP.

Run with: uvicorn food_analyzer.main:app --reload

Architecture:
- Single POST endpoint speaking JSON-RPC 2.0 (Model Context Protocol)
- One tool, analyze_food_image, backed by an OpenAI vision model
- Legacy {"image": ...} requests answered with the raw nutrition record
- Stateless per request; no auth, caching or persistence
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response

from food_analyzer import __version__
from food_analyzer.config import get_settings
from food_analyzer.api import health, mcp
from food_analyzer.services.vision import VisionService

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting food-analyzer-mcp...")

    if not settings.vision_configured:
        logger.warning("OPENAI_API_KEY not set - food analysis calls will fail")

    vision_service = VisionService.from_settings(settings)
    app.state.vision_service = vision_service
    logger.info("Vision service ready (model=%s)", settings.vision_model)

    yield

    logger.info("Shutting down food-analyzer-mcp...")
    await vision_service.close()


app = FastAPI(
    title="food-analyzer-mcp",
    description="MCP server for food image nutrition analysis",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def cors(request: Request, call_next):
    """Allow any origin. OPTIONS is answered here without touching the routers."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=PREFLIGHT_HEADERS)

    response = await call_next(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.server_name,
        "version": settings.server_version,
        "description": "MCP server for food image nutrition analysis",
        "protocol": "MCP (JSON-RPC 2.0) via POST",
        "tools": ["analyze_food_image"],
        "endpoints": {
            "mcp": "POST /",
            "health": "/health",
        },
    }


# Include routers; the MCP catch-all goes last
app.include_router(health.router, tags=["health"])
app.include_router(mcp.router, tags=["mcp"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "food_analyzer.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
    )
