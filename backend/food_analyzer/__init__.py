"""food-analyzer-mcp: MCP server exposing food photo nutrition analysis.

Run with: uvicorn food_analyzer.main:app --reload
"""

__version__ = "1.0.0"
