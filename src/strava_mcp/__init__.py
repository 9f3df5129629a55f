"""Strava API v3 exposed as MCP tools.

Two transports share one tool registry: `strava_mcp.server` (MCP over stdio)
and `strava_mcp.http_app` (JSON over HTTP, Flask).
"""
