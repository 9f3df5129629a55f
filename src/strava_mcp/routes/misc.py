from __future__ import annotations

from flask import Blueprint

from ..http import json_response


SERVICE_NAME = "Strava MCP Server"


def make_misc_blueprint(*, version: str) -> Blueprint:
    bp = Blueprint("misc", __name__)

    @bp.get("/")
    def health():
        return json_response(
            {
                "status": "ok",
                "service": SERVICE_NAME,
                "version": version,
                "endpoints": {
                    "health": "/",
                    "tools": "/mcp/tools",
                    "execute": "/mcp/tools/:toolName",
                },
            }
        )

    return bp
