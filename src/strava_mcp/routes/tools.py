from __future__ import annotations

import logging

from flask import Blueprint, g, request

from strava_common.errors import StravaMCPError, UnknownTool

from ..connectors.strava import StravaClient
from ..http import api_error, json_response
from ..registry import TOOLS, get_http_tool, invoke


logger = logging.getLogger(__name__)

HTTP_CLIENT_ID = "http"


def _request_arguments() -> dict:
    """Body as a JSON object; anything else (empty, invalid, non-object) counts as {}."""
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def make_tools_blueprint(*, client: StravaClient) -> Blueprint:
    bp = Blueprint("tools", __name__)

    @bp.get("/mcp/tools")
    def list_tools():
        return json_response({"tools": [t.http_listing() for t in TOOLS]})

    @bp.post("/mcp/tools/<tool_name>")
    def call_tool(tool_name: str):
        arguments = _request_arguments()
        try:
            tool = get_http_tool(tool_name)
            result = invoke(
                tool,
                arguments,
                client,
                client_id=HTTP_CLIENT_ID,
                request_id=getattr(g, "request_id", None),
                corr_id=request.headers.get("X-Correlation-Id"),
            )
        except UnknownTool as e:
            return api_error(str(e), status=404)
        except StravaMCPError as e:
            logger.warning("[rid=%s] %s failed: %s", getattr(g, "request_id", "-"), tool_name, e)
            return api_error(str(e), status=500)
        except Exception as e:
            logger.exception("[rid=%s] Unexpected error in %s", getattr(g, "request_id", "-"), tool_name)
            return api_error(str(e) or "Unknown error", status=500)

        return json_response({"result": result})

    return bp
