from __future__ import annotations

from typing import Any

from flask import Response, jsonify


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def add_cors_headers(resp: Response) -> Response:
    for k, v in CORS_HEADERS.items():
        resp.headers[k] = v
    return resp


def json_response(payload: Any, *, status: int = 200) -> Response:
    resp = jsonify(payload)
    resp.status_code = status
    return add_cors_headers(resp)


def api_error(message: str, *, status: int = 500) -> Response:
    """Error envelope used by every HTTP endpoint: {"error": "<message>"}."""
    return json_response({"error": message}, status=status)
