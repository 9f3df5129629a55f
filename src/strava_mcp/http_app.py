from __future__ import annotations

import logging
import sys

from flask import Flask, g, request

from strava_common.context import new_request_id
from strava_common.errors import MissingCredential
from strava_config.settings import SERVER_VERSION, Settings, init_runtime, load_settings

from .connectors.strava import StravaClient
from .http import add_cors_headers, api_error, json_response
from .registry import TOOLS
from .routes import make_misc_blueprint, make_tools_blueprint


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, client: StravaClient | None = None) -> Flask:
    """Flask application factory.

    Settings are resolved before the app exists, so a missing access token
    raises MissingCredential here and nothing is ever bound.
    """
    settings = settings or load_settings()
    client = client or StravaClient(settings)

    app = Flask(__name__)
    app.config["STRAVA_SETTINGS"] = settings

    @app.before_request
    def ensure_request_id():
        g.request_id = (
            request.headers.get("X-Request-Id")
            or request.headers.get("X-Correlation-Id")
            or new_request_id()
        )
        # CORS preflight, any path
        if request.method == "OPTIONS":
            return json_response({})
        # Flask answers HEAD from GET routes; only GET, POST and OPTIONS are served
        if request.method == "HEAD":
            return api_error("Not found", status=404)
        return None

    @app.after_request
    def finalize(resp):
        add_cors_headers(resp)
        rid = getattr(g, "request_id", None)
        if rid and "X-Request-Id" not in resp.headers:
            resp.headers["X-Request-Id"] = rid
        return resp

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(_e):
        return api_error("Not found", status=404)

    app.register_blueprint(make_misc_blueprint(version=SERVER_VERSION))
    app.register_blueprint(make_tools_blueprint(client=client))

    return app


def main() -> None:
    init_runtime()
    try:
        settings = load_settings()
    except MissingCredential as e:
        logger.error("%s", e)
        sys.exit(1)

    app = create_app(settings)

    logger.info("Strava MCP Server running on port %s", settings.port)
    logger.info("Available endpoints:")
    logger.info("  GET  / - Health check")
    logger.info("  GET  /mcp/tools - List tools")
    for t in TOOLS:
        logger.info("  POST /mcp/tools/%s - %s", t.http_name, t.description)

    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
