"""
Tool registry shared by the HTTP and stdio servers.

Each tool is declared once: its MCP name, its HTTP path segment, its parameters
and a handler `(client, arguments) -> JSON`. The transports only differ in how
they list tools and wrap results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from strava_common.context import request_scope
from strava_common.errors import MissingArgument, UnknownTool, UpstreamError
from strava_common.tooling import InstrumentConfig, instrument_sync_tool
from strava_mcp.connectors.strava import StravaClient


# Strava's own default page size; used by both transports.
DEFAULT_PER_PAGE = 30

Handler = Callable[[StravaClient, Mapping[str, Any]], Any]


@dataclass(frozen=True)
class ToolParam:
    name: str
    type: str
    description: str
    required: bool = False
    default: Any = None


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    http_name: str
    description: str
    handler: Handler
    params: tuple[ToolParam, ...] = field(default_factory=tuple)

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    def input_schema(self) -> dict[str, Any]:
        """JSON schema for the MCP `tools/list` response."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: {"type": p.type, "description": p.description} for p in self.params},
        }
        if self.required:
            schema["required"] = self.required
        return schema

    def http_listing(self) -> dict[str, Any]:
        """Entry for `GET /mcp/tools`."""
        entry: dict[str, Any] = {
            "name": self.http_name,
            "description": self.description,
            "method": "POST",
            "endpoint": f"/mcp/tools/{self.http_name}",
        }
        if self.params:
            parameters = {}
            for p in self.params:
                spec: dict[str, Any] = {"type": p.type, "optional": not p.required}
                if p.default is not None:
                    spec["default"] = p.default
                parameters[p.name] = spec
            entry["parameters"] = parameters
        return entry


def _get_athlete_profile(client: StravaClient, arguments: Mapping[str, Any]) -> Any:
    return client.get_athlete()


def _get_athlete_activities(client: StravaClient, arguments: Mapping[str, Any]) -> Any:
    return client.list_activities(
        before=arguments.get("before"),
        after=arguments.get("after"),
        page=arguments.get("page"),
        per_page=arguments.get("per_page") or DEFAULT_PER_PAGE,
    )


def _get_activity_details(client: StravaClient, arguments: Mapping[str, Any]) -> Any:
    activity_id = arguments.get("activity_id")
    if activity_id is None or str(activity_id).strip() == "":
        raise MissingArgument("activity_id")
    return client.get_activity(
        str(activity_id).strip(),
        include_all_efforts=arguments.get("include_all_efforts"),
    )


def _get_athlete_stats(client: StravaClient, arguments: Mapping[str, Any]) -> Any:
    athlete_id = arguments.get("athlete_id")
    if athlete_id is None or str(athlete_id).strip() == "":
        # Stats are only addressable by id; resolve the token's own athlete first.
        athlete = client.get_athlete()
        athlete_id = athlete.get("id") if isinstance(athlete, dict) else None
        if athlete_id is None:
            raise UpstreamError("Strava athlete profile did not include an id")
    return client.get_athlete_stats(str(athlete_id).strip())


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_athlete_profile",
        http_name="get-athlete",
        description="Get the authenticated athlete's profile information",
        handler=_get_athlete_profile,
    ),
    ToolDescriptor(
        name="get_athlete_activities",
        http_name="list-activities",
        description="Get the authenticated athlete's activities",
        handler=_get_athlete_activities,
        params=(
            ToolParam("before", "integer", "Unix timestamp to get activities before"),
            ToolParam("after", "integer", "Unix timestamp to get activities after"),
            ToolParam("page", "integer", "Page number (default: 1)"),
            ToolParam(
                "per_page",
                "integer",
                f"Number of activities per page (default: {DEFAULT_PER_PAGE}, max: 200)",
                default=DEFAULT_PER_PAGE,
            ),
        ),
    ),
    ToolDescriptor(
        name="get_activity_details",
        http_name="get-activity-details",
        description="Get detailed information about a specific activity",
        handler=_get_activity_details,
        params=(
            ToolParam("activity_id", "string", "The ID of the activity", required=True),
            ToolParam("include_all_efforts", "boolean", "Include all segment efforts in the response"),
        ),
    ),
    ToolDescriptor(
        name="get_athlete_stats",
        http_name="get-athlete-stats",
        description="Get the authenticated athlete's statistics",
        handler=_get_athlete_stats,
        params=(
            ToolParam("athlete_id", "string", "The ID of the athlete (use current athlete if not provided)"),
        ),
    ),
)

_BY_NAME = {t.name: t for t in TOOLS}
_BY_HTTP_NAME = {t.http_name: t for t in TOOLS}


def get_tool(name: str) -> ToolDescriptor:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownTool(name) from None


def get_http_tool(http_name: str) -> ToolDescriptor:
    try:
        return _BY_HTTP_NAME[http_name]
    except KeyError:
        raise UnknownTool(http_name) from None


def invoke(
    tool: ToolDescriptor,
    arguments: Mapping[str, Any] | None,
    client: StravaClient,
    *,
    client_id: str,
    request_id: str | None = None,
    corr_id: str | None = None,
) -> Any:
    """Run a tool handler under telemetry. Handler exceptions propagate."""
    cfg = InstrumentConfig(kind="tool", name=tool.name, client_id=client_id, corr_id=corr_id)
    handler = instrument_sync_tool(cfg)(tool.handler)
    with request_scope(request_id):
        return handler(client, dict(arguments or {}))
