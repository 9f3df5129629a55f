"""In-memory stand-in for the Strava API, plugged in as the requests.Session of HttpClient."""

from __future__ import annotations

import json
from typing import Any, Callable
from urllib.parse import urlsplit

from strava_config.settings import Settings
from strava_mcp.connectors.strava import StravaClient
from strava_mcp.core_infrastructure.http_client import HttpClient, HttpClientConfig


BASE_URL = "https://strava.test/api/v3"
TOKEN = "test-token"


class FakeResp:
    def __init__(self, payload: Any = None, status_code: int = 200, *, text: str | None = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Records every request; answers from a path -> response (or callable) table."""

    def __init__(self, routes: dict[str, FakeResp | Callable[[dict], FakeResp] | Exception] | None = None):
        self.headers: dict[str, str] = {}
        self.routes = dict(routes or {})
        self.calls: list[dict] = []
        self.closed = False

    def request(self, method, url, headers=None, params=None, timeout=None, **kwargs):
        path = urlsplit(url).path
        if path.startswith(urlsplit(BASE_URL).path):
            path = path[len(urlsplit(BASE_URL).path):]
        call = {
            "method": method,
            "url": url,
            "path": path,
            "params": dict(params or {}),
            "headers": dict(headers or {}),
            "timeout": timeout,
        }
        self.calls.append(call)

        route = self.routes.get(path)
        if route is None:
            return FakeResp({"message": "Record Not Found"}, 404, reason="Not Found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(call)
        return route

    def close(self):
        self.closed = True

    @property
    def paths(self) -> list[str]:
        return [c["path"] for c in self.calls]


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"access_token": TOKEN, "base_url": BASE_URL}
    values.update(overrides)
    return Settings(**values)


def make_client(session: FakeSession, **overrides: Any) -> StravaClient:
    settings = make_settings(**overrides)
    http = HttpClient(
        config=HttpClientConfig(timeout=settings.timeout, user_agent=settings.user_agent),
        session=session,  # type: ignore[arg-type]
    )
    return StravaClient(settings, http=http)


ATHLETE = {"id": 1234, "username": "rider", "firstname": "Ada", "lastname": "L"}
ACTIVITIES = [
    {"id": 11, "name": "Morning Ride", "type": "Ride", "distance": 24010.3},
    {"id": 12, "name": "Lunch Run", "type": "Run", "distance": 5012.0},
]
ACTIVITY = {"id": 11, "name": "Morning Ride", "type": "Ride", "segment_efforts": []}
STATS = {"biggest_ride_distance": 120400.0, "all_ride_totals": {"count": 210}}


def default_routes() -> dict[str, FakeResp]:
    return {
        "/athlete": FakeResp(ATHLETE),
        "/athlete/activities": FakeResp(ACTIVITIES),
        "/activities/11": FakeResp(ACTIVITY),
        "/athletes/1234/stats": FakeResp(STATS),
        "/athletes/42/stats": FakeResp({**STATS, "athlete": 42}),
    }


__all__ = [
    "ACTIVITIES",
    "ACTIVITY",
    "ATHLETE",
    "BASE_URL",
    "FakeResp",
    "FakeSession",
    "STATS",
    "TOKEN",
    "default_routes",
    "make_client",
    "make_settings",
]
