"""Strava API v3 connector."""

from strava_mcp.connectors.strava.client import StravaClient

__all__ = ["StravaClient"]
