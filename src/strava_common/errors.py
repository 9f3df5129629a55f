from __future__ import annotations

REDACT_TOKEN = "***redacted***"


class StravaMCPError(Exception):
    """Base class for errors raised while serving a tool invocation."""


class MissingCredential(StravaMCPError):
    """No access token configured. Fatal at startup."""


class UnknownTool(StravaMCPError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class MissingArgument(StravaMCPError):
    def __init__(self, argument: str) -> None:
        super().__init__(f"Missing required argument: {argument}")
        self.argument = argument


class UpstreamError(StravaMCPError):
    """
    Strava API failure: non-2xx status, transport failure or a body that is not JSON.

    `status` is None when no HTTP response was received.
    """

    def __init__(self, message: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body
