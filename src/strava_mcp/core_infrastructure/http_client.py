"""
Thin shared HTTP client over `requests.Session`.

- One place for timeouts, the User-Agent and failure logging.
- No retries: a failed upstream call surfaces to the caller as-is.
- No framework coupling (Flask/MCP).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

import requests
from requests import Response


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpClientConfig:
    timeout: tuple[float, float] = (3.05, 30.0)
    user_agent: str = "strava-mcp-server"


class HttpClient:
    """A small wrapper around `requests.Session` with sane defaults."""

    def __init__(self, *, config: HttpClientConfig | None = None, session: requests.Session | None = None) -> None:
        self.config = config or HttpClientConfig()
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", self.config.user_agent)

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: tuple[float, float] | float | None = None,
    ) -> Response:
        """Perform an HTTP request. Non-2xx responses are returned, not raised."""
        t0 = time.perf_counter()
        try:
            resp = self.session.request(
                method=method,
                url=url,
                headers=dict(headers) if headers else None,
                params=dict(params) if params else None,
                timeout=timeout or self.config.timeout,
            )
        except requests.RequestException as e:
            ms = int((time.perf_counter() - t0) * 1000)
            logger.warning("HTTP %s %s failed (ms=%s): %s", method.upper(), url, ms, e)
            raise

        ms = int((time.perf_counter() - t0) * 1000)
        if resp.ok:
            logger.debug("HTTP %s %s -> %s (ms=%s)", method.upper(), url, resp.status_code, ms)
        else:
            logger.warning("HTTP %s %s -> %s (ms=%s)", method.upper(), url, resp.status_code, ms)
        return resp

    def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: tuple[float, float] | float | None = None,
    ) -> Response:
        return self.request("GET", url, headers=headers, params=params, timeout=timeout)

    def close(self) -> None:
        self.session.close()
