import logging
from typing import Any, Mapping

import requests

from strava_common.errors import UpstreamError
from strava_config.settings import Settings
from strava_mcp.core_infrastructure.http_client import HttpClient, HttpClientConfig


logger = logging.getLogger(__name__)


def _query_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop None values and stringify the rest the way the Strava API expects."""
    out: dict[str, str] = {}
    for k, v in (params or {}).items():
        if v is None:
            continue
        if isinstance(v, bool):
            out[str(k)] = "true" if v else "false"
        else:
            out[str(k)] = str(v)
    return out


class StravaClient:
    """Authenticated GET access to the Strava API v3.

    Every call goes upstream; nothing is cached or retried.
    """

    def __init__(self, settings: Settings, *, http: HttpClient | None = None) -> None:
        self.base_url = settings.base_url.rstrip("/")
        self._token = settings.access_token
        self._timeout = settings.timeout
        self._user_agent = settings.user_agent
        self.http = http or HttpClient(
            config=HttpClientConfig(timeout=settings.timeout, user_agent=settings.user_agent)
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
            "User-Agent": self._user_agent,
        }

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def call(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET `path` below the API base and return the decoded JSON body.

        Raises UpstreamError for transport failures, non-2xx statuses and non-JSON bodies.
        """
        url = self.url_for(path)
        try:
            resp = self.http.get(url, headers=self._headers(), params=_query_params(params), timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Strava API request failed: {e}") from e

        if not resp.ok:
            body = resp.text or ""
            status_line = f"{resp.status_code} {resp.reason or ''}".strip()
            raise UpstreamError(
                f"Strava API error: {status_line}: {body}",
                status=resp.status_code,
                body=body,
            )

        try:
            return resp.json()
        except ValueError as e:
            logger.warning("Strava API returned a non-JSON body for %s", url)
            raise UpstreamError(
                f"Strava API returned malformed JSON: {e}",
                status=resp.status_code,
                body=resp.text or "",
            ) from e

    def get_athlete(self) -> Any:
        return self.call("/athlete")

    def list_activities(
        self,
        *,
        before: int | None = None,
        after: int | None = None,
        page: int | None = None,
        per_page: int | None = None,
    ) -> Any:
        return self.call(
            "/athlete/activities",
            {"before": before, "after": after, "page": page, "per_page": per_page},
        )

    def get_activity(self, activity_id: str | int, *, include_all_efforts: bool | None = None) -> Any:
        return self.call(f"/activities/{activity_id}", {"include_all_efforts": include_all_efforts})

    def get_athlete_stats(self, athlete_id: str | int) -> Any:
        return self.call(f"/athletes/{athlete_id}/stats")
