from __future__ import annotations

import datetime as _dt
import json
import logging
import os
from typing import Any

from strava_config.settings import telemetry_dir
from strava_common.context import current_request_id
from strava_common.errors import REDACT_TOKEN


logger = logging.getLogger(__name__)

TELEMETRY_FILE = "mcp-telemetry.jsonl"

_SECRET_KEYS = {"authorization", "access_token", "refresh_token", "token", "client_secret", "api_key"}


def telemetry_disabled() -> bool:
    return os.getenv("STRAVA_DISABLE_TELEMETRY", "0").strip().lower() in {"1", "true", "yes"}


def redact_secrets(obj: Any) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in _SECRET_KEYS:
                if isinstance(v, str) and v.strip().lower().startswith("bearer "):
                    out[k] = "Bearer " + REDACT_TOKEN
                else:
                    out[k] = REDACT_TOKEN
            else:
                out[k] = redact_secrets(v)
        return out
    if isinstance(obj, list):
        return [redact_secrets(x) for x in obj]
    return obj


def log_event(
    kind: str,
    name: str,
    args: dict | None = None,
    ok: bool = True,
    ms: int = 0,
    *,
    client_id: str | None = None,
    corr_id: str | None = None,
    error: str | None = None,
) -> None:
    """
    Append one JSONL telemetry record for a tool invocation.

    Failing to write is logged, never raised: telemetry must not break a tool call.
    """
    if telemetry_disabled():
        return

    rid = current_request_id()
    rec: dict[str, Any] = {
        "ts": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "name": name,
        "client_id": client_id,
        "request_id": rid,
        "corr_id": corr_id or rid,
        "args": {} if args is None else dict(args),
        "ok": bool(ok),
        "ms": int(ms),
    }
    if error:
        rec["error"] = error

    try:
        d = telemetry_dir()
        d.mkdir(parents=True, exist_ok=True)
        with (d / TELEMETRY_FILE).open("a", encoding="utf-8") as f:
            f.write(json.dumps(redact_secrets(rec), ensure_ascii=False, default=str) + "\n")
    except OSError as e:
        logger.warning("Could not write telemetry for %s: %s", name, e)

