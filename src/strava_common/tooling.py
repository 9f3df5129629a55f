from __future__ import annotations

import functools
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, TypeVar

from strava_common import telemetry
from strava_common.errors import REDACT_TOKEN


logger = logging.getLogger(__name__)

T = TypeVar("T")

_REDACTION_KEYS = {"authorization", "token", "access_token", "refresh_token", "client_secret"}


def sanitize_args_for_log(args: Mapping[str, Any] | None) -> dict:
    """Remove obvious secrets from args (telemetry layer also redacts)."""
    out: dict[str, Any] = {}
    for k, v in (args or {}).items():
        out[str(k)] = REDACT_TOKEN if str(k).lower() in _REDACTION_KEYS else v
    return out


@dataclass(frozen=True)
class InstrumentConfig:
    kind: str
    name: str
    client_id: str
    corr_id: str | None = None


def instrument_sync_tool(cfg: InstrumentConfig):
    """Decorator timing a tool handler and recording one telemetry event per call.

    Wrapped handlers take (client, arguments); the arguments mapping is what gets
    logged. Exceptions are recorded and re-raised.
    """

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(client: Any, arguments: Mapping[str, Any], *rest: Any, **kwargs: Any) -> T:
            t0 = time.perf_counter()
            args_for_log = sanitize_args_for_log(arguments)
            try:
                result = fn(client, arguments, *rest, **kwargs)
            except Exception as e:
                ms = int((time.perf_counter() - t0) * 1000)
                logger.info("tool %s failed after %sms: %s", cfg.name, ms, e)
                telemetry.log_event(
                    cfg.kind, cfg.name, args_for_log, ok=False, ms=ms, client_id=cfg.client_id, corr_id=cfg.corr_id, error=str(e)
                )
                raise

            ms = int((time.perf_counter() - t0) * 1000)
            logger.debug("tool %s ok in %sms", cfg.name, ms)
            telemetry.log_event(cfg.kind, cfg.name, args_for_log, ok=True, ms=ms, client_id=cfg.client_id, corr_id=cfg.corr_id)
            return result

        return wrapper

    return decorator
