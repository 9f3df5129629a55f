"""Request id bookkeeping shared by both transports."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_request_id: ContextVar[str | None] = ContextVar("strava_request_id", default=None)


def new_request_id() -> str:
    return uuid.uuid4().hex


def current_request_id() -> str | None:
    return _request_id.get()


@contextmanager
def request_scope(rid: str | None = None) -> Iterator[str]:
    """Bind a request id for the duration of one tool invocation.

    An empty or missing id gets a fresh one. The previous id is restored on exit.
    """
    rid = (rid or "").strip() or new_request_id()
    token = _request_id.set(rid)
    try:
        yield rid
    finally:
        _request_id.reset(token)
