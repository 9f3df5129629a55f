from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from strava_common.errors import MissingCredential


DEFAULT_BASE_URL = "https://www.strava.com/api/v3"
DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CONNECT_TIMEOUT_S = 3.05
DEFAULT_READ_TIMEOUT_S = 30.0
SERVER_VERSION = "0.2.0"


def _find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward until we find pyproject.toml or .git.
    """
    start = start.resolve()
    for p in (start, *start.parents):
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return None


@lru_cache(maxsize=1)
def repo_root() -> Path:
    """Best-effort repository root discovery.

    Order of precedence:
      1) STRAVA_REPO_ROOT (explicit override)
      2) walk upward from current working directory
      3) walk upward from this module file's directory
    """
    explicit = os.getenv("STRAVA_REPO_ROOT")
    if explicit:
        p = Path(explicit).expanduser().resolve()
        if not p.is_dir():
            raise RuntimeError(f"STRAVA_REPO_ROOT does not exist or is not a directory: {p}")
        return p

    cwd = Path.cwd().resolve()
    root = _find_repo_root(cwd)
    if root:
        return root

    here_dir = Path(__file__).resolve().parent
    root = _find_repo_root(here_dir)
    if root:
        return root

    return cwd


@lru_cache(maxsize=1)
def load_env_once() -> Optional[Path]:
    """
    Load dotenv exactly once. Precedence:
      1) STRAVA_ENV_FILE (explicit path)
      2) repo-root/.env
      3) repo-root/config/.env
    """
    explicit = os.getenv("STRAVA_ENV_FILE")
    candidates = []

    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(repo_root() / ".env")
    candidates.append(repo_root() / "config" / ".env")

    for p in candidates:
        p = p.resolve()
        if p.is_file():
            # Do NOT override already-set environment variables
            load_dotenv(dotenv_path=str(p), override=False)
            return p

    return None


def telemetry_dir() -> Path:
    """
    Default telemetry dir. Override with STRAVA_TELEMETRY_DIR.
    """
    p = os.getenv("STRAVA_TELEMETRY_DIR")
    if p:
        return Path(p).expanduser().resolve()
    return (repo_root() / "artifacts" / "telemetry").resolve()


def configure_logging() -> None:
    """
    Configure logging explicitly. No import-time side effects.
    Idempotent: if logging is already configured, do nothing.

    Output goes to stderr; stdout belongs to the stdio transport.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.getenv("STRAVA_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = os.getenv(
        "STRAVA_LOG_FORMAT",
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.basicConfig(level=level, format=fmt)


def init_runtime(*, configure_logs: bool = True, load_env: bool = True) -> None:
    """
    Call this from entrypoints only (servers, scripts).
    """
    if load_env:
        load_env_once()
    if configure_logs:
        configure_logging()


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    try:
        return float(env.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    try:
        return int(env.get(name, default))
    except (TypeError, ValueError):
        return default


def _strip_bearer_prefix(token: str | None) -> str:
    if not token:
        return ""
    t = token.strip()
    if t.lower().startswith("bearer "):
        return t.split(None, 1)[1].strip()
    return t


@dataclass(frozen=True)
class Settings:
    access_token: str
    base_url: str = DEFAULT_BASE_URL
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_S
    read_timeout: float = DEFAULT_READ_TIMEOUT_S
    user_agent: str = f"strava-mcp-server/{SERVER_VERSION}"

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)

    def __repr__(self) -> str:
        return (
            f"Settings(access_token='***redacted***', base_url={self.base_url!r}, "
            f"port={self.port}, host={self.host!r})"
        )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Raises MissingCredential when STRAVA_ACCESS_TOKEN is absent or blank.
    """
    env = os.environ if environ is None else environ

    token = _strip_bearer_prefix(env.get("STRAVA_ACCESS_TOKEN"))
    if not token:
        raise MissingCredential("STRAVA_ACCESS_TOKEN environment variable is required")

    return Settings(
        access_token=token,
        base_url=(env.get("STRAVA_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        port=_env_int(env, "PORT", DEFAULT_PORT),
        host=env.get("HOST") or DEFAULT_HOST,
        connect_timeout=_env_float(env, "STRAVA_HTTP_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT_S),
        read_timeout=_env_float(env, "STRAVA_HTTP_READ_TIMEOUT", DEFAULT_READ_TIMEOUT_S),
        user_agent=env.get("STRAVA_HTTP_USER_AGENT") or f"strava-mcp-server/{SERVER_VERSION}",
    )
