import logging
import os

import pytest

from strava_common.errors import MissingCredential
from strava_config import settings as S


def test_missing_token_raises():
    with pytest.raises(MissingCredential) as ei:
        S.load_settings({})
    assert "STRAVA_ACCESS_TOKEN" in str(ei.value)


def test_blank_token_raises():
    with pytest.raises(MissingCredential):
        S.load_settings({"STRAVA_ACCESS_TOKEN": "   "})


def test_defaults():
    s = S.load_settings({"STRAVA_ACCESS_TOKEN": "abc"})
    assert s.access_token == "abc"
    assert s.base_url == "https://www.strava.com/api/v3"
    assert s.port == 8080
    assert s.timeout == (S.DEFAULT_CONNECT_TIMEOUT_S, S.DEFAULT_READ_TIMEOUT_S)


def test_overrides_and_bearer_prefix():
    s = S.load_settings(
        {
            "STRAVA_ACCESS_TOKEN": "Bearer xyz",
            "PORT": "9001",
            "STRAVA_API_BASE_URL": "http://localhost:5000/api/v3/",
            "STRAVA_HTTP_READ_TIMEOUT": "5",
        }
    )
    assert s.access_token == "xyz"
    assert s.port == 9001
    assert s.base_url == "http://localhost:5000/api/v3"
    assert s.read_timeout == 5.0


def test_bad_numbers_fall_back_to_defaults():
    s = S.load_settings({"STRAVA_ACCESS_TOKEN": "abc", "PORT": "eighty", "STRAVA_HTTP_CONNECT_TIMEOUT": ""})
    assert s.port == 8080
    assert s.connect_timeout == S.DEFAULT_CONNECT_TIMEOUT_S


def test_repr_hides_token():
    s = S.load_settings({"STRAVA_ACCESS_TOKEN": "super-secret"})
    assert "super-secret" not in repr(s)


def test_load_settings_reads_process_env(monkeypatch):
    monkeypatch.setenv("STRAVA_ACCESS_TOKEN", "from-env")
    assert S.load_settings().access_token == "from-env"


def test_load_env_once_does_not_override(tmp_path, monkeypatch):
    env_file = tmp_path / "custom.env"
    env_file.write_text("STRAVA_ACCESS_TOKEN=from-file\nSTRAVA_TEST_ONLY=1\n", encoding="utf-8")
    monkeypatch.setenv("STRAVA_ENV_FILE", str(env_file))
    monkeypatch.setenv("STRAVA_ACCESS_TOKEN", "already-set")
    monkeypatch.delenv("STRAVA_TEST_ONLY", raising=False)
    S.load_env_once.cache_clear()
    try:
        assert S.load_env_once() == env_file.resolve()
        assert os.environ["STRAVA_ACCESS_TOKEN"] == "already-set"
        assert os.environ["STRAVA_TEST_ONLY"] == "1"
    finally:
        S.load_env_once.cache_clear()
        os.environ.pop("STRAVA_TEST_ONLY", None)


def test_configure_logging_is_idempotent(monkeypatch):
    root = logging.getLogger()
    sentinel = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [sentinel])
    S.configure_logging()
    assert root.handlers == [sentinel]
