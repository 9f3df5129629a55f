"""Pytest configuration and shared fixtures."""
import os
import sys

import pytest

# Ensure project root (for `tests.helpers`) and src/ (for the packages) are importable
# without an editable install.
ROOT = os.path.dirname(os.path.abspath(__file__))
for p in (ROOT, os.path.join(ROOT, "src")):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep telemetry out of the repo and make sure no real token leaks into tests."""
    monkeypatch.setenv("STRAVA_TELEMETRY_DIR", str(tmp_path / "telemetry"))
    monkeypatch.delenv("STRAVA_DISABLE_TELEMETRY", raising=False)
    monkeypatch.delenv("STRAVA_ACCESS_TOKEN", raising=False)


@pytest.fixture()
def fake_session():
    from tests.helpers.fake_strava import FakeSession, default_routes

    return FakeSession(default_routes())


@pytest.fixture()
def strava_client(fake_session):
    from tests.helpers.fake_strava import make_client

    return make_client(fake_session)


@pytest.fixture()
def app(strava_client):
    """Flask app wired to the fake upstream."""
    from strava_mcp.http_app import create_app
    from tests.helpers.fake_strava import make_settings

    _app = create_app(make_settings(), client=strava_client)
    _app.config["TESTING"] = True
    return _app


@pytest.fixture()
def client(app):
    """A Flask test client for the app."""
    with app.test_client() as c:
        yield c
