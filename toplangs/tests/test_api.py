"""
toplangs/tests/test_api.py — Tests for the FastAPI surface.

Skipped when fastapi (optional 'api' extra) is not installed. The GraphQL
transport is replaced by a FakeClient through create_app(client_factory=...).
"""

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient  # noqa: E402

from toplangs.api.endpoints import create_app  # noqa: E402
from toplangs.errors import TransportError  # noqa: E402


@pytest.fixture
def make_client(fake_client, recorded_sleep):
    def _make(*outcomes, token="t"):
        transport = fake_client(*outcomes)
        app = create_app(
            token_fn=lambda: token,
            client_factory=lambda _token: transport,
            sleep=recorded_sleep,
        )
        return TestClient(app), transport
    return _make


def test_health(make_client):
    client, _ = make_client([])
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_top_langs_svg(make_client, repo_nodes):
    client, transport = make_client(repo_nodes)
    response = client.get(
        "/api/top-langs",
        params={"username": "octocat", "layout": "compact", "hide": "go,shell", "cache_seconds": "60"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.headers["cache-control"].startswith("max-age=172800, s-maxage=172800")
    assert "Python 70.00%" in response.text
    assert "Shell" not in response.text
    assert transport.calls == ["octocat"]


def test_top_langs_boolean_flags(make_client, repo_nodes):
    client, _ = make_client(repo_nodes)
    response = client.get(
        "/api/top-langs",
        params={"username": "octocat", "hide_title": "true", "disable_animations": "true"},
    )
    assert 'data-testid="header"' not in response.text
    assert "animation-duration: 0s" in response.text


def test_missing_username_is_error_card(make_client):
    client, transport = make_client([])
    response = client.get("/api/top-langs")
    assert response.status_code == 200
    assert "Something went wrong!" in response.text
    assert "Missing params" in response.text
    assert transport.calls == []


def test_missing_token_is_error_card(make_client):
    client, _ = make_client([], token=None)
    response = client.get("/api/top-langs", params={"username": "octocat"})
    assert "GitHub token not found." in response.text


def test_transport_failure_is_short_lived_error_card(make_client):
    client, transport = make_client(TransportError("reset"))
    response = client.get("/api/top-langs", params={"username": "octocat"})
    assert "Request failed after 4 attempts" in response.text
    assert response.headers["cache-control"] == (
        "max-age=600, s-maxage=600, stale-while-revalidate=600"
    )
    assert len(transport.calls) == 4
