"""Tests for the Blogger OAuth helper."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from job_publisher.tools import auth_helper


@pytest.fixture
def flow():
    mock = MagicMock()
    mock.authorization_url.return_value = ("https://accounts.google.com/o/oauth2/auth?client_id=x", "state")
    mock.credentials.refresh_token = "1//refresh"
    return mock


def test_root_redirects_to_consent(flow):
    client = TestClient(auth_helper.create_auth_app(flow))
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"].startswith("https://accounts.google.com/")
    flow.authorization_url.assert_called_once_with(access_type="offline", prompt="consent")


def test_callback_prints_refresh_token(flow, capsys):
    on_token = MagicMock()
    client = TestClient(auth_helper.create_auth_app(flow, on_token=on_token))

    response = client.get("/oauth2callback", params={"code": "auth-code"})

    assert response.status_code == 200
    assert "Authentication successful!" in response.text
    flow.fetch_token.assert_called_once_with(code="auth-code")
    on_token.assert_called_once_with("1//refresh")
    assert "REFRESH_TOKEN: 1//refresh" in capsys.readouterr().out


def test_callback_error(flow):
    flow.fetch_token.side_effect = ValueError("invalid_grant")
    on_token = MagicMock()
    client = TestClient(auth_helper.create_auth_app(flow, on_token=on_token))

    response = client.get("/oauth2callback", params={"code": "stale"})

    assert response.status_code == 400
    assert "invalid_grant" in response.text
    on_token.assert_not_called()


def test_build_flow_uses_local_redirect(settings):
    flow = auth_helper.build_flow(settings, 3000)
    assert flow.redirect_uri == "http://localhost:3000/oauth2callback"
    assert flow.client_config["client_id"] == "client-id"


def test_main_requires_client_credentials(settings):
    settings.google_client_secret = ""
    with patch.object(auth_helper, "get_settings", return_value=settings), patch.object(
        auth_helper.uvicorn, "Server"
    ) as server:
        assert auth_helper.main() == 1
    server.assert_not_called()
