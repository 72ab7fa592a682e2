"""Tests for the bot status web app."""

import logging

import pytest
from fastapi.testclient import TestClient

from job_publisher.bot.status import BotStatus
from job_publisher.bot.web import create_status_app
from job_publisher.logging_config import MetricsLogger


@pytest.fixture
def status():
    return BotStatus()


@pytest.fixture
def client(status):
    return TestClient(create_status_app(status, MetricsLogger(logging.getLogger("web_test"))))


def test_index_running(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Bot is running!" in response.text


def test_index_shows_escaped_error(client, status):
    status.failed("Initialization Error: <browser> crashed")
    response = client.get("/")
    assert response.status_code == 500
    assert "&lt;browser&gt; crashed" in response.text


def test_qr_page_before_code(client):
    assert "Bot is Starting" in client.get("/qr").text


def test_qr_page_shows_code(client, status):
    status.qr_received("2@abc,def==")
    response = client.get("/qr")
    assert response.status_code == 200
    assert "Scan with WhatsApp" in response.text
    assert "data=2%40abc%2Cdef%3D%3D" in response.text
    assert status.qr_time in response.text


def test_qr_page_after_login(client, status):
    status.authenticated()
    assert "WhatsApp is linked" in client.get("/qr").text


def test_qr_page_error(client, status):
    status.failed("Uncaught Exception:\nTimeoutError")
    response = client.get("/qr")
    assert response.status_code == 500
    assert "Bot Failed to Start" in response.text


def test_health(client, status):
    status.authenticated()
    status.ready()
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["bot"]["state"] == "ready"
    assert "rss_mb" in data["metrics"]
    assert "memory_percent" in data["system"]


def test_health_unhealthy_after_failure(client, status):
    status.failed("boom")
    assert client.get("/health").json()["status"] == "unhealthy"
