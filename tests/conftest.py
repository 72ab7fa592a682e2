"""Test configuration and fixtures."""

import os
import tempfile
from unittest.mock import AsyncMock

import pytest

# Loggers are created at import time, so point them at a scratch directory first
TEST_LOG_DIR = tempfile.mkdtemp(prefix="job_publisher_test_logs_")
os.environ["LOG_DIR"] = TEST_LOG_DIR

from job_publisher.config import Settings  # noqa: E402
from job_publisher.models import GeneratedPost, JobFields  # noqa: E402


@pytest.fixture
def settings():
    """Settings with every credential filled in and no .env lookup."""
    return Settings(
        _env_file=None,
        google_client_id="client-id",
        google_client_secret="client-secret",
        google_refresh_token="refresh-token",
        blog_id="blog-123",
        gemini_api_key="gemini-key",
        openrouter_api_key="openrouter-key",
        content_models="openrouter:google/gemini-2.0-flash-001,gemini:gemini-2.0-flash",
        parser_model="openrouter:google/gemini-2.0-flash-001",
        batch_delay_seconds=2.0,
        port=3000,
    )


@pytest.fixture
def job():
    return JobFields(
        title="Backend Engineer",
        location="Remote",
        requirements="3+ years Python",
        company="Acme",
        labels=["Jobs", "Tech"],
    )


@pytest.fixture
def post():
    return GeneratedPost(
        id="111",
        title="Backend Engineer - Remote",
        url="https://blog.example.com/backend-engineer",
        status="DRAFT",
    )


@pytest.fixture
def generator():
    mock = AsyncMock()
    mock.generate.return_value = "<h1>Backend Engineer</h1>"
    return mock


@pytest.fixture
def store(post):
    mock = AsyncMock()
    mock.create.return_value = post
    mock.get.return_value = post
    mock.update.return_value = post
    mock.list.return_value = [post]
    mock.delete.return_value = True
    return mock
