"""Tests for free-text job extraction."""

import json
from unittest.mock import MagicMock

import pytest

from job_publisher.errors import QuotaExceededError
from job_publisher.services.llm import MessageParser, ModelCandidate


@pytest.fixture
def provider():
    return MagicMock()


@pytest.fixture
def parser(provider):
    return MessageParser(ModelCandidate("openrouter", "google/gemini-2.0-flash-001"), {"openrouter": provider})


@pytest.mark.asyncio
async def test_parses_json_object(parser, provider):
    provider.complete.return_value = "```json\n" + json.dumps(
        {
            "title": "React Developer",
            "location": "Dubai",
            "requirements": "3 years",
            "company": None,
            "applyEmail": "jobs@tech.com",
        }
    ) + "\n```"

    job = await parser.parse("We need a React Dev in Dubai. 3yrs exp. jobs@tech.com")

    assert job.title == "React Developer"
    assert job.apply_email == "jobs@tech.com"
    assert job.company == "Confidential"
    provider.complete.assert_called_once()
    assert provider.complete.call_args.args[2] is True


@pytest.mark.asyncio
async def test_invalid_json_returns_none(parser, provider):
    provider.complete.return_value = "Sorry, I can't help with that."
    assert await parser.parse("hello") is None


@pytest.mark.asyncio
async def test_non_object_returns_none(parser, provider):
    provider.complete.return_value = "[1, 2]"
    assert await parser.parse("hello") is None


@pytest.mark.asyncio
async def test_provider_error_returns_none(parser, provider):
    provider.complete.side_effect = QuotaExceededError("quota", 429)
    assert await parser.parse("hello") is None
