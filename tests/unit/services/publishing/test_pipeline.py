"""Tests for the publish and edit pipelines."""

import logging

import pytest

from job_publisher.errors import GenerationExhausted, StoreError
from job_publisher.models import GeneratedPost, JobFields
from job_publisher.services.publishing import PipelineState, PublishPipeline

PIPELINE_LOGGER = "job_publisher.services.publishing.pipeline"


@pytest.fixture
def messages():
    return []


@pytest.fixture
def pipeline(generator, store, messages):
    return PublishPipeline(generator, store, progress=messages.append)


@pytest.mark.asyncio
async def test_publish_creates_draft_by_default(pipeline, generator, store, job, post):
    result = await pipeline.publish(job)

    assert result.ok
    assert result.post == post
    assert result.history == [
        PipelineState.VALIDATING,
        PipelineState.GENERATING,
        PipelineState.SUBMITTING,
        PipelineState.DONE,
    ]
    generator.generate.assert_awaited_once_with(job)
    store.create.assert_awaited_once_with(
        "Backend Engineer - Remote", "<h1>Backend Engineer</h1>", is_draft=True, labels=["Jobs", "Tech"]
    )


@pytest.mark.asyncio
async def test_publish_flag_makes_post_live(pipeline, store, job, messages):
    await pipeline.publish(job, publish=True, labels=[])
    assert store.create.call_args.kwargs["is_draft"] is False
    assert store.create.call_args.kwargs["labels"] == []
    assert "Post published successfully!" in messages


@pytest.mark.asyncio
async def test_reports_progress(pipeline, job, messages):
    await pipeline.publish(job)
    assert messages[0] == "Generating content for: Backend Engineer in Remote..."
    assert "Post drafted successfully!" in messages
    assert "ID: 111" in messages
    assert "URL: https://blog.example.com/backend-engineer" in messages


@pytest.mark.asyncio
async def test_progress_messages_logged_at_debug_with_callback(pipeline, job, caplog):
    caplog.set_level(logging.DEBUG, logger=PIPELINE_LOGGER)
    await pipeline.publish(job)
    levels = {r.getMessage(): r.levelno for r in caplog.records if r.name == PIPELINE_LOGGER}
    assert levels["Post drafted successfully!"] == logging.DEBUG


@pytest.mark.asyncio
async def test_progress_messages_logged_at_info_without_callback(generator, store, job, caplog):
    caplog.set_level(logging.DEBUG, logger=PIPELINE_LOGGER)
    await PublishPipeline(generator, store).publish(job)
    levels = {r.getMessage(): r.levelno for r in caplog.records if r.name == PIPELINE_LOGGER}
    assert levels["Post drafted successfully!"] == logging.INFO


@pytest.mark.asyncio
async def test_missing_fields_make_no_calls(pipeline, generator, store, messages):
    result = await pipeline.publish(JobFields(title="Chef"))

    assert result.state == PipelineState.FAILED
    assert result.error_kind == "ValidationError"
    assert result.history == [PipelineState.VALIDATING, PipelineState.FAILED]
    assert "location, requirements" in result.error
    generator.generate.assert_not_awaited()
    store.create.assert_not_awaited()
    assert messages[-1].startswith("Failed to publish:")


@pytest.mark.asyncio
async def test_generation_failure_skips_store(pipeline, generator, store, job):
    generator.generate.side_effect = GenerationExhausted(["gemini:a"])

    result = await pipeline.publish(job)

    assert not result.ok
    assert result.error_kind == "GenerationExhausted"
    assert result.history[-2:] == [PipelineState.GENERATING, PipelineState.FAILED]
    store.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_generation_fails(pipeline, generator, store, job):
    generator.generate.return_value = ""
    result = await pipeline.publish(job)
    assert not result.ok
    store.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_store_failure_is_captured(pipeline, store, job):
    store.create.side_effect = StoreError("create", "Forbidden")

    result = await pipeline.publish(job)

    assert result.state == PipelineState.FAILED
    assert result.error == "create failed: Forbidden"
    assert result.post is None


@pytest.mark.asyncio
async def test_unexpected_error_is_captured(pipeline, store, job):
    store.create.side_effect = RuntimeError("boom")
    result = await pipeline.publish(job)
    assert result.error_kind == "RuntimeError"


@pytest.mark.asyncio
async def test_edit_keeps_existing_title(pipeline, generator, store, job):
    store.get.return_value = GeneratedPost(id="55", title="Original Title")
    store.update.return_value = GeneratedPost(id="55", title="Original Title", url="https://blog/55")

    result = await pipeline.edit("55", job)

    assert result.ok
    store.get.assert_awaited_once_with("55")
    store.update.assert_awaited_once_with("55", "Original Title", "<h1>Backend Engineer</h1>")
    assert result.history == [
        PipelineState.VALIDATING,
        PipelineState.FETCHING,
        PipelineState.GENERATING,
        PipelineState.SUBMITTING,
        PipelineState.DONE,
    ]


@pytest.mark.asyncio
async def test_edit_missing_post_fails_before_generation(pipeline, generator, store, job):
    store.get.side_effect = StoreError("get", "Not Found")

    result = await pipeline.edit("404", job)

    assert result.history[-2:] == [PipelineState.FETCHING, PipelineState.FAILED]
    generator.generate.assert_not_awaited()
    store.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_edit_requires_post_id(pipeline, store, job):
    result = await pipeline.edit("", job)
    assert result.error_kind == "ValidationError"
    assert "postId" in result.error
    store.get.assert_not_awaited()
