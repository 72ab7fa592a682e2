"""
Publish and edit pipelines.

A pipeline run walks Validating -> Generating -> Submitting and ends in Done
or Failed. Runs never raise: every failure is captured in the returned
PipelineResult so entry points can report it and keep going.
"""
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from ...errors import PublisherError, ValidationError
from ...logging_config import setup_logging
from ...models import GeneratedPost, JobFields

logger = setup_logging(__name__)

ProgressCallback = Callable[[str], None]


class PipelineState(str, Enum):
    VALIDATING = "validating"
    FETCHING = "fetching"
    GENERATING = "generating"
    SUBMITTING = "submitting"
    DONE = "done"
    FAILED = "failed"


class PipelineResult(BaseModel):
    """Outcome of one pipeline run."""

    state: PipelineState = PipelineState.VALIDATING
    post: Optional[GeneratedPost] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    history: List[PipelineState] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == PipelineState.DONE


class PublishPipeline:
    """Validates job fields, drafts the article and submits it to the post store."""

    def __init__(self, generator, store, progress: Optional[ProgressCallback] = None):
        self.generator = generator
        self.store = store
        self.progress = progress

    def _report(self, message: str) -> None:
        # The callback already shows the message, keep the log at debug level
        if self.progress is not None:
            logger.debug(message)
            self.progress(message)
        else:
            logger.info(message)

    @staticmethod
    def _enter(result: PipelineResult, state: PipelineState) -> None:
        result.state = state
        result.history.append(state)

    def _fail(self, result: PipelineResult, error: Exception, action: str) -> PipelineResult:
        self._enter(result, PipelineState.FAILED)
        result.error = str(error)
        result.error_kind = type(error).__name__
        if isinstance(error, PublisherError):
            logger.error(f"Failed to {action}: {error}", extra={"error_kind": result.error_kind})
        else:
            logger.exception(f"Unexpected error while trying to {action}")
        self._report(f"Failed to {action}: {error}")
        return result

    def _validate(self, result: PipelineResult, job: JobFields, post_id: Optional[str] = None) -> None:
        self._enter(result, PipelineState.VALIDATING)
        missing = job.missing_required()
        if post_id is not None and not post_id:
            missing.insert(0, "postId")
        if missing:
            raise ValidationError(missing)

    async def _generate(self, result: PipelineResult, job: JobFields) -> str:
        self._enter(result, PipelineState.GENERATING)
        html = await self.generator.generate(job)
        if not html:
            raise PublisherError("The AI model returned empty content")
        self._report("Content generated successfully.")
        return html

    async def publish(
        self, job: JobFields, publish: bool = False, labels: Optional[List[str]] = None
    ) -> PipelineResult:
        """Create a draft (or a live post when ``publish``) for the job."""
        result = PipelineResult()
        try:
            self._validate(result, job)
            self._report(f"Generating content for: {job.title} in {job.location}...")
            html = await self._generate(result, job)

            self._enter(result, PipelineState.SUBMITTING)
            self._report("Publishing to Blogger..." if publish else "Drafting to Blogger...")
            post = await self.store.create(
                job.post_title(),
                html,
                is_draft=not publish,
                labels=labels if labels is not None else job.labels,
            )
        except Exception as e:
            return self._fail(result, e, "publish")

        self._enter(result, PipelineState.DONE)
        result.post = post
        self._report(f"Post {'published' if publish else 'drafted'} successfully!")
        self._report(f"ID: {post.id}")
        self._report(f"URL: {post.url}")
        return result

    async def edit(self, post_id: str, job: JobFields) -> PipelineResult:
        """Regenerate the body of an existing post, keeping its current title."""
        result = PipelineResult()
        try:
            self._validate(result, job, post_id=post_id or "")

            self._enter(result, PipelineState.FETCHING)
            self._report(f"Fetching post {post_id}...")
            existing = await self.store.get(post_id)
            self._report(f"Found post: {existing.title}")

            self._report("Generating updated content...")
            html = await self._generate(result, job)

            self._enter(result, PipelineState.SUBMITTING)
            self._report("Updating Blogger post...")
            post = await self.store.update(post_id, existing.title, html)
        except Exception as e:
            return self._fail(result, e, "edit")

        self._enter(result, PipelineState.DONE)
        result.post = post
        self._report("Post updated successfully!")
        self._report(f"URL: {post.url}")
        return result
