"""
Sequential batch publishing from a JSON file.
"""
import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ...errors import PublisherError, ValidationError
from ...logging_config import setup_logging
from ...models import JobFields
from .pipeline import PipelineResult, PipelineState, PublishPipeline

logger = setup_logging(__name__)

DEFAULT_BATCH_DELAY = 2.0

Sleep = Callable[[float], Awaitable[Any]]


class BatchItemResult(BaseModel):
    index: int
    title: Optional[str] = None
    result: PipelineResult


class BatchReport(BaseModel):
    """Per-item outcomes of one batch run."""

    items: List[BatchItemResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[BatchItemResult]:
        return [item for item in self.items if item.result.ok]

    @property
    def failed(self) -> List[BatchItemResult]:
        return [item for item in self.items if not item.result.ok]

    def summary(self) -> str:
        lines = [f"Batch finished: {len(self.succeeded)} succeeded, {len(self.failed)} failed."]
        for item in self.failed:
            lines.append(f"  [{item.index + 1}] {item.title or '(untitled)'}: {item.result.error}")
        return "\n".join(lines)


def load_batch_file(path: Union[str, Path]) -> List[Any]:
    """Read a JSON array of job objects."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise PublisherError("Batch file must contain a JSON array of job objects.")
    return data


def _invalid_item(error: Exception) -> PipelineResult:
    return PipelineResult(
        state=PipelineState.FAILED,
        error=str(error),
        error_kind=type(error).__name__,
        history=[PipelineState.VALIDATING, PipelineState.FAILED],
    )


async def run_batch(
    pipeline: PublishPipeline,
    items: List[Any],
    publish: bool = False,
    delay: float = DEFAULT_BATCH_DELAY,
    sleep: Sleep = asyncio.sleep,
    progress: Optional[Callable[[str], None]] = None,
) -> BatchReport:
    """Run one publish pipeline per item, pausing ``delay`` seconds between items.

    A failed item is recorded and the loop moves on to the next one.
    """
    report = BatchReport()
    total = len(items)
    logger.info(f"Found {total} jobs to process.")

    for index, raw in enumerate(items):
        title = raw.get("title") if isinstance(raw, dict) else None
        message = f"[{index + 1}/{total}] Processing: {title}..."
        if progress is not None:
            logger.debug(message)
            progress(message)
        else:
            logger.info(message)

        if not isinstance(raw, dict):
            result = _invalid_item(ValidationError(["title", "location", "requirements"]))
        else:
            try:
                job = JobFields.model_validate(raw)
            except PydanticValidationError as e:
                result = _invalid_item(PublisherError(f"Invalid job object: {e.errors()[0]['msg']}"))
            else:
                result = await pipeline.publish(job, publish=publish, labels=job.labels)

        if not result.ok:
            logger.warning(f"Item {index + 1} failed: {result.error}", extra={"error_kind": result.error_kind})
        report.items.append(BatchItemResult(index=index, title=title, result=result))

        # Small delay to avoid API rate limits
        if index < total - 1:
            if progress is not None:
                progress(f"Waiting {delay:g} seconds before next job...")
            await sleep(delay)

    logger.info(
        "Batch process completed",
        extra={"succeeded": len(report.succeeded), "failed": len(report.failed)},
    )
    return report
