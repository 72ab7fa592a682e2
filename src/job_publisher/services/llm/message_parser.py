"""
Free-text job message extraction.
"""
import asyncio
import json
from typing import Any, Dict, Optional

from ...errors import ParseError
from ...logging_config import setup_logging
from ...models import JobFields
from .content_generator import ModelCandidate, strip_code_fences
from .prompts import build_extraction_prompt

logger = setup_logging(__name__)


class MessageParser:
    """Turns an unstructured chat message into JobFields via one LLM call."""

    def __init__(self, candidate: ModelCandidate, providers: Dict[str, Any]):
        self.candidate = candidate
        self.providers = providers

    async def parse(self, raw_text: str) -> Optional[JobFields]:
        """Return the extracted fields, or None when nothing usable came back."""
        prompt = build_extraction_prompt(raw_text)
        try:
            provider = self.providers[self.candidate.provider]
            text = await asyncio.to_thread(provider.complete, self.candidate.model, prompt, True)
            data = json.loads(strip_code_fences(text))
            if not isinstance(data, dict):
                raise ParseError(f"expected a JSON object, got {type(data).__name__}")
            job = JobFields.model_validate(data)
        except Exception as e:
            logger.error(f"Error parsing message: {e}", extra={"error_type": type(e).__name__})
            return None

        logger.info("Parsed job details", extra={"job": job.model_dump(by_alias=True, exclude_none=True)})
        return job
