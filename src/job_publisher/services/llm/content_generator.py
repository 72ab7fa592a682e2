"""
SEO article generation with ordered provider/model fallback.
"""
import asyncio
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

from ...errors import (
    ConfigurationError,
    GenerationExhausted,
    ModelNotFoundError,
    QuotaExceededError,
)
from ...logging_config import setup_logging
from ...models import JobFields
from .prompts import build_article_prompt

logger = setup_logging(__name__)

_FENCE_RE = re.compile(r"```(?:html|json)?", re.IGNORECASE)


@dataclass(frozen=True)
class ModelCandidate:
    """One provider/model pair tried during generation."""

    provider: str
    model: str

    @classmethod
    def parse(cls, entry: str) -> "ModelCandidate":
        """Parse ``provider:model``; model names may themselves contain ``:``."""
        provider, sep, model = entry.strip().partition(":")
        if not sep or not provider or not model:
            raise ConfigurationError(f"Invalid model candidate '{entry}', expected provider:model")
        return cls(provider=provider.strip().lower(), model=model.strip())

    def __str__(self) -> str:
        return f"{self.provider}:{self.model}"


def parse_candidates(entries: Iterable[str]) -> List[ModelCandidate]:
    return [ModelCandidate.parse(entry) for entry in entries]


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping model output."""
    return _FENCE_RE.sub("", text).strip()


class ContentGenerator:
    """Drafts the HTML article for a job, falling back across model candidates."""

    def __init__(self, candidates: Sequence[ModelCandidate], providers: Dict[str, Any]):
        self.candidates = list(candidates)
        self.providers = providers

    def _provider_for(self, candidate: ModelCandidate):
        try:
            return self.providers[candidate.provider]
        except KeyError:
            raise ConfigurationError(f"Unknown AI provider '{candidate.provider}' in model candidates") from None

    async def generate(self, job: JobFields) -> str:
        """Return the article HTML, or raise GenerationExhausted.

        Candidates whose provider has no API key are skipped. When no candidate
        has a key the last ConfigurationError is raised instead.
        """
        prompt = build_article_prompt(job)
        attempted: List[str] = []
        unconfigured: List[ConfigurationError] = []

        for candidate in self.candidates:
            provider = self._provider_for(candidate)
            attempted.append(str(candidate))
            logger.info(f"Attempting with model: {candidate}")
            try:
                text = await asyncio.to_thread(provider.complete, candidate.model, prompt)
            except QuotaExceededError as e:
                logger.warning(f"{candidate} hit quota limit. Trying next model...", extra={"error": str(e)})
                continue
            except ModelNotFoundError as e:
                logger.warning(f"{candidate} not found. Trying next model...", extra={"error": str(e)})
                continue
            except ConfigurationError as e:
                logger.warning(f"{candidate} is not configured. Trying next model...", extra={"error": str(e)})
                unconfigured.append(e)
                continue
            except Exception as e:
                logger.error(f"Error with {candidate}: {e}", extra={"error_type": type(e).__name__})
                raise

            html = strip_code_fences(text)
            logger.info("Content generated", extra={"model": str(candidate), "content_length": len(html)})
            return html

        if unconfigured and len(unconfigured) == len(attempted):
            raise unconfigured[-1]
        raise GenerationExhausted(attempted)
