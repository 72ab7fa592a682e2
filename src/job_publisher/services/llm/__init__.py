"""
LLM-backed content generation and message extraction.
"""

from .content_generator import ContentGenerator, ModelCandidate, parse_candidates, strip_code_fences
from .message_parser import MessageParser
from .providers import GeminiProvider, OpenRouterProvider, build_providers

__all__ = [
    "ContentGenerator",
    "GeminiProvider",
    "MessageParser",
    "ModelCandidate",
    "OpenRouterProvider",
    "build_providers",
    "parse_candidates",
    "strip_code_fences",
]
