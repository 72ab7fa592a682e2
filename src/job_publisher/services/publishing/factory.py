"""
Wiring of providers, generator, parser and store from Settings.
"""
from typing import Optional

from ...config import Settings
from ..blogger import BloggerStore
from ..llm import ContentGenerator, MessageParser, ModelCandidate, build_providers, parse_candidates
from .pipeline import ProgressCallback, PublishPipeline


def build_pipeline(settings: Settings, progress: Optional[ProgressCallback] = None) -> PublishPipeline:
    providers = build_providers(settings)
    generator = ContentGenerator(parse_candidates(settings.content_model_list), providers)
    return PublishPipeline(generator, BloggerStore(settings), progress=progress)


def build_message_parser(settings: Settings) -> MessageParser:
    return MessageParser(ModelCandidate.parse(settings.parser_model), build_providers(settings))
