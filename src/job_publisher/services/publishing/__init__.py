"""
Publishing orchestration: single-job pipelines and the batch driver.
"""

from .batch import BatchReport, load_batch_file, run_batch
from .pipeline import PipelineResult, PipelineState, PublishPipeline

__all__ = [
    "BatchReport",
    "PipelineResult",
    "PipelineState",
    "PublishPipeline",
    "load_batch_file",
    "run_batch",
]
