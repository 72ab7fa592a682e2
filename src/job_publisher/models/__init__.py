"""
Data models for the publishing pipeline.
"""

from .job import (
    DEFAULT_COMPANY,
    DEFAULT_JOB_TYPE,
    DEFAULT_SALARY,
    GeneratedPost,
    JobFields,
)

__all__ = [
    "DEFAULT_COMPANY",
    "DEFAULT_JOB_TYPE",
    "DEFAULT_SALARY",
    "GeneratedPost",
    "JobFields",
]
