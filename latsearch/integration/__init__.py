"""Batch processing module"""

from .pipeline import (
    LatticePipeline,
    UtteranceResult,
    RunSummary
)

__all__ = [
    'LatticePipeline',
    'UtteranceResult',
    'RunSummary'
]
