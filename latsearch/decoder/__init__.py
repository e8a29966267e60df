"""Hypothesis and scoring module"""

from .hypothesis import (
    Hypothesis,
    edge_to_words
)
from .wer import (
    edit_distance,
    word_error_rate,
    read_reference,
    read_reference_line
)

__all__ = [
    'Hypothesis',
    'edge_to_words',
    'edit_distance',
    'word_error_rate',
    'read_reference',
    'read_reference_line'
]
