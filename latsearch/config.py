"""
Configuration for latsearch

Holds the reserved lattice tokens and the per-run query settings used by
the batch pipeline.
"""

from dataclasses import dataclass, field
from typing import List

SILENCE_TOKEN = "-silence-"
WORD_DELIMITER = "_"
DEFAULT_QUERY_TIME = 0.5
DEFAULT_HIT_WORDS = (SILENCE_TOKEN, "i")

@dataclass
class LatticeConfig:
    """Settings shared by every lattice processed in a run"""
    silence_token: str = SILENCE_TOKEN
    word_delimiter: str = WORD_DELIMITER
    query_time: float = DEFAULT_QUERY_TIME
    hit_words: List[str] = field(default_factory=lambda: list(DEFAULT_HIT_WORDS))
    show_progress: bool = True
