"""
Hypothesis Module for latsearch

This module accumulates the decoded word sequence of a lattice path:
- Silence filtering and multiword expansion of edge labels
- Cumulative path scoring
- Word error rate against a reference transcript
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from ..config import SILENCE_TOKEN, WORD_DELIMITER
from .wer import read_reference, word_error_rate

def edge_to_words(
    label: str,
    silence_token: str = SILENCE_TOKEN,
    word_delimiter: str = WORD_DELIMITER
) -> List[str]:
    """
    Expand an edge label into the words it contributes

    Args:
        label: Edge label, possibly a delimiter-joined multiword
        silence_token: Label that contributes no words
        word_delimiter: Separator between the parts of a multiword

    Returns:
        List of words in order (empty for silence)
    """
    if label == silence_token:
        return []
    parts = label.split(word_delimiter)
    # Trailing empty parts are dropped, inner ones are kept
    while parts and not parts[-1]:
        parts.pop()
    return parts

@dataclass
class Hypothesis:
    """Word sequence and cumulative score of one decoded path"""
    words: List[str] = field(default_factory=list)
    path_score: float = 0.0
    silence_token: str = SILENCE_TOKEN
    word_delimiter: str = WORD_DELIMITER

    def add_word(self, label: str, combined_score: float) -> None:
        """
        Append the edge at the end of the path

        The score always counts, even when the label adds no words.

        Args:
            label: Label of the traversed edge
            combined_score: Combined acoustic and language score of the edge
        """
        self.path_score += combined_score
        self.words.extend(
            edge_to_words(label, self.silence_token, self.word_delimiter)
        )

    def hypothesis_string(self) -> str:
        """Words of the hypothesis, each followed by a space"""
        return "".join(f"{word} " for word in self.words)

    def compute_wer(self, reference_path: Union[str, Path]) -> float:
        """
        Word error rate of this hypothesis against a reference file

        Args:
            reference_path: File whose first line holds the reference words

        Returns:
            Edit distance divided by the reference length
        """
        return word_error_rate(self.words, read_reference(reference_path))

    def __len__(self) -> int:
        return len(self.words)
