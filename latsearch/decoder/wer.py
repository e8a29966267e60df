"""
Word error rate computation

WER is the Levenshtein distance between the hypothesis and reference word
sequences (unit cost for insertion, deletion and substitution) divided by
the number of reference words.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np

from ..errors import EmptyReferenceError, FileAccessError, MalformedInputError

logger = logging.getLogger(__name__)

def edit_distance(hypothesis: Sequence[str], reference: Sequence[str]) -> int:
    """
    Minimum number of word edits turning hypothesis into reference

    Args:
        hypothesis: Decoded words
        reference: Reference words

    Returns:
        Levenshtein distance over words
    """
    table = np.zeros((len(hypothesis) + 1, len(reference) + 1), dtype=np.int64)
    table[:, 0] = np.arange(len(hypothesis) + 1)
    table[0, :] = np.arange(len(reference) + 1)

    for i in range(1, len(hypothesis) + 1):
        for j in range(1, len(reference) + 1):
            if hypothesis[i - 1] == reference[j - 1]:
                table[i, j] = table[i - 1, j - 1]
            else:
                table[i, j] = 1 + min(
                    table[i - 1, j],
                    table[i, j - 1],
                    table[i - 1, j - 1]
                )

    return int(table[len(hypothesis), len(reference)])

def word_error_rate(hypothesis: Sequence[str], reference: Sequence[str]) -> float:
    """
    Compute WER of a hypothesis against a reference

    Raises:
        EmptyReferenceError: If the reference has no words
    """
    if len(reference) == 0:
        raise EmptyReferenceError("word error rate is undefined for an empty reference")
    return edit_distance(hypothesis, reference) / len(reference)

def read_reference_line(path: Union[str, Path]) -> str:
    """First line of a transcript file without its line ending"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            first_line = f.readline()
    except OSError as err:
        raise FileAccessError(path) from err
    except UnicodeDecodeError as err:
        raise MalformedInputError(path, "reference is not valid UTF-8") from err
    return first_line.rstrip("\r\n")

def read_reference(path: Union[str, Path]) -> List[str]:
    """
    Read the reference words from the first line of a transcript file

    Args:
        path: Reference transcript file

    Returns:
        Whitespace-separated words of the first line
    """
    words = read_reference_line(path).split()
    logger.debug("Read %d reference words from %s", len(words), path)
    return words
