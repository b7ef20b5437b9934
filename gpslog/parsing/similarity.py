"""
String similarity scorers for matching logical column names to raw headers.

A scorer is any callable ``(a, b) -> float`` where higher means more alike.
"""

import re
from collections import Counter
from difflib import SequenceMatcher
from typing import Callable, Sequence, Tuple

Scorer = Callable[[str, str], float]

_WHITESPACE_RE = re.compile(r"\s+")


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def dice_coefficient(a: str, b: str) -> float:
    """
    Dice coefficient over character bigrams, ignoring whitespace.

    Case-sensitive. Returns 1.0 for identical strings and 0.0 when either
    string is shorter than two characters.
    """
    first = _WHITESPACE_RE.sub("", a)
    second = _WHITESPACE_RE.sub("", b)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = _bigrams(first)
    second_bigrams = _bigrams(second)
    overlap = sum((first_bigrams & second_bigrams).values())

    return 2.0 * overlap / (len(first) + len(second) - 2)


def sequence_ratio(a: str, b: str) -> float:
    """difflib ratio, for callers who prefer longest-matching-block scoring."""
    return SequenceMatcher(None, a, b).ratio()


def best_match(target: str, candidates: Sequence[str], scorer: Scorer = dice_coefficient) -> Tuple[int, float]:
    """
    Find the candidate most similar to target.

    Ties go to the first candidate.

    Returns:
        (index, score) of the best candidate, or (-1, 0.0) when there are none
    """
    best_index, best_score = -1, 0.0
    for index, candidate in enumerate(candidates):
        score = scorer(target, candidate)
        if best_index < 0 or score > best_score:
            best_index, best_score = index, score
    return best_index, best_score
